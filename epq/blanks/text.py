"""
Question text normalization for de-duplication.

Two imports of the same question rarely carry byte-identical text: one
may be HTML, another markdown, another pasted with smart quotes. The
functions here reduce question text to a comparison form so the import
pipeline can recognise a question it has already stored.
"""

from __future__ import annotations

import hashlib
import re
import unicodedata
from typing import Any

_ENTITIES = (
    (re.compile(r"&nbsp;", re.IGNORECASE), " "),
    (re.compile(r"&amp;", re.IGNORECASE), "&"),
    (re.compile(r"&lt;", re.IGNORECASE), "<"),
    (re.compile(r"&gt;", re.IGNORECASE), ">"),
    (re.compile(r"&quot;", re.IGNORECASE), '"'),
    (re.compile(r"&#39;", re.IGNORECASE), "'"),
    (re.compile(r"&apos;", re.IGNORECASE), "'"),
)

_TAG = re.compile(r"<[^>]*>")

_MARKDOWN = (
    (re.compile(r"(\*\*|__)(.*?)\1"), r"\2"),  # bold
    (re.compile(r"(\*|_)(.*?)\1"), r"\2"),  # italic
    (re.compile(r"`([^`]+)`"), r"\1"),  # inline code
    (re.compile(r"^#+\s+", re.MULTILINE), ""),
    (re.compile(r"^>\s+", re.MULTILINE), ""),
    (re.compile(r"^\s*[-*+]\s+", re.MULTILINE), ""),
    (re.compile(r"^\s*\d+\.\s+", re.MULTILINE), ""),
)

_PUNCTUATION = str.maketrans(
    {
        "‘": "'",
        "’": "'",
        "“": '"',
        "”": '"',
        "–": "-",
        "—": "-",
        "…": "...",
    }
)

_WHITESPACE = re.compile(r"\s+")


def normalize_question_text(text: Any) -> str:
    """
    Reduce question text to its comparison form.

    Applies, in order: NFKC normalization, HTML entity decoding, tag
    stripping, markdown stripping, quote/dash straightening, lowercasing
    and whitespace collapsing.

    Args:
        text: Question text (None and empty give "")

    Returns:
        Normalized text

    Examples:
        >>> normalize_question_text("<p>What is <b>2&nbsp;+&nbsp;2</b>?</p>")
        'what is 2 + 2?'
    """
    if not text:
        return ""

    normalized = unicodedata.normalize("NFKC", str(text))

    for pattern, replacement in _ENTITIES:
        normalized = pattern.sub(replacement, normalized)

    normalized = _TAG.sub("", normalized)

    for pattern, replacement in _MARKDOWN:
        normalized = pattern.sub(replacement, normalized)

    normalized = normalized.translate(_PUNCTUATION)
    normalized = normalized.lower()
    normalized = _WHITESPACE.sub(" ", normalized)
    return normalized.strip()


def question_texts_match(first: Any, second: Any) -> bool:
    """Check whether two question texts are the same after normalization."""
    return normalize_question_text(first) == normalize_question_text(second)


def hash_question_text(text: Any) -> str:
    """Stable hex digest of the normalized text, suitable as a lookup key."""
    normalized = normalize_question_text(text)
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()
