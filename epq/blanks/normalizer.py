"""
Blank notation normalizer.

Question text written by different authors marks fill-in blanks in
different ways: ``blank_1`` tokens, empty brackets ``[ ]``, ``*...*``
spans, or long runs of underscores. normalize_question_blanks() rewrites
all of them to one canonical ``___`` marker and reports the blank
positions the text implies. It runs when questions are imported or
refreshed, never while grading.
"""

from __future__ import annotations

import json
import logging
import re
from enum import Enum
from typing import Any, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from ..diagnostics import Diagnostic, DiagnosticObserver, LoggingObserver

logger = logging.getLogger(__name__)

BLANK_MARKER = "___"

BLANK_TAG_PATTERN = re.compile(r"\bblank_(\d+)\b")
BRACKET_PATTERN = re.compile(r"\[\s*\]")
# Single asterisks only; runs such as **bold** are left alone
ASTERISK_PATTERN = re.compile(r"(?<!\*)\*[^*]+\*(?!\*)")
UNDERSCORE_PATTERN = re.compile(r"_{3,}")

# Stands in for markers produced by earlier passes so the underscore pass
# only counts underscore runs that were in the source text.
_PLACEHOLDER = "\x00"


class BlankFormat(str, Enum):
    """Blank notation detected in the source text."""

    BLANK_TAG = "blank_n"
    UNDERSCORE = "underscore"
    BRACKET = "bracket"
    ASTERISK = "asterisk"
    MIXED = "mixed"
    NONE = "none"


class NormalizationResult(BaseModel):
    """
    Outcome of normalizing one question text.

    Attributes:
        normalized_text: Text with every blank rewritten to ``___``. For
            non-string input this is the input itself (``""`` for None).
        blank_positions: Blank positions implied by the text, ascending
        original_format: Notation found in the source text
    """

    model_config = ConfigDict(frozen=True)

    normalized_text: Any = ""
    blank_positions: list[int] = Field(default_factory=list)
    original_format: BlankFormat = BlankFormat.NONE

    @property
    def blank_count(self) -> int:
        return len(self.blank_positions)


class BlankConfigurationReport(BaseModel):
    """Comparison of blanks implied by text against authored blanks."""

    is_valid: bool
    expected_count: int
    actual_count: int
    message: str


def detect_blank_format(text: str) -> BlankFormat:
    """Identify which blank notation(s) a text uses."""
    found = [
        fmt
        for fmt, pattern in (
            (BlankFormat.BLANK_TAG, BLANK_TAG_PATTERN),
            (BlankFormat.UNDERSCORE, UNDERSCORE_PATTERN),
            (BlankFormat.BRACKET, BRACKET_PATTERN),
            (BlankFormat.ASTERISK, ASTERISK_PATTERN),
        )
        if pattern.search(text)
    ]
    if not found:
        return BlankFormat.NONE
    if len(found) > 1:
        return BlankFormat.MIXED
    return found[0]


def normalize_question_blanks(question_text: Any) -> NormalizationResult:
    """
    Rewrite every blank notation in question text to ``___``.

    Passes run in a fixed order: ``blank_<n>`` tokens (position ``n``,
    not repeated), then empty brackets, asterisk spans and underscore
    runs (each taking the next sequential position). Positions are
    returned sorted.

    Args:
        question_text: Raw question text

    Returns:
        NormalizationResult

    Examples:
        >>> r = normalize_question_blanks("Multiple blank_1 and blank_2 here")
        >>> r.normalized_text, r.blank_positions, r.original_format.value
        ('Multiple ___ and ___ here', [1, 2], 'blank_n')
    """
    if not question_text or not isinstance(question_text, str):
        return NormalizationResult(normalized_text=question_text or "")

    original_format = detect_blank_format(question_text)
    positions: list[int] = []

    def _tagged(match: re.Match) -> str:
        position = int(match.group(1))
        if position not in positions:
            positions.append(position)
        return _PLACEHOLDER

    def _sequential(match: re.Match) -> str:
        positions.append(len(positions) + 1)
        return _PLACEHOLDER

    text = BLANK_TAG_PATTERN.sub(_tagged, question_text)
    text = BRACKET_PATTERN.sub(_sequential, text)
    text = ASTERISK_PATTERN.sub(_sequential, text)
    text = UNDERSCORE_PATTERN.sub(_sequential, text)
    text = text.replace(_PLACEHOLDER, BLANK_MARKER)

    positions.sort()

    logger.debug(
        "Normalized question blanks",
        extra={
            "extra_data": {
                "original_format": original_format.value,
                "blank_count": len(positions),
                "blank_positions": positions,
            }
        },
    )

    return NormalizationResult(
        normalized_text=text,
        blank_positions=positions,
        original_format=original_format,
    )


def extract_blank_positions(question_text: Any) -> list[int]:
    """Blank positions implied by a question text."""
    return normalize_question_blanks(question_text).blank_positions


def count_blanks(question_text: Any) -> int:
    """Number of blanks implied by a question text."""
    return len(normalize_question_blanks(question_text).blank_positions)


def _blank_id(blank: Any) -> Any:
    if isinstance(blank, Mapping):
        return blank.get("blank_id")
    return getattr(blank, "blank_id", None)


def map_blank_ids_to_positions(blanks: Any) -> dict[int, int]:
    """
    Map authored blank ids to their 1-based position in the blanks array.

    Used when an answer refers to blanks by array order rather than by
    id. Entries without an integer ``blank_id`` are skipped but still
    occupy their position.

    Args:
        blanks: BlankDescriptor instances or raw blank mappings
    """
    mapping: dict[int, int] = {}
    if not isinstance(blanks, (list, tuple)):
        return mapping
    for index, blank in enumerate(blanks):
        blank_id = _blank_id(blank)
        if isinstance(blank_id, int) and not isinstance(blank_id, bool):
            mapping[blank_id] = index + 1
    return mapping


def validate_blank_configuration(question_text: Any, blanks: Any) -> BlankConfigurationReport:
    """
    Check that authored blanks match the blanks in the question text.

    This is an authoring-time lint; grading never calls it.
    """
    expected_count = count_blanks(question_text)
    actual_count = len(blanks) if isinstance(blanks, (list, tuple)) else 0

    is_valid = expected_count == actual_count
    if is_valid:
        message = "Blank configuration is valid"
    elif expected_count > actual_count:
        message = f"Question has {expected_count} blanks but only {actual_count} configured"
    else:
        message = f"Question has {expected_count} blanks but {actual_count} are configured"

    return BlankConfigurationReport(
        is_valid=is_valid,
        expected_count=expected_count,
        actual_count=actual_count,
        message=message,
    )


def _split_to_object(answer: str) -> str:
    parts = [part.strip() for part in answer.split(",")]
    return json.dumps(
        {str(index + 1): part for index, part in enumerate(parts)},
        separators=(",", ":"),
        ensure_ascii=False,
    )


def normalize_multi_blank_answer(answer: Any, expected_format: str) -> str:
    """
    Convert a multi-blank answer between its two encodings.

    Args:
        answer: Answer as text (``"a, b"`` or ``'{"1":"a"}'``) or as a mapping
        expected_format: ``"object"`` for JSON object text, ``"string"``
            for comma-joined text

    Returns:
        The answer in the requested encoding (``""`` for unusable input)
    """
    if isinstance(answer, str):
        if expected_format == "string":
            return answer
        if answer.startswith("{"):
            try:
                json.loads(answer)
            except json.JSONDecodeError:
                return _split_to_object(answer)
            return answer
        return _split_to_object(answer)

    if isinstance(answer, Mapping):
        if expected_format == "object":
            return json.dumps(dict(answer), separators=(",", ":"), ensure_ascii=False)
        return ", ".join(str(value) for value in answer.values())

    return ""


def process_question_for_import(
    question: Mapping[str, Any],
    observer: DiagnosticObserver | None = None,
) -> dict[str, Any]:
    """
    Prepare a raw question version for storage.

    Returns a copy with ``question_text`` normalized. A mismatch between
    the text's blanks and the authored ``blanks`` array is reported to the
    observer at error level; the question is still returned.
    """
    observer = observer or LoggingObserver(logger)
    processed = dict(question)
    question_type = processed.get("question_type")

    question_text = processed.get("question_text")
    if not question_text or not isinstance(question_text, str):
        return processed

    result = normalize_question_blanks(question_text)
    processed["question_text"] = result.normalized_text

    if result.blank_positions:
        observer(
            Diagnostic(
                level="info",
                event="normalized_blanks_during_import",
                question_type=question_type,
                data={
                    "blank_count": result.blank_count,
                    "has_blank_config": bool(processed.get("blanks")),
                },
            )
        )

    blanks = processed.get("blanks")
    if isinstance(blanks, list):
        report = validate_blank_configuration(result.normalized_text, blanks)
        if not report.is_valid:
            observer(
                Diagnostic(
                    level="error",
                    event="blank_configuration_mismatch",
                    question_type=question_type,
                    data=report.model_dump(),
                )
            )

    return processed


def process_questions_for_import(
    questions: Iterable[Mapping[str, Any]] | Any,
    observer: DiagnosticObserver | None = None,
) -> list[dict[str, Any]]:
    """Batch form of process_question_for_import()."""
    if not isinstance(questions, (list, tuple)):
        return []
    return [process_question_for_import(q, observer) for q in questions]
