"""
Decoding and normalization helpers shared by the evaluators.

Structured answers arrive as JSON text (multi-blank objects, zone
mappings, selection arrays). Everything here is pure; decode failures
raise AnswerDecodeError so evaluators can turn them into verdicts.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Iterable, Mapping

ZONE_PREFIX = "zone_"

# Leading decimal literal, optionally signed, optionally with exponent
_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_KEY = re.compile(r"0|[1-9]\d*")


class AnswerDecodeError(ValueError):
    """Raised when structured answer text cannot be decoded."""

    def __init__(self, text: Any, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(reason)

    def snippet(self, limit: int = 100) -> str:
        """First ``limit`` characters of the offending input."""
        if not isinstance(self.text, str):
            return repr(self.text)[:limit]
        return self.text[:limit]

    @property
    def full_length(self) -> int:
        return len(self.text) if isinstance(self.text, str) else 0


def normalize_string(value: Any, case_sensitive: bool = False) -> str:
    """
    Trim and (by default) lowercase a string for comparison.

    Non-string input normalizes to the empty string.
    """
    if not value or not isinstance(value, str):
        return ""
    trimmed = value.strip()
    return trimmed if case_sensitive else trimmed.lower()


def stringify_value(value: Any) -> str:
    """
    Render a decoded JSON value as text.

    Matches how the browser client stringifies answer values: booleans
    and null in JSON spelling, integral floats without a fractional part,
    arrays joined with commas.
    """
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if v is None else stringify_value(v) for v in value)
    if isinstance(value, Mapping):
        return "[object Object]"
    return str(value)


def decode_json(text: Any) -> Any:
    """
    Decode JSON answer text.

    Raises:
        AnswerDecodeError: If the input is not a non-empty string or is
            not valid JSON
    """
    if not text or not isinstance(text, str):
        raise AnswerDecodeError(text, f"expected JSON text, got {type(text).__name__}")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise AnswerDecodeError(text, str(e)) from e


def object_values_in_order(mapping: Mapping[str, Any]) -> list[Any]:
    """
    Values of a decoded JSON object in object order.

    Integer-like keys come first in ascending numeric order, the remaining
    keys follow in insertion order. This is the order the browser client
    enumerates blank answers in.
    """
    integer_keys = sorted(
        (k for k in mapping if isinstance(k, str) and _INTEGER_KEY.fullmatch(k)),
        key=int,
    )
    seen = set(integer_keys)
    other_keys = [k for k in mapping if k not in seen]
    return [mapping[k] for k in integer_keys + other_keys]


def decode_blank_mapping(text: str) -> dict[str, Any]:
    """
    Decode an object-encoded multi-blank answer (``{"1": "a", "2": "b"}``).

    Raises:
        AnswerDecodeError: If the text is not a JSON object
    """
    decoded = decode_json(text)
    if not isinstance(decoded, dict):
        raise AnswerDecodeError(text, "expected a JSON object of blank answers")
    return decoded


def normalize_zone_key(key: Any) -> str:
    """Map ``"1"`` and ``"zone_1"`` to the same zone key."""
    key = str(key)
    return key if key.startswith(ZONE_PREFIX) else f"{ZONE_PREFIX}{key}"


def decode_zone_mapping(answer: str | Mapping[str, Any]) -> dict[str, list[Any]]:
    """
    Decode a drag-and-drop answer into ``zone key -> items``.

    Accepts JSON text or an already decoded mapping. Zone keys are
    normalized; zone values that are not lists count as empty zones.

    Raises:
        AnswerDecodeError: If the answer is not a JSON object
    """
    if isinstance(answer, Mapping):
        decoded: Any = answer
    else:
        decoded = decode_json(answer)
        if not isinstance(decoded, dict):
            raise AnswerDecodeError(answer, "expected a JSON object of zone assignments")

    zones: dict[str, list[Any]] = {}
    for key, items in decoded.items():
        zones[normalize_zone_key(key)] = list(items) if isinstance(items, list) else []
    return zones


def decode_selection_list(answer: str | Iterable[Any], promote_bare: bool = False) -> list[Any]:
    """
    Decode a multiple-response selection into a list.

    Args:
        answer: JSON array text, or an already decoded list/tuple
        promote_bare: Treat text that does not start with ``[`` as a
            single selection (legacy stored answers)

    Raises:
        AnswerDecodeError: If the answer cannot be read as a list
    """
    if isinstance(answer, (list, tuple)):
        return list(answer)
    if not isinstance(answer, str):
        raise AnswerDecodeError(answer, "expected a JSON array of selections")
    if promote_bare and not answer.startswith("["):
        return [answer]
    decoded = decode_json(answer)
    if not isinstance(decoded, list):
        raise AnswerDecodeError(answer, "expected a JSON array of selections")
    return decoded


def compare_as_set(
    first: Iterable[Any],
    second: Iterable[Any],
    case_sensitive: bool = False,
) -> bool:
    """
    Compare two collections ignoring order.

    Both sides must have the same length and the same set of normalized
    members.
    """
    first = list(first)
    second = list(second)
    if len(first) != len(second):
        return False

    def _norm(item: Any) -> str:
        return normalize_string(stringify_value(item), case_sensitive)

    return {_norm(i) for i in first} == {_norm(i) for i in second}


def parse_leading_number(text: Any) -> float | None:
    """
    Parse the leading decimal literal of a string.

    ``"100.00"`` gives 100.0, ``"42 kg"`` gives 42.0, ``"abc"`` gives None.
    """
    if isinstance(text, bool):
        return None
    if isinstance(text, (int, float)):
        return float(text)
    if not isinstance(text, str):
        return None
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    return float(match.group(0))
