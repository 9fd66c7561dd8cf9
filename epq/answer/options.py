"""
Question type tags and validation option models.

Stored question versions carry a loosely shaped configuration bag. This
module gives that bag a schema (ValidationOptions) so evaluators can pick
the fields their question type needs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)


class QuestionType(str, Enum):
    """Closed set of gradable question types."""

    MULTIPLE_CHOICE = "multiple_choice"
    NUMERICAL_ENTRY = "numerical_entry"
    SHORT_ANSWER = "short_answer"
    SELECT_FROM_LIST = "select_from_list"
    DRAG_AND_DROP = "drag_and_drop"
    MULTIPLE_RESPONSE = "multiple_response"
    EITHER_OR = "either_or"

    @classmethod
    def parse(cls, tag: Any) -> QuestionType | None:
        """
        Resolve a wire tag to a QuestionType.

        Args:
            tag: QuestionType member or its string value

        Returns:
            Matching member, or None for unrecognized tags
        """
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, str):
            try:
                return cls(tag)
            except ValueError:
                return None
        return None


class BlankDescriptor(BaseModel):
    """One fill-in blank of a multi-blank question."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    blank_id: int = Field(
        validation_alias=AliasChoices("blank_id", "blankId"),
        description="Stable key used in object-encoded answers",
    )
    answer_choices: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("answer_choices", "answerChoices"),
    )
    correct_answer: str = Field(
        default="",
        validation_alias=AliasChoices("correct_answer", "correctAnswer"),
    )

    @field_validator("answer_choices", mode="before")
    @classmethod
    def _none_choices(cls, v: Any) -> Any:
        return [] if v is None else v


class DropZoneDescriptor(BaseModel):
    """A drag-and-drop target zone."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    zone_id: int = Field(validation_alias=AliasChoices("zone_id", "zoneId"))
    zone_label: str = Field(
        default="",
        validation_alias=AliasChoices("zone_label", "zoneLabel", "label"),
    )

    @property
    def key(self) -> str:
        """Normalized zone key as used in answer mappings."""
        return f"zone_{self.zone_id}"


def _note_dropped(info: ValidationInfo, field: str, count: int) -> None:
    if count and isinstance(info.context, dict):
        info.context.setdefault("dropped", {})[field] = count


def _valid_entries(model: type[BaseModel], entries: list[Any]) -> list[BaseModel]:
    kept = []
    for entry in entries:
        try:
            kept.append(model.model_validate(entry))
        except ValidationError:
            continue
    return kept


class ValidationOptions(BaseModel):
    """
    Configuration bag attached to a question version.

    Both camelCase (as sent by the browser client) and snake_case (as
    stored with question versions) keys are accepted. Keys that no
    evaluator uses, such as ``allowMultiple``, are ignored. Null or
    malformed entries inside the list fields are dropped; when a
    validation context dict is supplied, the number dropped per field is
    recorded under its ``"dropped"`` key.

    Attributes:
        case_sensitive: Whether free-text comparison respects case
        acceptable_answers: Alternate correct phrasings, checked after the
            primary correct answer
        blanks: Blank configuration for multi-blank questions
        drop_zones: Zone configuration for drag-and-drop questions
    """

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", frozen=True, coerce_numbers_to_str=True
    )

    case_sensitive: bool = Field(
        default=False,
        validation_alias=AliasChoices("case_sensitive", "caseSensitive"),
    )
    acceptable_answers: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("acceptable_answers", "acceptableAnswers"),
    )
    blanks: list[BlankDescriptor] | None = None
    drop_zones: list[DropZoneDescriptor] | None = Field(
        default=None,
        validation_alias=AliasChoices("drop_zones", "dropZones"),
    )

    @field_validator("case_sensitive", mode="before")
    @classmethod
    def _none_is_insensitive(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("acceptable_answers", mode="before")
    @classmethod
    def _coerce_acceptable(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        if isinstance(v, list):
            kept = [
                a for a in v
                if isinstance(a, (str, int, float)) and not isinstance(a, bool)
            ]
            _note_dropped(info, info.field_name, len(v) - len(kept))
            return kept
        return v

    @field_validator("blanks", mode="before")
    @classmethod
    def _drop_bad_blanks(cls, v: Any, info: ValidationInfo) -> Any:
        if not isinstance(v, list):
            return v
        kept = _valid_entries(BlankDescriptor, v)
        _note_dropped(info, info.field_name, len(v) - len(kept))
        return kept

    @field_validator("drop_zones", mode="before")
    @classmethod
    def _drop_bad_zones(cls, v: Any, info: ValidationInfo) -> Any:
        if not isinstance(v, list):
            return v
        kept = _valid_entries(DropZoneDescriptor, v)
        _note_dropped(info, info.field_name, len(v) - len(kept))
        return kept

    @classmethod
    def keys_for(cls, fields: Iterable[str]) -> set[str]:
        """Every input key (field name or alias) that feeds the given fields."""
        keys: set[str] = set()
        for name in fields:
            keys.add(name)
            alias = cls.model_fields[name].validation_alias
            if isinstance(alias, AliasChoices):
                keys.update(choice for choice in alias.choices if isinstance(choice, str))
        return keys

    @classmethod
    def coerce(
        cls,
        options: ValidationOptions | dict[str, Any] | None,
        *,
        fields: Iterable[str] | None = None,
        dropped: dict[str, int] | None = None,
    ) -> ValidationOptions:
        """
        Build options from whatever the caller passed.

        Args:
            options: Option bag, an existing instance, or None
            fields: If given, only these fields are read from a raw bag;
                malformed values in other keys are never looked at
            dropped: Receives the number of discarded list entries per field

        Raises:
            pydantic.ValidationError: If a field that is read has the wrong shape
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if fields is not None and isinstance(options, Mapping):
            keys = cls.keys_for(fields)
            options = {k: v for k, v in options.items() if k in keys}
        context: dict[str, Any] = {}
        bag = cls.model_validate(options, context=context)
        if dropped is not None:
            dropped.update(context.get("dropped", {}))
        return bag

    def is_empty(self) -> bool:
        """True when no option differs from its default."""
        return not (
            self.case_sensitive
            or self.acceptable_answers
            or self.blanks
            or self.drop_zones
        )


class ValidationPolicy(BaseModel):
    """Engine-wide grading knobs, supplied by the hosting application."""

    model_config = ConfigDict(frozen=True)

    numeric_tolerance: float = Field(
        default=1e-4,
        gt=0,
        description="Absolute tolerance for numerical entry comparison",
    )
    strict_unknown_types: bool = Field(
        default=False,
        description="Fail unrecognized question types instead of comparing bytes",
    )
    snippet_length: int = Field(
        default=100,
        ge=0,
        description="Characters of raw input quoted in diagnostics",
    )
