"""
Short answer evaluator.

Handles free-text answers, both single-blank and multi-blank. A
multi-blank submission is an object keyed by blank id; its values are
joined into one comma-separated answer before comparison.
"""

from __future__ import annotations

from pydantic import Field

from ..codec import (
    AnswerDecodeError,
    decode_blank_mapping,
    normalize_string,
    object_values_in_order,
    stringify_value,
)
from ..evaluator import AnswerEvaluator
from ..options import QuestionType, ValidationOptions, ValidationPolicy
from ..verdict import Verdict

BLANK_JOINER = ", "


class ShortAnswerEvaluator(AnswerEvaluator):
    """
    Evaluator for short answer questions.

    Supports:
    - Case-sensitive or case-insensitive matching
    - Acceptable alternative answers
    - Object-encoded multi-blank answers (``{"1": "a", "2": "b"}``)
    """

    question_type = QuestionType.SHORT_ANSWER
    option_fields = ("case_sensitive", "acceptable_answers")

    case_sensitive: bool = False
    acceptable_answers: list[str] = Field(default_factory=list)

    @classmethod
    def from_options(
        cls,
        correct_answer,
        options: ValidationOptions,
        policy: ValidationPolicy | None = None,
    ) -> ShortAnswerEvaluator:
        return cls(
            correct_answer=correct_answer,
            case_sensitive=options.case_sensitive,
            acceptable_answers=list(options.acceptable_answers),
            policy=policy or ValidationPolicy(),
        )

    def parse_user_answer(self, answer: str) -> tuple[str, int]:
        """
        Reduce a submission to one comparable string.

        Returns:
            Tuple of (normalized answer, number of blanks it covered).
            Anything that is not a non-empty blank object counts as a
            single blank.
        """
        if answer.startswith("{"):
            try:
                blanks = decode_blank_mapping(answer)
            except AnswerDecodeError:
                blanks = {}
            if blanks:
                values = [
                    normalize_string(stringify_value(v), self.case_sensitive)
                    for v in object_values_in_order(blanks)
                ]
                return BLANK_JOINER.join(values), len(values)
        return normalize_string(answer, self.case_sensitive), 1

    def compare(self, user_value: str) -> str | None:
        """Name of the comparison that matched, or None."""
        if user_value == normalize_string(self.correct_answer, self.case_sensitive):
            return "exact_match"
        for acceptable in self.acceptable_answers:
            if normalize_string(acceptable, self.case_sensitive) == user_value:
                return "acceptable_answer"
        return None

    def evaluate(self, user_answer: str) -> Verdict:
        user_value, blank_count = self.parse_user_answer(user_answer)
        matched = self.compare(user_value)
        verdict = self.verdict(matched is not None, matched or "exact_match")
        if blank_count > 1:
            verdict.note("multi_blank_answer", blank_count=blank_count)
        return verdict
