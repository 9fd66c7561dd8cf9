"""
Numerical entry evaluator.

Handles answers that are numbers typed as text, with an authored list of
acceptable spellings and an absolute tolerance for serialization rounding.
"""

from __future__ import annotations

from pydantic import Field

from ..codec import normalize_string, parse_leading_number
from ..evaluator import AnswerEvaluator
from ..options import QuestionType, ValidationOptions, ValidationPolicy
from ..verdict import Verdict


class NumericalEntryEvaluator(AnswerEvaluator):
    """
    Evaluator for numerical entry questions.

    Comparison order:
    1. Trimmed, case-insensitive text equality
    2. If acceptable answers are authored, membership in that list
       (the list then replaces the numeric comparison)
    3. Numeric comparison with absolute tolerance

    The tolerance guards against rounding in stored values, not against
    relative error on large magnitudes.
    """

    question_type = QuestionType.NUMERICAL_ENTRY
    option_fields = ("acceptable_answers",)

    acceptable_answers: list[str] = Field(default_factory=list)

    @classmethod
    def from_options(
        cls,
        correct_answer,
        options: ValidationOptions,
        policy: ValidationPolicy | None = None,
    ) -> NumericalEntryEvaluator:
        return cls(
            correct_answer=correct_answer,
            acceptable_answers=list(options.acceptable_answers),
            policy=policy or ValidationPolicy(),
        )

    @property
    def tolerance(self) -> float:
        return self.policy.numeric_tolerance

    def evaluate(self, user_answer: str) -> Verdict:
        normalized = normalize_string(user_answer)
        if normalized == normalize_string(self.correct_answer):
            return self.verdict(True, "exact_match")

        if self.acceptable_answers:
            matched = any(
                normalize_string(acceptable) == normalized
                for acceptable in self.acceptable_answers
            )
            return self.verdict(matched, "acceptable_answer")

        user_number = parse_leading_number(user_answer)
        correct_number = parse_leading_number(self.correct_answer)
        if user_number is None or correct_number is None:
            return Verdict.reject(self.tag, "not_a_number").note(
                "not_a_number",
                user_parsed=user_number is not None,
                correct_parsed=correct_number is not None,
            )

        difference = abs(user_number - correct_number)
        verdict = self.verdict(difference < self.tolerance, "numeric_tolerance", "outside_tolerance")
        return verdict.note(
            "numeric_comparison",
            difference=difference,
            tolerance=self.tolerance,
        )
