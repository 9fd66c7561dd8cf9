"""
Single-pick evaluators: multiple choice and either/or.

Both compare one submitted option against the stored option, trimmed and
case-insensitive. They are separate types because an either/or question
is a forced binary pick, which callers report on separately.
"""

from __future__ import annotations

from ..codec import normalize_string
from ..evaluator import AnswerEvaluator
from ..options import QuestionType
from ..verdict import Verdict


class MultipleChoiceEvaluator(AnswerEvaluator):
    """
    Evaluator for multiple choice questions.

    The submitted choice (usually a letter, sometimes the full option
    text such as ``"A. Choice 1"``) must equal the stored choice after
    trimming and lowercasing. There is no acceptable-answers fallback.
    """

    question_type = QuestionType.MULTIPLE_CHOICE

    def parse_user_answer(self, answer: str) -> str:
        return normalize_string(answer)

    def compare(self, user_value: str, correct_value: str) -> bool:
        return user_value == normalize_string(correct_value)

    def evaluate(self, user_answer: str) -> Verdict:
        is_correct = self.compare(self.parse_user_answer(user_answer), self.correct_answer)
        return self.verdict(is_correct, "exact_match")


class EitherOrEvaluator(MultipleChoiceEvaluator):
    """Evaluator for binary either/or questions."""

    question_type = QuestionType.EITHER_OR
