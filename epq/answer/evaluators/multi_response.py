"""
Multiple response evaluator.

The user picks any number of options; the selection is graded as an
unordered set that must match the stored selection exactly.
"""

from __future__ import annotations

from typing import Any

from ..codec import AnswerDecodeError, compare_as_set, decode_selection_list
from ..evaluator import AnswerEvaluator
from ..options import QuestionType
from ..verdict import Verdict


class MultipleResponseEvaluator(AnswerEvaluator):
    """
    Evaluator for multiple response (select-all-that-apply) questions.

    The submission must be a JSON array. The stored answer may be a JSON
    array, a decoded list, or a single bare option from older question
    versions. Extra or missing selections fail the question.

    ``case_sensitive`` is not read from the question options; selections
    come from a fixed option list and are compared case-insensitively.
    """

    question_type = QuestionType.MULTIPLE_RESPONSE

    case_sensitive: bool = False

    def parse_correct_answer(self) -> list[Any]:
        """
        Raises:
            AnswerDecodeError: If the stored answer cannot be read as a list
        """
        return decode_selection_list(self.correct_answer, promote_bare=True)

    def evaluate(self, user_answer: str) -> Verdict:
        try:
            correct_selections = self.parse_correct_answer()
        except AnswerDecodeError as e:
            return self.malformed(e, side="correct")

        try:
            user_selections = decode_selection_list(user_answer)
        except AnswerDecodeError as e:
            return self.malformed(e)

        is_correct = compare_as_set(user_selections, correct_selections, self.case_sensitive)
        verdict = self.verdict(is_correct, "selection_match", "selection_mismatch")
        if not is_correct:
            verdict.note(
                "selection_mismatch",
                user_count=len(user_selections),
                correct_count=len(correct_selections),
            )
        return verdict
