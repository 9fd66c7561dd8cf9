"""
Select-from-list evaluator.

Dropdowns placed in the blanks of a question. With several blanks the
submission is an object mapping blank id to the chosen option; every
blank must be right for the question to be right.
"""

from __future__ import annotations

from ..codec import AnswerDecodeError, decode_blank_mapping
from ..evaluator import AnswerEvaluator
from ..options import BlankDescriptor, QuestionType, ValidationOptions, ValidationPolicy
from ..verdict import Verdict


class SelectFromListEvaluator(AnswerEvaluator):
    """
    Evaluator for select-from-list questions.

    Options are matched exactly (no trimming, no case folding) because
    they come from a fixed list of choices rather than free typing.
    """

    question_type = QuestionType.SELECT_FROM_LIST
    option_fields = ("blanks",)

    blanks: list[BlankDescriptor] | None = None

    @classmethod
    def from_options(
        cls,
        correct_answer,
        options: ValidationOptions,
        policy: ValidationPolicy | None = None,
    ) -> SelectFromListEvaluator:
        return cls(
            correct_answer=correct_answer,
            blanks=list(options.blanks) if options.blanks else None,
            policy=policy or ValidationPolicy(),
        )

    def evaluate(self, user_answer: str) -> Verdict:
        if self.blanks:
            if user_answer.startswith("{"):
                return self._evaluate_blanks(user_answer)
            if len(self.blanks) == 1:
                return self.verdict(
                    user_answer == self.blanks[0].correct_answer, "single_blank_match"
                )

        return self.verdict(user_answer == self.correct_answer, "exact_match")

    def _evaluate_blanks(self, user_answer: str) -> Verdict:
        try:
            selections = decode_blank_mapping(user_answer)
        except AnswerDecodeError as e:
            return self.malformed(e)

        for blank in self.blanks:
            selected = selections.get(str(blank.blank_id))
            if selected != blank.correct_answer:
                return Verdict.reject(self.tag, "blank_mismatch").note(
                    "blank_mismatch",
                    blank_id=blank.blank_id,
                    answered=selected is not None,
                )
        return self.verdict(True, "all_blanks_match")
