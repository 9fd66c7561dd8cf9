"""
Drag-and-drop evaluator.

Answers map zones to the items dropped into them. Zones are unordered
containers, so each zone is compared as a set.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..codec import AnswerDecodeError, compare_as_set, decode_zone_mapping
from ..evaluator import AnswerEvaluator
from ..options import DropZoneDescriptor, QuestionType, ValidationOptions, ValidationPolicy
from ..verdict import Verdict


class DragAndDropEvaluator(AnswerEvaluator):
    """
    Evaluator for drag-and-drop zone questions.

    Both answers may key zones as ``"1"`` or ``"zone_1"``. A zone present
    on only one side is compared against an empty zone. The stored
    correct answer may be JSON text or an already decoded mapping.
    """

    question_type = QuestionType.DRAG_AND_DROP
    option_fields = ("drop_zones",)

    drop_zones: list[DropZoneDescriptor] | None = None

    @classmethod
    def from_options(
        cls,
        correct_answer,
        options: ValidationOptions,
        policy: ValidationPolicy | None = None,
    ) -> DragAndDropEvaluator:
        return cls(
            correct_answer=correct_answer,
            drop_zones=list(options.drop_zones) if options.drop_zones else None,
            policy=policy or ValidationPolicy(),
        )

    def parse_correct_answer(self) -> dict[str, list[Any]]:
        """
        Raises:
            AnswerDecodeError: If the stored answer is not a zone mapping
        """
        if not isinstance(self.correct_answer, (str, Mapping)):
            raise AnswerDecodeError(self.correct_answer, "stored answer is neither JSON text nor a mapping")
        return decode_zone_mapping(self.correct_answer)

    def evaluate(self, user_answer: str) -> Verdict:
        try:
            correct_zones = self.parse_correct_answer()
        except AnswerDecodeError as e:
            return self.malformed(e, side="correct")

        try:
            user_zones = decode_zone_mapping(user_answer)
        except AnswerDecodeError as e:
            return self.malformed(e)

        verdict = self._compare_zones(user_zones, correct_zones)
        self._check_configured_zones(user_zones, verdict)
        return verdict

    def _compare_zones(
        self,
        user_zones: dict[str, list[Any]],
        correct_zones: dict[str, list[Any]],
    ) -> Verdict:
        for zone_key in sorted(user_zones.keys() | correct_zones.keys()):
            user_items = user_zones.get(zone_key, [])
            correct_items = correct_zones.get(zone_key, [])
            if not compare_as_set(user_items, correct_items):
                return Verdict.reject(self.tag, "zone_mismatch").note(
                    "zone_mismatch",
                    zone=zone_key,
                    user_items=len(user_items),
                    correct_items=len(correct_items),
                )
        return self.verdict(True, "all_zones_match")

    def _check_configured_zones(self, user_zones: dict[str, list[Any]], verdict: Verdict) -> None:
        if not self.drop_zones:
            return
        configured = {zone.key for zone in self.drop_zones}
        unknown = sorted(set(user_zones) - configured)
        if unknown:
            verdict.note("unconfigured_zone", level="warning", zones=unknown)
