"""
Grading verdict.

A Verdict is the result of grading one submission: a boolean plus the
name of the comparison that decided it and the diagnostics gathered on
the way. It is consumed immediately by the caller and never stored.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from ..diagnostics import Diagnostic, DiagnosticLevel


class Verdict(BaseModel):
    """
    Result of validating one answer.

    Attributes:
        correct: Whether the submission is correct
        question_type: Tag of the question that was graded
        reason: Name of the comparison that decided the verdict
            (``exact_match``, ``acceptable_answer``, ``numeric_tolerance``,
            ``blank_mismatch``, ``malformed_answer`` ...)
        diagnostics: Observations recorded while grading
    """

    model_config = ConfigDict(validate_assignment=True)

    correct: StrictBool = False
    question_type: str = "unknown"
    reason: str = ""
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    def __bool__(self) -> bool:
        return self.correct

    def note(
        self,
        event: str,
        level: DiagnosticLevel = "debug",
        **data: Any,
    ) -> Verdict:
        """Attach a diagnostic and return self for chaining."""
        self.diagnostics.append(
            Diagnostic(
                level=level,
                event=event,
                question_type=self.question_type,
                data=data,
            )
        )
        return self

    def has_errors(self) -> bool:
        return any(d.level == "error" for d in self.diagnostics)

    @classmethod
    def accept(cls, question_type: str, reason: str) -> Verdict:
        """Convenience factory for a correct verdict."""
        return cls(correct=True, question_type=question_type, reason=reason)

    @classmethod
    def reject(cls, question_type: str, reason: str) -> Verdict:
        """Convenience factory for an incorrect verdict."""
        return cls(correct=False, question_type=question_type, reason=reason)

    @classmethod
    def decide(
        cls,
        correct: bool,
        question_type: str,
        reason: str,
        failure_reason: str | None = None,
    ) -> Verdict:
        """
        Build a verdict from a boolean comparison.

        Args:
            correct: Outcome of the comparison
            question_type: Question type tag
            reason: Reason recorded when correct
            failure_reason: Reason recorded when incorrect (defaults to
                ``no_match``)
        """
        if correct:
            return cls.accept(question_type, reason)
        return cls.reject(question_type, failure_reason or "no_match")
