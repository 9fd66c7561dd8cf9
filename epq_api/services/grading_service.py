"""
Grading service for answer evaluation.

Handles answer submission and grading logic.
"""

from typing import List

from epq.answer import (
    Diagnostic,
    DiagnosticCollector,
    LoggingObserver,
    ValidationPolicy,
    check_answer,
)

from ..models.domain import AnswerCheck, AnswerSubmission, AttemptResult
from ..core.config import Settings, settings as default_settings
from ..core.errors import GradingError, InvalidRequestError
from ..core.logging import get_context_logger

logger = get_context_logger(__name__)


class GradingService:
    """
    Service for answer grading operations.

    Grades submissions with the answer engine and returns the verdicts with
    their diagnostics. Diagnostics are also written to the service log.
    """

    def __init__(self, policy: ValidationPolicy | None = None):
        self.policy = policy or ValidationPolicy()
        self._log_observer = LoggingObserver()

        logger.info(
            "GradingService initialized",
            extra_data={
                "numeric_tolerance": self.policy.numeric_tolerance,
                "strict_unknown_types": self.policy.strict_unknown_types,
            }
        )

    async def grade_answer(self, submission: AnswerSubmission) -> AnswerCheck:
        """
        Grade one answer.

        Args:
            submission: Answer and the question data needed to grade it

        Returns:
            AnswerCheck with the verdict and its diagnostics

        Raises:
            GradingError: If the engine fails outside its own error handling
            InvalidRequestError: If an option field the question type reads
                has the wrong shape
        """
        collector = DiagnosticCollector()

        def observe(diagnostic: Diagnostic) -> None:
            collector(diagnostic)
            self._log_observer(diagnostic)

        try:
            verdict = check_answer(
                submission.user_answer,
                submission.correct_answer,
                submission.question_type,
                submission.options,
                policy=self.policy,
                observer=observe,
            )
        except Exception as e:
            logger.exception(
                "Failed to grade answer",
                extra_data={
                    "question_id": submission.question_id,
                    "question_type": submission.question_type,
                }
            )
            raise GradingError(submission.question_type, str(e)) from e

        if verdict.reason == "invalid_options":
            raise InvalidRequestError(
                f"Options do not fit a {verdict.question_type} question",
                field="options"
            )

        return AnswerCheck(
            question_id=submission.question_id,
            question_type=verdict.question_type,
            correct=verdict.correct,
            reason=verdict.reason,
            diagnostics=collector.diagnostics,
        )

    async def grade_attempt(self, submissions: List[AnswerSubmission]) -> AttemptResult:
        """
        Grade every answer of a practice attempt.

        Args:
            submissions: One entry per question

        Returns:
            AttemptResult with per-question results and the overall score
        """
        logger.info(
            "Grading attempt",
            extra_data={"num_answers": len(submissions)}
        )

        checks = [await self.grade_answer(submission) for submission in submissions]
        result = AttemptResult.from_checks(checks)

        logger.info(
            "Grading completed",
            extra_data={
                "num_answers": result.total,
                "correct_count": result.correct_count,
                "score": result.score,
            }
        )

        return result


# Factory function
def get_grading_service(settings: Settings | None = None) -> GradingService:
    """Create grading service instance"""
    return GradingService((settings or default_settings).validation_policy())
