"""Domain models package"""

from .domain import (
    AnswerSubmission,
    AnswerCheck,
    AttemptResult,
    QuestionImport,
    PreparedQuestion,
    MAX_ANSWER_LENGTH,
)

__all__ = [
    "AnswerSubmission",
    "AnswerCheck",
    "AttemptResult",
    "QuestionImport",
    "PreparedQuestion",
    "MAX_ANSWER_LENGTH",
]
