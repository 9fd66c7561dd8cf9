"""
Domain models for the answer engine service.

These are the core business entities with validation and behavior.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from epq.answer import Diagnostic
from epq.blanks import BlankConfigurationReport

MAX_ANSWER_LENGTH = 10000


class AnswerSubmission(BaseModel):
    """One submitted answer together with the question data needed to grade it"""
    question_id: Optional[str] = Field(None, description="Caller's question identifier")
    question_type: str = Field(..., description="Question type tag, e.g. multiple_choice")
    user_answer: str = Field("", description="Answer as submitted by the user")
    correct_answer: Any = Field(..., description="Stored correct answer (text, object or list)")
    options: Optional[Dict[str, Any]] = Field(None, description="Question version option bag")

    @field_validator("user_answer")
    @classmethod
    def limit_answer_length(cls, v: str) -> str:
        """Reject oversized answers"""
        if len(v) > MAX_ANSWER_LENGTH:
            raise ValueError(f"Answer too long (max {MAX_ANSWER_LENGTH} characters)")
        return v


class AnswerCheck(BaseModel):
    """Grading outcome for one submission"""
    question_id: Optional[str] = None
    question_type: str
    correct: bool
    reason: str
    diagnostics: List[Diagnostic] = Field(default_factory=list)


class AttemptResult(BaseModel):
    """Grading outcome for every answer of a practice attempt"""
    results: List[AnswerCheck]
    total: int
    correct_count: int
    score: float = Field(..., ge=0.0, le=1.0)

    @classmethod
    def from_checks(cls, checks: List[AnswerCheck]) -> "AttemptResult":
        """Summarize a list of per-question results"""
        correct_count = sum(1 for c in checks if c.correct)
        total = len(checks)
        return cls(
            results=checks,
            total=total,
            correct_count=correct_count,
            score=correct_count / total if total else 0.0,
        )


class QuestionImport(BaseModel):
    """Raw question version as received from an import file"""
    model_config = ConfigDict(extra="allow")

    question_text: Optional[str] = None
    question_type: Optional[str] = None
    blanks: Optional[List[Dict[str, Any]]] = None


class PreparedQuestion(BaseModel):
    """Question version after blank normalization"""
    question: Dict[str, Any]
    text_hash: str
    blank_report: Optional[BlankConfigurationReport] = None
    duplicate_of: Optional[int] = Field(
        None, description="Index of an earlier question in the batch with the same text"
    )
    diagnostics: List[Diagnostic] = Field(default_factory=list)
