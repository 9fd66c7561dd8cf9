"""
epq.answer - Answer validation for exam practice questions

Provides the grading engine with:
- One evaluator per question type
- Tolerance for several encodings of the same answer
- Structured diagnostics delivered to an injectable observer
"""

from ..diagnostics import Diagnostic, DiagnosticCollector, LoggingObserver
from .evaluator import AnswerEvaluator, EvaluatorRegistry
from .options import (
    BlankDescriptor,
    DropZoneDescriptor,
    QuestionType,
    ValidationOptions,
    ValidationPolicy,
)
from .validation import check_answer, validate_answer
from .verdict import Verdict

__all__ = [
    "validate_answer",
    "check_answer",
    "Verdict",
    "QuestionType",
    "ValidationOptions",
    "ValidationPolicy",
    "BlankDescriptor",
    "DropZoneDescriptor",
    "AnswerEvaluator",
    "EvaluatorRegistry",
    "Diagnostic",
    "DiagnosticCollector",
    "LoggingObserver",
]
