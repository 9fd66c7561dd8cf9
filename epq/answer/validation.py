"""
Answer validation entry points.

validate_answer() is the function the grading flow calls for every
submitted answer. It never raises: malformed answers, malformed option
bags and unexpected failures all come back as an incorrect verdict with
an explanatory diagnostic.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..diagnostics import Diagnostic, DiagnosticObserver, LoggingObserver
from .evaluator import EvaluatorRegistry, get_registry
from .options import QuestionType, ValidationOptions, ValidationPolicy
from .verdict import Verdict

# Registers the built-in evaluators
from . import evaluators  # noqa: F401

logger = logging.getLogger(__name__)

_default_observer = LoggingObserver()


def _tag_of(question_type: Any) -> str:
    if isinstance(question_type, QuestionType):
        return question_type.value
    return str(question_type)


def check_answer(
    user_answer: str,
    correct_answer: Any,
    question_type: QuestionType | str,
    options: ValidationOptions | dict[str, Any] | None = None,
    *,
    policy: ValidationPolicy | None = None,
    observer: DiagnosticObserver | None = None,
    registry: EvaluatorRegistry | None = None,
) -> Verdict:
    """
    Grade one answer and return the full verdict.

    Args:
        user_answer: Answer string as submitted
        correct_answer: Stored correct answer (text, or a decoded
            mapping/list for drag-and-drop and multiple response)
        question_type: Question type tag
        options: Question version's option bag
        policy: Engine policy; defaults apply when omitted
        observer: Receives every diagnostic; defaults to logging
        registry: Evaluator registry; defaults to the global one

    Returns:
        Verdict (never raises)
    """
    policy = policy or ValidationPolicy()
    tag = _tag_of(question_type)

    try:
        verdict = _grade(user_answer, correct_answer, question_type, options, policy, registry)
    except Exception as e:
        verdict = Verdict.reject(tag, "internal_error").note(
            "validation_error",
            level="error",
            error=str(e),
            error_type=type(e).__name__,
        )

    _publish(verdict.diagnostics, observer or _default_observer)
    return verdict


def validate_answer(
    user_answer: str,
    correct_answer: Any,
    question_type: QuestionType | str,
    options: ValidationOptions | dict[str, Any] | None = None,
    *,
    policy: ValidationPolicy | None = None,
    observer: DiagnosticObserver | None = None,
) -> bool:
    """
    Decide whether an answer is correct.

    Same contract as check_answer(), returning only the boolean.

    Examples:
        >>> validate_answer("a", "A", "multiple_choice")
        True
        >>> validate_answer("101", "100", QuestionType.NUMERICAL_ENTRY)
        False
    """
    return check_answer(
        user_answer,
        correct_answer,
        question_type,
        options,
        policy=policy,
        observer=observer,
    ).correct


def _grade(
    user_answer: Any,
    correct_answer: Any,
    question_type: QuestionType | str,
    options: ValidationOptions | dict[str, Any] | None,
    policy: ValidationPolicy,
    registry: EvaluatorRegistry | None,
) -> Verdict:
    tag = _tag_of(question_type)

    if not isinstance(user_answer, str) or not user_answer.strip():
        return Verdict.reject(tag, "empty_answer").note(
            "empty_answer", answer_type=type(user_answer).__name__
        )

    evaluator_class = (registry or get_registry()).get_evaluator(question_type)

    # Only the fields this question type reads can fail it
    dropped: dict[str, int] = {}
    try:
        bag = ValidationOptions.coerce(
            options,
            fields=evaluator_class.option_fields if evaluator_class else (),
            dropped=dropped,
        )
    except ValidationError as e:
        return Verdict.reject(tag, "invalid_options").note(
            "invalid_options", level="error", errors=e.error_count()
        )

    started = [
        Diagnostic(
            event="validating_answer",
            question_type=tag,
            data={
                "user_answer_length": len(user_answer),
                "has_options": _has_options(options),
            },
        )
    ]
    if dropped:
        started.append(
            Diagnostic(
                level="warning",
                event="ignored_option_entries",
                question_type=tag,
                data={"dropped": dropped},
            )
        )

    if evaluator_class is None:
        verdict = _grade_unrecognized_type(user_answer, correct_answer, tag, policy)
    else:
        evaluator = evaluator_class.from_options(correct_answer, bag, policy)
        verdict = evaluator.evaluate(user_answer)

    verdict.diagnostics[:0] = started
    return verdict


def _has_options(options: ValidationOptions | dict[str, Any] | None) -> bool:
    if isinstance(options, ValidationOptions):
        return not options.is_empty()
    return bool(options)


def _grade_unrecognized_type(
    user_answer: str,
    correct_answer: Any,
    tag: str,
    policy: ValidationPolicy,
) -> Verdict:
    """
    Grade a question whose type tag no evaluator handles.

    By default the answer is compared byte for byte. Under a strict
    policy the question fails instead.
    """
    if policy.strict_unknown_types:
        return Verdict.reject(tag, "unrecognized_question_type").note(
            "unrecognized_question_type", level="error", strict=True
        )
    return Verdict.decide(
        user_answer == correct_answer, tag, "byte_equality"
    ).note("unrecognized_question_type", level="warning", strict=False)


def _publish(diagnostics: list[Diagnostic], observer: DiagnosticObserver) -> None:
    for diagnostic in diagnostics:
        try:
            observer(diagnostic)
        except Exception:
            logger.exception("Diagnostic observer failed for %s", diagnostic.event)
