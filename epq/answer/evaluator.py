"""
Base answer evaluator framework.

Provides the abstract base class for per-question-type evaluators and a
registry for tag-based dispatch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .options import QuestionType, ValidationOptions, ValidationPolicy
from .verdict import Verdict


class AnswerEvaluator(BaseModel, ABC):
    """
    Abstract base class for answer evaluators.

    Each evaluator grades answers of one question type. An evaluator only
    declares the option fields its question type uses, so an evaluator
    instance cannot carry configuration that does not apply to it.

    Subclasses must implement:
    - evaluate(): Core evaluation logic
    - question_type: Class variable for type identification

    Subclasses that read options override from_options().
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    question_type: ClassVar[QuestionType]
    # ValidationOptions fields read by from_options()
    option_fields: ClassVar[tuple[str, ...]] = ()

    correct_answer: Any = Field(description="The stored correct answer")
    policy: ValidationPolicy = Field(default_factory=ValidationPolicy)

    @classmethod
    def from_options(
        cls,
        correct_answer: Any,
        options: ValidationOptions,
        policy: ValidationPolicy | None = None,
    ) -> AnswerEvaluator:
        """
        Build an evaluator from a question version's option bag.

        Args:
            correct_answer: Stored correct answer
            options: Option bag holding at least the ``option_fields``
            policy: Engine policy (defaults apply when omitted)

        Returns:
            Evaluator configured with the fields its type uses
        """
        return cls(correct_answer=correct_answer, policy=policy or ValidationPolicy())

    @property
    def tag(self) -> str:
        return self.question_type.value

    @abstractmethod
    def evaluate(self, user_answer: str) -> Verdict:
        """
        Grade a user's answer against the stored correct answer.

        Args:
            user_answer: Non-blank answer string as submitted

        Returns:
            Verdict with the decision and its diagnostics

        Implementations report malformed input through the verdict and
        do not raise for it.
        """

    def verdict(
        self,
        correct: bool,
        reason: str,
        failure_reason: str | None = None,
    ) -> Verdict:
        """Build a verdict tagged with this evaluator's question type."""
        return Verdict.decide(correct, self.tag, reason, failure_reason)

    def malformed(self, error: Exception, side: str = "user") -> Verdict:
        """
        Verdict for structured input that could not be decoded.

        A malformed user answer is simply incorrect. A malformed stored
        correct answer is a data defect and is reported at error level.
        """
        snippet = getattr(error, "snippet", None)
        data = {
            "side": side,
            "error": getattr(error, "reason", str(error)),
            "input": snippet(self.policy.snippet_length) if snippet else "",
            "full_length": getattr(error, "full_length", 0),
        }
        if side == "correct":
            return Verdict.reject(self.tag, "invalid_correct_answer").note(
                "invalid_correct_answer", level="error", **data
            )
        return Verdict.reject(self.tag, "malformed_answer").note(
            "malformed_answer", level="debug", **data
        )


class EvaluatorRegistry(BaseModel):
    """
    Registry for answer evaluators.

    Provides tag-based dispatch to the evaluator for each question type.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    _evaluators: dict[QuestionType, type[AnswerEvaluator]] = PrivateAttr(default_factory=dict)

    def register(
        self,
        question_type: QuestionType | str,
        evaluator_class: type[AnswerEvaluator],
    ) -> None:
        """
        Register an evaluator for a question type.

        Raises:
            TypeError: If evaluator_class is not an AnswerEvaluator subclass
            ValueError: If question_type is not a known tag
        """
        if not (isinstance(evaluator_class, type) and issubclass(evaluator_class, AnswerEvaluator)):
            raise TypeError(f"evaluator_class must be a subclass of AnswerEvaluator, got {evaluator_class}")
        resolved = QuestionType.parse(question_type)
        if resolved is None:
            raise ValueError(f"Unknown question type: {question_type!r}")
        self._evaluators[resolved] = evaluator_class

    def get_evaluator(self, question_type: QuestionType | str) -> type[AnswerEvaluator] | None:
        """Evaluator class for a tag, or None if the tag is unrecognized."""
        resolved = QuestionType.parse(question_type)
        if resolved is None:
            return None
        return self._evaluators.get(resolved)

    def create_evaluator(
        self,
        question_type: QuestionType | str,
        correct_answer: Any,
        options: ValidationOptions | dict[str, Any] | None = None,
        policy: ValidationPolicy | None = None,
    ) -> AnswerEvaluator:
        """
        Create an evaluator instance for a question type.

        Raises:
            ValueError: If no evaluator is registered for the tag
        """
        evaluator_class = self.get_evaluator(question_type)
        if evaluator_class is None:
            raise ValueError(f"No evaluator registered for type: {question_type}")
        return evaluator_class.from_options(
            correct_answer,
            ValidationOptions.coerce(options, fields=evaluator_class.option_fields),
            policy,
        )

    def get_registered_types(self) -> list[QuestionType]:
        return list(self._evaluators.keys())


# Global registry instance, populated by epq.answer.evaluators
_global_registry = EvaluatorRegistry()


def register_evaluator(
    question_type: QuestionType | str, evaluator_class: type[AnswerEvaluator]
) -> None:
    """Register an evaluator in the global registry."""
    _global_registry.register(question_type, evaluator_class)


def get_evaluator(question_type: QuestionType | str) -> type[AnswerEvaluator] | None:
    """Get evaluator class from the global registry."""
    return _global_registry.get_evaluator(question_type)


def get_registry() -> EvaluatorRegistry:
    return _global_registry
