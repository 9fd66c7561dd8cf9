"""
Type-specific answer evaluators.

Each module implements the evaluator for one question type; importing
this package registers all of them in the global registry.
"""

from ..evaluator import register_evaluator
from ..options import QuestionType
from .choice import EitherOrEvaluator, MultipleChoiceEvaluator
from .drag_drop import DragAndDropEvaluator
from .multi_response import MultipleResponseEvaluator
from .numeric import NumericalEntryEvaluator
from .select_list import SelectFromListEvaluator
from .short_answer import ShortAnswerEvaluator

EVALUATORS = {
    QuestionType.MULTIPLE_CHOICE: MultipleChoiceEvaluator,
    QuestionType.NUMERICAL_ENTRY: NumericalEntryEvaluator,
    QuestionType.SHORT_ANSWER: ShortAnswerEvaluator,
    QuestionType.SELECT_FROM_LIST: SelectFromListEvaluator,
    QuestionType.DRAG_AND_DROP: DragAndDropEvaluator,
    QuestionType.MULTIPLE_RESPONSE: MultipleResponseEvaluator,
    QuestionType.EITHER_OR: EitherOrEvaluator,
}

for _question_type, _evaluator_class in EVALUATORS.items():
    register_evaluator(_question_type, _evaluator_class)

__all__ = [
    "MultipleChoiceEvaluator",
    "NumericalEntryEvaluator",
    "ShortAnswerEvaluator",
    "SelectFromListEvaluator",
    "DragAndDropEvaluator",
    "MultipleResponseEvaluator",
    "EitherOrEvaluator",
    "EVALUATORS",
]
