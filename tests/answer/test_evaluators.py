"""
Test suite for the evaluator framework.

Tests:
- AnswerEvaluator base class
- EvaluatorRegistry and the global registry
- ValidationOptions coercion
- Verdict helpers
"""

import pytest

from epq.answer import (
    AnswerEvaluator,
    EvaluatorRegistry,
    QuestionType,
    ValidationOptions,
    ValidationPolicy,
    Verdict,
)
from epq.answer.evaluator import get_evaluator, get_registry
from epq.answer.evaluators import (
    EVALUATORS,
    DragAndDropEvaluator,
    MultipleChoiceEvaluator,
    MultipleResponseEvaluator,
    NumericalEntryEvaluator,
    SelectFromListEvaluator,
    ShortAnswerEvaluator,
)


class TestAnswerEvaluator:
    """Test the AnswerEvaluator Pydantic base class."""

    def test_cannot_instantiate_abstract_class(self):
        """Test that AnswerEvaluator cannot be instantiated directly."""
        with pytest.raises(TypeError):
            AnswerEvaluator(correct_answer="A")

    def test_subclass_must_implement_evaluate(self):
        """Test that subclasses must implement evaluate()."""
        class MinimalEvaluator(AnswerEvaluator):
            question_type = QuestionType.MULTIPLE_CHOICE

        with pytest.raises(TypeError):
            MinimalEvaluator(correct_answer="A")

    def test_tag_and_policy_defaults(self):
        """Test that evaluators expose their tag and a default policy."""
        evaluator = MultipleChoiceEvaluator(correct_answer="A")
        assert evaluator.tag == "multiple_choice"
        assert evaluator.policy == ValidationPolicy()

    def test_from_options_picks_variant_fields(self):
        """Test that each evaluator only takes the options it uses."""
        options = ValidationOptions.coerce({
            "caseSensitive": True,
            "acceptableAnswers": ["x"],
            "blanks": [{"blank_id": 1, "correct_answer": "a"}],
            "dropZones": [{"zone_id": 1, "label": "Zone"}],
        })

        short = ShortAnswerEvaluator.from_options("a", options)
        assert short.case_sensitive is True
        assert short.acceptable_answers == ["x"]

        numeric = NumericalEntryEvaluator.from_options("1", options)
        assert numeric.acceptable_answers == ["x"]
        assert not hasattr(numeric, "case_sensitive")

        select = SelectFromListEvaluator.from_options("", options)
        assert select.blanks[0].correct_answer == "a"

        drag = DragAndDropEvaluator.from_options("{}", options)
        assert drag.drop_zones[0].key == "zone_1"
        assert drag.drop_zones[0].zone_label == "Zone"

        multi = MultipleResponseEvaluator.from_options("[]", options)
        assert multi.case_sensitive is False

    def test_evaluators_are_immutable(self):
        """Test that evaluator configuration cannot change after creation."""
        evaluator = ShortAnswerEvaluator(correct_answer="a")
        with pytest.raises(Exception):
            evaluator.case_sensitive = True


class TestEvaluatorRegistry:
    """Test evaluator registration and lookup."""

    def test_global_registry_has_all_types(self):
        """Test that every question type has a built-in evaluator."""
        assert set(get_registry().get_registered_types()) == set(QuestionType)
        assert set(EVALUATORS) == set(QuestionType)

    def test_lookup_by_tag(self):
        """Test lookup by wire tag and by enum."""
        assert get_evaluator("drag_and_drop") is DragAndDropEvaluator
        assert get_evaluator(QuestionType.MULTIPLE_CHOICE) is MultipleChoiceEvaluator

    def test_unknown_tag(self):
        """Test that unknown tags have no evaluator."""
        assert get_evaluator("essay") is None
        assert get_evaluator(None) is None

    def test_register_rejects_non_evaluators(self):
        """Test that only AnswerEvaluator subclasses can be registered."""
        registry = EvaluatorRegistry()
        with pytest.raises(TypeError):
            registry.register(QuestionType.MULTIPLE_CHOICE, dict)

    def test_register_rejects_unknown_tag(self):
        """Test that the tag set is closed."""
        registry = EvaluatorRegistry()
        with pytest.raises(ValueError):
            registry.register("essay", MultipleChoiceEvaluator)

    def test_create_evaluator(self):
        """Test creating a configured evaluator from a raw option bag."""
        registry = EvaluatorRegistry()
        registry.register(QuestionType.SHORT_ANSWER, ShortAnswerEvaluator)

        evaluator = registry.create_evaluator("short_answer", "Paris", {"caseSensitive": True})
        assert isinstance(evaluator, ShortAnswerEvaluator)
        assert evaluator.evaluate("paris").correct is False
        assert evaluator.evaluate("Paris").correct is True

    def test_create_evaluator_unregistered(self):
        """Test that creating an unregistered type raises."""
        with pytest.raises(ValueError):
            EvaluatorRegistry().create_evaluator("short_answer", "x")


class TestValidationOptions:
    """Test option bag coercion."""

    def test_defaults(self):
        """Test that missing options mean an empty bag."""
        options = ValidationOptions.coerce(None)
        assert options.case_sensitive is False
        assert options.acceptable_answers == []
        assert options.blanks is None
        assert options.is_empty()

    def test_camel_and_snake_case(self):
        """Test that both key styles are accepted."""
        camel = ValidationOptions.coerce({"caseSensitive": True, "acceptableAnswers": ["a"]})
        snake = ValidationOptions.coerce({"case_sensitive": True, "acceptable_answers": ["a"]})
        assert camel == snake

    def test_null_lists_and_single_string(self):
        """Test that null and scalar acceptable answers are normalized."""
        assert ValidationOptions.coerce({"acceptableAnswers": None}).acceptable_answers == []
        assert ValidationOptions.coerce({"acceptableAnswers": "only"}).acceptable_answers == ["only"]

    def test_only_requested_fields_read(self):
        """Test that fields outside the requested set are never validated."""
        options = ValidationOptions.coerce(
            {"blanks": "nope", "caseSensitive": True}, fields=("case_sensitive",)
        )
        assert options.case_sensitive is True
        assert options.blanks is None

    def test_bad_entries_dropped_and_counted(self):
        """Test that null and incomplete list entries are dropped."""
        dropped = {}
        options = ValidationOptions.coerce(
            {
                "acceptableAnswers": ["a", None, 5],
                "dropZones": [{"label": "x"}, {"zone_id": 2}],
            },
            dropped=dropped,
        )
        assert options.acceptable_answers == ["a", "5"]
        assert [zone.key for zone in options.drop_zones] == ["zone_2"]
        assert dropped == {"acceptable_answers": 1, "drop_zones": 1}

    def test_unknown_keys_ignored(self):
        """Test that keys no evaluator uses are ignored."""
        assert ValidationOptions.coerce({"allowMultiple": True}).is_empty()

    def test_instance_passes_through(self):
        """Test that an options instance is returned unchanged."""
        options = ValidationOptions(case_sensitive=True)
        assert ValidationOptions.coerce(options) is options

    def test_bad_shape(self, assert_validation_error):
        """Test that a wrongly shaped bag raises ValidationError."""
        assert_validation_error(ValidationOptions, {"blanks": "nope"}, expected_field="blanks")

    def test_policy_tolerance_must_be_positive(self, assert_validation_error):
        """Test that a non-positive tolerance is rejected."""
        assert_validation_error(ValidationPolicy, {"numeric_tolerance": 0}, expected_field="numeric_tolerance")


class TestVerdict:
    """Test Verdict helpers."""

    def test_bool(self):
        """Test that a verdict is truthy when correct."""
        assert Verdict.accept("multiple_choice", "exact_match")
        assert not Verdict.reject("multiple_choice", "no_match")

    def test_decide_reasons(self):
        """Test success and failure reasons."""
        assert Verdict.decide(True, "t", "exact_match").reason == "exact_match"
        assert Verdict.decide(False, "t", "exact_match").reason == "no_match"
        assert Verdict.decide(False, "t", "exact_match", "outside_tolerance").reason == "outside_tolerance"

    def test_note_chains_and_tags(self):
        """Test that note() attaches a tagged diagnostic and returns self."""
        verdict = Verdict.reject("drag_and_drop", "zone_mismatch")
        assert verdict.note("zone_mismatch", zone="zone_1") is verdict
        diagnostic = verdict.diagnostics[0]
        assert diagnostic.question_type == "drag_and_drop"
        assert diagnostic.data == {"zone": "zone_1"}
        assert not verdict.has_errors()

        verdict.note("invalid_correct_answer", level="error")
        assert verdict.has_errors()

    def test_correct_must_be_bool(self):
        """Test that correctness is strictly boolean."""
        with pytest.raises(Exception):
            Verdict(correct="yes")
