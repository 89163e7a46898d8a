"""
Unit tests for change_question_type.

Every ordered pair of question types is exercised: the result must carry
exactly the new variant's field set, keep id and prompt, and only keep data
that means the same thing in the new type.
"""

import itertools

import pytest
from pydantic import ValidationError

from src.ielts.questions import (
    MatchingItem,
    MatchingOption,
    MatchingQuestion,
    MultipleChoiceQuestion,
    create_question,
)
from src.ielts.transitions import change_question_type, shares_answer_family
from src.ielts.types import BooleanOptionType, CompletionFormat, QuestionType

ALL_PAIRS = list(itertools.product(QuestionType, QuestionType))


class TestAllPairs:
    """change_question_type is defined for every (old, new) pair."""

    @pytest.mark.parametrize("old_type,new_type", ALL_PAIRS)
    def test_field_set_matches_new_variant(self, old_type, new_type):
        question = create_question(old_type, question_id="q-1", prompt="Read the passage")

        result = change_question_type(question, new_type)

        assert result.type == new_type.value
        assert result.id == "q-1"
        assert result.prompt == "Read the passage"
        assert set(result.to_dict()) == set(create_question(new_type).to_dict())

    @pytest.mark.parametrize("old_type,new_type", ALL_PAIRS)
    def test_input_is_not_mutated(self, old_type, new_type):
        question = create_question(old_type)
        before = question.to_dict()

        change_question_type(question, new_type)

        assert question.to_dict() == before


class TestMultipleChoiceToMatching:
    def test_defaults_replace_choice_data(self):
        question = MultipleChoiceQuestion(id="q-7", prompt="Pick one", options=["a", "b"], correct_answer="0")

        result = change_question_type(question, "matching_headings")

        assert isinstance(result, MatchingQuestion)
        assert result.id == "q-7"
        assert result.prompt == "Pick one"
        assert len(result.matching_items) == 3
        assert len(result.matching_options) == 4
        assert result.correct_answer == ""
        assert "options" not in result.to_dict()


class TestSameFamily:
    """Data carries over between types of the same family."""

    def test_matching_data_preserved(self):
        options = [MatchingOption(id="o1", label="i"), MatchingOption(id="o2", label="ii")]
        items = [MatchingItem(id="i1", statement="Para A", match_id="o2"), MatchingItem(id="i2")]
        question = MatchingQuestion(
            type="matching_headings",
            matching_items=items,
            matching_options=options,
            correct_answer="ii",
        )

        result = change_question_type(question, QuestionType.MATCHING_FEATURES)

        assert result.matching_items == items
        assert result.matching_options == options
        assert result.correct_answer == "ii"
        # Deep copies, not shared references
        assert result.matching_items[0] is not items[0]

    def test_labeling_data_preserved(self):
        question = create_question(QuestionType.DIAGRAM_LABELING)
        question.diagram_image_ids.append("img-1")
        question.diagram_labels[0].answer = "pump"

        result = change_question_type(question, QuestionType.MAP_DIAGRAM_LABELING)

        assert result.diagram_image_ids == ["img-1"]
        assert result.diagram_labels[0].answer == "pump"

    def test_free_text_answer_kept(self):
        question = create_question(QuestionType.SHORT_ANSWER)
        question.correct_answer = "photosynthesis"

        assert change_question_type(question, QuestionType.SENTENCE_COMPLETION).correct_answer == "photosynthesis"
        assert change_question_type(question, QuestionType.COMPLETION).correct_answer == "photosynthesis"

    def test_answer_dropped_across_families(self):
        question = create_question(QuestionType.SHORT_ANSWER)
        question.correct_answer = "photosynthesis"

        assert change_question_type(question, QuestionType.MULTIPLE_CHOICE).correct_answer == ""
        assert change_question_type(question, QuestionType.MATCHING).correct_answer == ""

    def test_shares_answer_family(self):
        assert shares_answer_family(QuestionType.MATCHING, QuestionType.MATCHING_HEADINGS)
        assert not shares_answer_family(QuestionType.MULTIPLE_CHOICE, QuestionType.TRUE_FALSE_NOT_GIVEN)


class TestTargets:
    def test_boolean_target_gets_first_value(self):
        result = change_question_type(create_question(), QuestionType.TRUE_FALSE_NOT_GIVEN)
        assert result.correct_answer == "true"

    def test_boolean_target_uses_catalog_values(self):
        catalog = {BooleanOptionType.YES_NO: ["no", "yes", "not_given"]}
        result = change_question_type(create_question(), "yes_no_not_given", boolean_options=catalog)
        assert result.correct_answer == "no"

    def test_leaving_boolean_clears_answer(self):
        question = create_question(QuestionType.TRUE_FALSE_NOT_GIVEN)
        assert change_question_type(question, QuestionType.SHORT_ANSWER).correct_answer == ""

    def test_completion_target_uses_summary_format(self):
        result = change_question_type(create_question(), QuestionType.COMPLETION)
        assert result.format == CompletionFormat.SUMMARY
        assert result.options == ["", ""]

    def test_same_type_returns_copy(self):
        question = create_question(QuestionType.COMPLETION, CompletionFormat.TABLE)
        result = change_question_type(question, QuestionType.COMPLETION)
        assert result == question
        assert result is not question
        assert result.format == CompletionFormat.TABLE


class TestInputs:
    def test_accepts_persisted_record(self):
        record = {"id": "q-1", "type": "multiple_choice", "prompt": "P", "options": ["a", "b"], "correctAnswer": "1"}
        result = change_question_type(record, "short_answer")
        assert result.to_dict() == {"id": "q-1", "type": "short_answer", "prompt": "P", "correctAnswer": ""}

    def test_invalid_record_rejected(self):
        with pytest.raises(ValidationError):
            change_question_type({"type": "multiple_choice", "options": ["only one"]}, "short_answer")

    def test_unknown_target_rejected(self):
        with pytest.raises(ValueError):
            change_question_type(create_question(), "essay")
