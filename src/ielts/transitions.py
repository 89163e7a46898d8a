"""
Question type transitions.

``change_question_type`` is defined for every ordered pair of question types.
The result carries exactly the field set of the new variant: fields exclusive
to the old variant are dropped and the new variant's fields are initialized,
except where both types belong to the same family (matching, labeling), whose
data carries over. ``id`` and ``prompt`` always survive.
"""
from __future__ import annotations

from collections.abc import Mapping

from src.ielts.questions import (
    BooleanOptionValues,
    BooleanQuestion,
    CompletionQuestion,
    DiagramLabelingQuestion,
    FreeTextQuestion,
    MatchingQuestion,
    MultipleChoiceQuestion,
    Question,
    QuestionBase,
    blank_options,
    boolean_values_for,
    default_diagram_labels,
    default_matching_items,
    default_matching_options,
    parse_question,
    question_family,
)
from src.ielts.types import (
    DEFAULT_COMPLETION_FORMAT,
    LABELING_TYPES,
    MATCHING_TYPES,
    QuestionType,
)

# Types whose correctAnswer means the same thing across the group
ANSWER_FAMILIES = (
    frozenset({QuestionType.COMPLETION, QuestionType.SENTENCE_COMPLETION, QuestionType.SHORT_ANSWER}),
    MATCHING_TYPES,
    LABELING_TYPES,
)


def shares_answer_family(old_type: QuestionType, new_type: QuestionType) -> bool:
    return any(old_type in family and new_type in family for family in ANSWER_FAMILIES)


def change_question_type(
    question: Question | Mapping,
    new_type: QuestionType | str,
    *,
    boolean_options: BooleanOptionValues | None = None,
) -> Question:
    """
    Switch ``question`` to ``new_type``.

    Args:
        question: A question model, or a record that validates as one.
        new_type: Target question type.
        boolean_options: Enabled boolean option values from a fetched catalog,
            used when entering a boolean type.

    Raises:
        ValueError: ``new_type`` is not a known question type.
    """
    if not isinstance(question, QuestionBase):
        question = parse_question(question)

    old_type = QuestionType(question.type)
    new_type = QuestionType(new_type)
    if old_type is new_type:
        return question.model_copy(deep=True)

    shared = {"id": question.id, "prompt": question.prompt}
    correct_answer = question.correct_answer if shares_answer_family(old_type, new_type) else ""
    family = question_family(new_type)

    if family == "option":
        return MultipleChoiceQuestion(options=["", ""], correct_answer=correct_answer, **shared)

    if family == "boolean":
        return BooleanQuestion(
            type=new_type.value,
            correct_answer=boolean_values_for(new_type, boolean_options)[0],
            **shared,
        )

    if family == "matching":
        if isinstance(question, MatchingQuestion):
            items = [item.model_copy() for item in question.matching_items]
            options = [option.model_copy() for option in question.matching_options]
        else:
            items, options = default_matching_items(), default_matching_options()
        return MatchingQuestion(
            type=new_type.value,
            matching_items=items,
            matching_options=options,
            correct_answer=correct_answer,
            **shared,
        )

    if family == "labeling":
        if isinstance(question, DiagramLabelingQuestion):
            image_ids = list(question.diagram_image_ids)
            labels = [label.model_copy() for label in question.diagram_labels]
        else:
            image_ids, labels = [], default_diagram_labels()
        return DiagramLabelingQuestion(
            type=new_type.value,
            diagram_image_ids=image_ids,
            diagram_labels=labels,
            correct_answer=correct_answer,
            **shared,
        )

    if family == "completion":
        return CompletionQuestion(
            format=DEFAULT_COMPLETION_FORMAT,
            options=blank_options(DEFAULT_COMPLETION_FORMAT),
            correct_answer=correct_answer,
            **shared,
        )

    return FreeTextQuestion(type=new_type.value, correct_answer=correct_answer, **shared)
