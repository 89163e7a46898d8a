"""
Question variant model for reading and listening sections.

A question is a tagged union over its ``type``. Each variant owns an exclusive
field set; the shared fields are ``id``, ``prompt`` and ``correctAnswer``.

Variants:
- MultipleChoiceQuestion     multiple_choice                 options (>= 2)
- BooleanQuestion            true_false_not_given,
                             yes_no_not_given                correctAnswer from an option set
- MatchingQuestion           matching, matching_headings,
                             matching_information,
                             matching_features               matchingItems (>= 2), matchingOptions (>= 2)
- DiagramLabelingQuestion    diagram_labeling,
                             map_diagram_labeling            diagramImageIds, diagramLabels (>= 1)
- CompletionQuestion         completion                      format + options sized per format
- FreeTextQuestion           sentence_completion,
                             short_answer                    (no extra fields)

Persisted JSON uses camelCase keys; models accept either spelling on input
and dump camelCase with ``by_alias=True``.
"""
from __future__ import annotations

import string
import uuid
from collections.abc import Mapping, Sequence
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator
from pydantic.alias_generators import to_camel

from src.ielts.types import (
    BOOLEAN_OPTION_TYPE_FOR,
    BOOLEAN_TYPES,
    COMPLETION_BLANK_COUNTS,
    COMPLETION_TYPES,
    DEFAULT_BOOLEAN_OPTION_VALUES,
    DEFAULT_COMPLETION_FORMAT,
    FREE_TEXT_TYPES,
    LABELING_TYPES,
    MATCHING_TYPES,
    OPTION_BASED_TYPES,
    BooleanOptionType,
    CompletionFormat,
    QuestionType,
)

# Option values per boolean option set, e.g. {TRUE_FALSE: ["true", "false", "not_given"]}
BooleanOptionValues = Mapping[BooleanOptionType, Sequence[str]]

DEFAULT_MATCHING_ITEM_COUNT = 3
DEFAULT_MATCHING_OPTION_COUNT = 4
DEFAULT_DIAGRAM_LABEL_COUNT = 3
MIN_MATCHING_ITEMS = 2
MIN_MATCHING_OPTIONS = 2
MIN_DIAGRAM_LABELS = 1
MIN_CHOICE_OPTIONS = 2


def new_id() -> str:
    """Generate a fresh identifier for questions, sections and sub-items."""
    return str(uuid.uuid4())


def letter_for(index: int) -> str:
    """A, B, ..., Z, AA, AB, ... for lettered options and labels."""
    letters = string.ascii_uppercase
    if index < len(letters):
        return letters[index]
    return letter_for(index // len(letters) - 1) + letters[index % len(letters)]


class IeltsModel(BaseModel):
    """Base for every persisted IELTS config shape."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_dict(self) -> dict:
        """Dump in the persisted (camelCase) layout."""
        return self.model_dump(by_alias=True, mode="json")


# =============================================================================
# Variant sub-items
# =============================================================================


class MatchingItem(IeltsModel):
    id: str = Field(default_factory=new_id)
    statement: str = ""
    match_id: str | None = None


class MatchingOption(IeltsModel):
    id: str = Field(default_factory=new_id)
    label: str = ""


class DiagramLabel(IeltsModel):
    id: str = Field(default_factory=new_id)
    letter: str = ""
    position: str = ""
    answer: str = ""


# =============================================================================
# Variants
# =============================================================================


class QuestionBase(IeltsModel):
    id: str = Field(default_factory=new_id)
    prompt: str = ""
    correct_answer: str = ""


class MultipleChoiceQuestion(QuestionBase):
    type: Literal["multiple_choice"] = "multiple_choice"
    options: list[str] = Field(default_factory=lambda: [""] * MIN_CHOICE_OPTIONS, min_length=MIN_CHOICE_OPTIONS)


class BooleanQuestion(QuestionBase):
    """True/False/Not Given or Yes/No/Not Given; answers come from the option catalog."""

    type: Literal["true_false_not_given", "yes_no_not_given"]

    @property
    def option_type(self) -> BooleanOptionType:
        return BOOLEAN_OPTION_TYPE_FOR[QuestionType(self.type)]


class MatchingQuestion(QuestionBase):
    type: Literal["matching", "matching_headings", "matching_information", "matching_features"]
    matching_items: list[MatchingItem] = Field(min_length=MIN_MATCHING_ITEMS)
    matching_options: list[MatchingOption] = Field(min_length=MIN_MATCHING_OPTIONS)

    @model_validator(mode="after")
    def _match_ids_reference_options(self) -> "MatchingQuestion":
        option_ids = {option.id for option in self.matching_options}
        for item in self.matching_items:
            if item.match_id is not None and item.match_id not in option_ids:
                raise ValueError(f"matchId '{item.match_id}' does not reference a matching option")
        return self


class DiagramLabelingQuestion(QuestionBase):
    type: Literal["diagram_labeling", "map_diagram_labeling"]
    diagram_image_ids: list[str] = Field(default_factory=list)
    diagram_labels: list[DiagramLabel] = Field(min_length=MIN_DIAGRAM_LABELS)


class CompletionQuestion(QuestionBase):
    type: Literal["completion"] = "completion"
    format: CompletionFormat = DEFAULT_COMPLETION_FORMAT
    options: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _options_sized_for_format(self) -> "CompletionQuestion":
        required = COMPLETION_BLANK_COUNTS[self.format]
        if len(self.options) < required:
            raise ValueError(f"{self.format.value} completion needs at least {required} options")
        return self


class FreeTextQuestion(QuestionBase):
    type: Literal["sentence_completion", "short_answer"]


Question = Annotated[
    Union[
        MultipleChoiceQuestion,
        BooleanQuestion,
        MatchingQuestion,
        DiagramLabelingQuestion,
        CompletionQuestion,
        FreeTextQuestion,
    ],
    Field(discriminator="type"),
]

_question_adapter: TypeAdapter[Question] = TypeAdapter(Question)


def parse_question(data: object) -> Question:
    """Strictly validate a persisted question (raises pydantic.ValidationError)."""
    return _question_adapter.validate_python(data)


# =============================================================================
# Families and defaults
# =============================================================================


def question_family(question_type: QuestionType) -> str:
    """Name of the variant family a question type belongs to."""
    if question_type in OPTION_BASED_TYPES:
        return "option"
    if question_type in BOOLEAN_TYPES:
        return "boolean"
    if question_type in MATCHING_TYPES:
        return "matching"
    if question_type in LABELING_TYPES:
        return "labeling"
    if question_type in COMPLETION_TYPES:
        return "completion"
    if question_type in FREE_TEXT_TYPES:
        return "free_text"
    raise ValueError(f"Unknown question type: {question_type}")


def boolean_values_for(
    question_type: QuestionType,
    boolean_options: BooleanOptionValues | None = None,
) -> tuple[str, ...]:
    """Enabled answer values for a boolean question type (catalog values win over built-ins)."""
    option_type = BOOLEAN_OPTION_TYPE_FOR[question_type]
    if boolean_options:
        values = tuple(v for v in boolean_options.get(option_type, ()) if isinstance(v, str) and v)
        if values:
            return values
    return DEFAULT_BOOLEAN_OPTION_VALUES[option_type]


def default_matching_items(count: int = DEFAULT_MATCHING_ITEM_COUNT) -> list[MatchingItem]:
    return [MatchingItem() for _ in range(count)]


def default_matching_options(count: int = DEFAULT_MATCHING_OPTION_COUNT) -> list[MatchingOption]:
    return [MatchingOption(label=letter_for(i)) for i in range(count)]


def default_diagram_labels(count: int = DEFAULT_DIAGRAM_LABEL_COUNT) -> list[DiagramLabel]:
    return [DiagramLabel(letter=letter_for(i)) for i in range(count)]


def blank_options(completion_format: CompletionFormat) -> list[str]:
    return [""] * COMPLETION_BLANK_COUNTS[completion_format]


def create_question(
    question_type: QuestionType | str = QuestionType.MULTIPLE_CHOICE,
    completion_format: CompletionFormat | None = None,
    *,
    question_id: str | None = None,
    prompt: str = "",
    boolean_options: BooleanOptionValues | None = None,
) -> Question:
    """Build a question of ``question_type`` with every variant field at its default."""
    question_type = QuestionType(question_type)
    shared = {"id": question_id or new_id(), "prompt": prompt}
    family = question_family(question_type)

    if family == "option":
        return MultipleChoiceQuestion(**shared)
    if family == "boolean":
        values = boolean_values_for(question_type, boolean_options)
        return BooleanQuestion(type=question_type.value, correct_answer=values[0], **shared)
    if family == "matching":
        return MatchingQuestion(
            type=question_type.value,
            matching_items=default_matching_items(),
            matching_options=default_matching_options(),
            **shared,
        )
    if family == "labeling":
        return DiagramLabelingQuestion(
            type=question_type.value,
            diagram_image_ids=[],
            diagram_labels=default_diagram_labels(),
            **shared,
        )
    if family == "completion":
        completion_format = completion_format or DEFAULT_COMPLETION_FORMAT
        return CompletionQuestion(format=completion_format, options=blank_options(completion_format), **shared)
    return FreeTextQuestion(type=question_type.value, **shared)
