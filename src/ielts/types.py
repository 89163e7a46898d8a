"""
IELTS domain enums and the constant tables derived from them.

The question-type partitions below mirror catalog version 1; the catalog may
disable entries but the domain model only ever produces these types.
"""
from __future__ import annotations

from enum import Enum


class AssignmentType(str, Enum):
    """Skill type - the top-level discriminant of an assignment config."""
    READING = "reading"
    LISTENING = "listening"
    WRITING = "writing"
    SPEAKING = "speaking"


class QuestionType(str, Enum):
    """Every question type that can appear in a reading or listening section."""
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE_NOT_GIVEN = "true_false_not_given"
    YES_NO_NOT_GIVEN = "yes_no_not_given"
    MATCHING = "matching"
    MATCHING_HEADINGS = "matching_headings"
    MATCHING_INFORMATION = "matching_information"
    MATCHING_FEATURES = "matching_features"
    DIAGRAM_LABELING = "diagram_labeling"
    MAP_DIAGRAM_LABELING = "map_diagram_labeling"
    COMPLETION = "completion"
    SENTENCE_COMPLETION = "sentence_completion"
    SHORT_ANSWER = "short_answer"


class CompletionFormat(str, Enum):
    """Secondary discriminant of completion questions."""
    FORM = "form"
    NOTE = "note"
    TABLE = "table"
    FLOW_CHART = "flow_chart"
    SUMMARY = "summary"


class BooleanOptionType(str, Enum):
    """Catalog option sets backing boolean-style questions."""
    TRUE_FALSE = "true_false"
    YES_NO = "yes_no"


class SkillType(str, Enum):
    """Skills whose configs hold question sections."""
    READING = "reading"
    LISTENING = "listening"


class FallbackReason(str, Enum):
    """Why the type-metadata resolver served built-in cards."""
    ACTIVE_VERSION_MISSING = "active_version_missing"
    REQUESTED_VERSION_NOT_FOUND = "requested_version_not_found"
    DB_EMPTY_FOR_VERSION = "db_empty_for_version"
    INVALID_ROWS = "invalid_rows"
    QUERY_FAILED = "query_failed"


# =============================================================================
# Question type families
# =============================================================================

OPTION_BASED_TYPES = frozenset({QuestionType.MULTIPLE_CHOICE})

BOOLEAN_TYPES = frozenset({QuestionType.TRUE_FALSE_NOT_GIVEN, QuestionType.YES_NO_NOT_GIVEN})

MATCHING_TYPES = frozenset({
    QuestionType.MATCHING,
    QuestionType.MATCHING_HEADINGS,
    QuestionType.MATCHING_INFORMATION,
    QuestionType.MATCHING_FEATURES,
})

LABELING_TYPES = frozenset({QuestionType.DIAGRAM_LABELING, QuestionType.MAP_DIAGRAM_LABELING})

COMPLETION_TYPES = frozenset({QuestionType.COMPLETION})

FREE_TEXT_TYPES = frozenset({QuestionType.SENTENCE_COMPLETION, QuestionType.SHORT_ANSWER})

# Which boolean option set a boolean question draws its answers from
BOOLEAN_OPTION_TYPE_FOR = {
    QuestionType.TRUE_FALSE_NOT_GIVEN: BooleanOptionType.TRUE_FALSE,
    QuestionType.YES_NO_NOT_GIVEN: BooleanOptionType.YES_NO,
}

# Built-in option values, identical to catalog version 1
DEFAULT_BOOLEAN_OPTION_VALUES: dict[BooleanOptionType, tuple[str, ...]] = {
    BooleanOptionType.TRUE_FALSE: ("true", "false", "not_given"),
    BooleanOptionType.YES_NO: ("yes", "no", "not_given"),
}

# Legacy answer spellings found in older persisted configs
BOOLEAN_VALUE_ALIASES = {
    "true": "true",
    "false": "false",
    "yes": "yes",
    "no": "no",
    "not given": "not_given",
    "not_given": "not_given",
    "not-given": "not_given",
    "notgiven": "not_given",
}

# =============================================================================
# Skill partitions
# =============================================================================

READING_QUESTION_TYPES: tuple[QuestionType, ...] = (
    QuestionType.MULTIPLE_CHOICE,
    QuestionType.TRUE_FALSE_NOT_GIVEN,
    QuestionType.YES_NO_NOT_GIVEN,
    QuestionType.MATCHING_HEADINGS,
    QuestionType.MATCHING_INFORMATION,
    QuestionType.MATCHING_FEATURES,
    QuestionType.SENTENCE_COMPLETION,
    QuestionType.COMPLETION,
    QuestionType.DIAGRAM_LABELING,
    QuestionType.SHORT_ANSWER,
)

LISTENING_QUESTION_TYPES: tuple[QuestionType, ...] = (
    QuestionType.MULTIPLE_CHOICE,
    QuestionType.MATCHING,
    QuestionType.MAP_DIAGRAM_LABELING,
    QuestionType.COMPLETION,
    QuestionType.SENTENCE_COMPLETION,
    QuestionType.SHORT_ANSWER,
)

QUESTION_TYPES_BY_SKILL = {
    SkillType.READING: READING_QUESTION_TYPES,
    SkillType.LISTENING: LISTENING_QUESTION_TYPES,
}

# =============================================================================
# Completion formats
# =============================================================================

DEFAULT_COMPLETION_FORMAT = CompletionFormat.SUMMARY

# Minimum number of answer blanks a completion question carries per format
COMPLETION_BLANK_COUNTS = {
    CompletionFormat.FORM: 2,
    CompletionFormat.NOTE: 2,
    CompletionFormat.TABLE: 4,
    CompletionFormat.FLOW_CHART: 3,
    CompletionFormat.SUMMARY: 2,
}

# =============================================================================
# Writing
# =============================================================================

WRITING_TASK1_VISUAL_TYPES = ("line_graph", "bar_chart", "pie_chart", "table", "diagram", "map", "process")

SAMPLE_TIMING_OPTIONS = ("immediate", "after_submission", "after_grading", "specific_date")


def parse_enum(enum_cls: type[Enum], value: object) -> Enum | None:
    """Return the enum member for ``value`` or None when it is not a member."""
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        return None
