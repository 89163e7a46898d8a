"""
Assignment config normalizer.

Repairs arbitrary persisted data (freshly authored, written by an older editor
revision, or corrupted) into a valid config of the requested skill. The
normalizer is total and idempotent:

    normalize_assignment_config(t, normalize_assignment_config(t, x)) == normalize_assignment_config(t, x)

Each field is reconciled against the skill's default template. Arrays that are
missing, wrong-typed or empty collapse to a single default element; elements
are repaired one by one instead of being trusted wholesale.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger

from src.ielts.assignment_config import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_LIMIT_PLAYS,
    DEFAULT_PREP_SECONDS,
    DEFAULT_TALK_SECONDS,
    AssignmentConfig,
    Attempts,
    CueCard,
    ListeningConfig,
    ListeningSection,
    Playback,
    ReadingConfig,
    ReadingSection,
    SpeakingConfig,
    SpeakingPart,
    SpeakingPart2,
    Timing,
    WritingConfig,
    WritingTask1,
    WritingTask2,
    create_listening_section,
    create_reading_section,
)
from src.ielts.coercion import (
    as_list,
    as_mapping,
    canonical_boolean_value,
    pick,
    to_bool,
    to_int,
    to_non_empty_str,
    to_optional_bool,
    to_optional_int,
    to_optional_str,
    to_str,
)
from src.ielts.questions import (
    MIN_CHOICE_OPTIONS,
    MIN_MATCHING_ITEMS,
    MIN_MATCHING_OPTIONS,
    BooleanOptionValues,
    BooleanQuestion,
    CompletionQuestion,
    DiagramLabel,
    DiagramLabelingQuestion,
    FreeTextQuestion,
    MatchingItem,
    MatchingOption,
    MatchingQuestion,
    MultipleChoiceQuestion,
    Question,
    boolean_values_for,
    create_question,
    default_diagram_labels,
    default_matching_items,
    default_matching_options,
    letter_for,
    new_id,
    question_family,
)
from src.ielts.types import (
    COMPLETION_BLANK_COUNTS,
    DEFAULT_COMPLETION_FORMAT,
    QUESTION_TYPES_BY_SKILL,
    SAMPLE_TIMING_OPTIONS,
    WRITING_TASK1_VISUAL_TYPES,
    AssignmentType,
    CompletionFormat,
    QuestionType,
    SkillType,
    parse_enum,
)

# Completion types written by editor revisions that had one type per format
LEGACY_COMPLETION_TYPES = {
    "summary_completion": CompletionFormat.SUMMARY,
    "form_completion": CompletionFormat.FORM,
    "note_completion": CompletionFormat.NOTE,
    "table_completion": CompletionFormat.TABLE,
    "flow_chart_completion": CompletionFormat.FLOW_CHART,
    "flowchart_completion": CompletionFormat.FLOW_CHART,
}

LEGACY_TYPE_ALIASES = {
    "true_false": QuestionType.TRUE_FALSE_NOT_GIVEN,
    "yes_no": QuestionType.YES_NO_NOT_GIVEN,
    "mcq": QuestionType.MULTIPLE_CHOICE,
}

# Same question shape, different name per skill
_CROSS_SKILL_ALIASES = {
    SkillType.READING: {
        QuestionType.MATCHING: QuestionType.MATCHING_INFORMATION,
        QuestionType.MAP_DIAGRAM_LABELING: QuestionType.DIAGRAM_LABELING,
    },
    SkillType.LISTENING: {
        QuestionType.MATCHING_HEADINGS: QuestionType.MATCHING,
        QuestionType.MATCHING_INFORMATION: QuestionType.MATCHING,
        QuestionType.MATCHING_FEATURES: QuestionType.MATCHING,
        QuestionType.DIAGRAM_LABELING: QuestionType.MAP_DIAGRAM_LABELING,
    },
}

_LABELING_TYPE_FOR_SKILL = {
    SkillType.READING: QuestionType.DIAGRAM_LABELING,
    SkillType.LISTENING: QuestionType.MAP_DIAGRAM_LABELING,
}


def migrate_question_type(raw_type: Any, skill: SkillType) -> tuple[QuestionType, CompletionFormat | None]:
    """
    Map a persisted question type onto a type the skill currently allows.

    Returns the type and, for legacy completion types, the completion format
    the old type implied. Unknown types become multiple choice.
    """
    key = raw_type.strip().lower() if isinstance(raw_type, str) else ""
    if key in LEGACY_COMPLETION_TYPES:
        return QuestionType.COMPLETION, LEGACY_COMPLETION_TYPES[key]
    if key == "map_labeling":
        return _LABELING_TYPE_FOR_SKILL[skill], None

    question_type = LEGACY_TYPE_ALIASES.get(key) or parse_enum(QuestionType, key)
    if question_type is None:
        return QuestionType.MULTIPLE_CHOICE, None

    question_type = _CROSS_SKILL_ALIASES[skill].get(question_type, question_type)
    if question_type not in QUESTION_TYPES_BY_SKILL[skill]:
        return QuestionType.MULTIPLE_CHOICE, None
    return question_type, None


# =============================================================================
# Questions
# =============================================================================


def _string_list(value: Any) -> list[str] | None:
    items = as_list(value)
    if items is None:
        return None
    return [to_str(item) for item in items]


def _padded(values: list[str] | None, minimum: int) -> list[str]:
    values = list(values or [])
    if len(values) < minimum:
        values.extend([""] * (minimum - len(values)))
    return values


def _matching_options(value: Any) -> list[MatchingOption]:
    options = []
    for entry in as_list(value) or []:
        record = as_mapping(entry)
        if record is None:
            continue
        options.append(
            MatchingOption(
                id=to_non_empty_str(pick(record, "id"), new_id()),
                label=to_str(pick(record, "label")),
            )
        )
    if not options:
        return default_matching_options()
    while len(options) < MIN_MATCHING_OPTIONS:
        options.append(MatchingOption(label=letter_for(len(options))))
    return options


def _matching_items(value: Any, option_ids: set[str]) -> list[MatchingItem]:
    items = []
    for entry in as_list(value) or []:
        record = as_mapping(entry)
        if record is None:
            continue
        match_id = to_optional_str(pick(record, "matchId"))
        items.append(
            MatchingItem(
                id=to_non_empty_str(pick(record, "id"), new_id()),
                statement=to_str(pick(record, "statement")),
                match_id=match_id if match_id in option_ids else None,
            )
        )
    if not items:
        return default_matching_items()
    while len(items) < MIN_MATCHING_ITEMS:
        items.append(MatchingItem())
    return items


def _diagram_labels(value: Any) -> list[DiagramLabel]:
    labels = []
    for entry in as_list(value) or []:
        record = as_mapping(entry)
        if record is None:
            continue
        labels.append(
            DiagramLabel(
                id=to_non_empty_str(pick(record, "id"), new_id()),
                letter=to_str(pick(record, "letter")),
                position=to_str(pick(record, "position")),
                answer=to_str(pick(record, "answer")),
            )
        )
    return labels or default_diagram_labels()


def normalize_question(
    raw: Any,
    skill: SkillType,
    *,
    boolean_options: BooleanOptionValues | None = None,
) -> Question | None:
    """Repair one question; returns None when ``raw`` is not a record at all."""
    record = as_mapping(raw)
    if record is None:
        return None

    question_type, legacy_format = migrate_question_type(pick(record, "type"), skill)
    shared = {
        "id": to_non_empty_str(pick(record, "id"), new_id()),
        "prompt": to_str(pick(record, "prompt")),
    }
    correct_answer = to_str(pick(record, "correctAnswer"))
    family = question_family(question_type)

    if family == "option":
        return MultipleChoiceQuestion(
            options=_padded(_string_list(pick(record, "options")), MIN_CHOICE_OPTIONS),
            correct_answer=correct_answer,
            **shared,
        )

    if family == "boolean":
        allowed = boolean_values_for(question_type, boolean_options)
        answer = canonical_boolean_value(pick(record, "correctAnswer"))
        return BooleanQuestion(
            type=question_type.value,
            correct_answer=answer if answer in allowed else allowed[0],
            **shared,
        )

    if family == "matching":
        options = _matching_options(pick(record, "matchingOptions"))
        items = _matching_items(pick(record, "matchingItems"), {option.id for option in options})
        return MatchingQuestion(
            type=question_type.value,
            matching_items=items,
            matching_options=options,
            correct_answer=correct_answer,
            **shared,
        )

    if family == "labeling":
        image_ids = [item for item in (_string_list(pick(record, "diagramImageIds")) or []) if item]
        return DiagramLabelingQuestion(
            type=question_type.value,
            diagram_image_ids=image_ids,
            diagram_labels=_diagram_labels(pick(record, "diagramLabels")),
            correct_answer=correct_answer,
            **shared,
        )

    if family == "completion":
        completion_format = (
            parse_enum(CompletionFormat, pick(record, "format"))
            or legacy_format
            or DEFAULT_COMPLETION_FORMAT
        )
        return CompletionQuestion(
            format=completion_format,
            options=_padded(_string_list(pick(record, "options")), COMPLETION_BLANK_COUNTS[completion_format]),
            correct_answer=correct_answer,
            **shared,
        )

    return FreeTextQuestion(type=question_type.value, correct_answer=correct_answer, **shared)


def normalize_questions(
    value: Any,
    skill: SkillType,
    *,
    boolean_options: BooleanOptionValues | None = None,
) -> list[Question]:
    questions = []
    for entry in as_list(value) or []:
        question = normalize_question(entry, skill, boolean_options=boolean_options)
        if question is not None:
            questions.append(question)
    return questions or [create_question(QuestionType.MULTIPLE_CHOICE)]


# =============================================================================
# Shared fields
# =============================================================================


def _normalize_timing(value: Any) -> Timing:
    record = as_mapping(value)
    if record is None:
        return Timing()
    return Timing(
        enabled=to_bool(pick(record, "enabled"), True),
        duration_minutes=to_int(pick(record, "durationMinutes"), DEFAULT_DURATION_MINUTES, minimum=1),
        enforce=to_bool(pick(record, "enforce"), True),
        start_at=to_optional_str(pick(record, "startAt")),
        end_at=to_optional_str(pick(record, "endAt")),
        auto_submit=to_optional_bool(pick(record, "autoSubmit")),
        reject_late_start=to_optional_bool(pick(record, "rejectLateStart")),
    )


def _normalize_attempts(value: Any) -> Attempts:
    record = as_mapping(value)
    if record is None:
        return Attempts()
    return Attempts(max_attempts=to_optional_int(pick(record, "maxAttempts"), minimum=1))


def _shared_fields(record: Mapping) -> dict:
    return {
        "instructions": to_str(pick(record, "instructions")),
        "timing": _normalize_timing(pick(record, "timing")),
        "attempts": _normalize_attempts(pick(record, "attempts")),
    }


# =============================================================================
# Skill payloads
# =============================================================================


def _reading_sections(value: Any, boolean_options: BooleanOptionValues | None) -> list[ReadingSection]:
    sections = []
    for index, entry in enumerate(as_list(value) or []):
        record = as_mapping(entry)
        if record is None:
            sections.append(create_reading_section(index))
            continue
        sections.append(
            ReadingSection(
                id=to_non_empty_str(pick(record, "id"), new_id()),
                title=to_str(pick(record, "title"), f"Passage {index + 1}"),
                passage=to_str(pick(record, "passage")),
                questions=normalize_questions(
                    pick(record, "questions"), SkillType.READING, boolean_options=boolean_options
                ),
            )
        )
    return sections or [create_reading_section(0)]


def _listening_sections(value: Any, boolean_options: BooleanOptionValues | None) -> list[ListeningSection]:
    sections = []
    for index, entry in enumerate(as_list(value) or []):
        record = as_mapping(entry)
        if record is None:
            sections.append(create_listening_section(index))
            continue
        playback = as_mapping(pick(record, "playback"))
        sections.append(
            ListeningSection(
                id=to_non_empty_str(pick(record, "id"), new_id()),
                title=to_str(pick(record, "title"), f"Section {index + 1}"),
                audio_file_id=to_optional_str(pick(record, "audioFileId")),
                transcript=to_str(pick(record, "transcript")),
                playback=Playback(
                    limit_plays=to_int(pick(playback, "limitPlays"), DEFAULT_LIMIT_PLAYS, minimum=0)
                ),
                questions=normalize_questions(
                    pick(record, "questions"), SkillType.LISTENING, boolean_options=boolean_options
                ),
            )
        )
    return sections or [create_listening_section(0)]


def _task_fields(record: Mapping | None) -> dict:
    timing = to_optional_str(pick(record, "showSampleTiming"))
    return {
        "prompt": to_str(pick(record, "prompt")),
        "rubric_id": to_optional_str(pick(record, "rubricId")),
        "sample_response": to_optional_str(pick(record, "sampleResponse")),
        "show_sample_to_students": to_optional_bool(pick(record, "showSampleToStudents")),
        "show_sample_timing": timing if timing in SAMPLE_TIMING_OPTIONS else None,
        "show_sample_date": to_optional_str(pick(record, "showSampleDate")),
    }


def _writing_payload(record: Mapping) -> dict:
    task1 = as_mapping(pick(record, "task1"))
    visual_type = to_optional_str(pick(task1, "visualType"))
    return {
        "task1": WritingTask1(
            image_file_id=to_optional_str(pick(task1, "imageFileId")),
            visual_type=visual_type if visual_type in WRITING_TASK1_VISUAL_TYPES else None,
            **_task_fields(task1),
        ),
        "task2": WritingTask2(**_task_fields(as_mapping(pick(record, "task2")))),
    }


def _prompt_list(value: Any) -> list[str]:
    return _string_list(value) or [""]


def _speaking_payload(record: Mapping) -> dict:
    part2 = as_mapping(pick(record, "part2"))
    cue_card = as_mapping(pick(part2, "cueCard"))
    return {
        "part1": SpeakingPart(questions=_prompt_list(pick(as_mapping(pick(record, "part1")), "questions"))),
        "part2": SpeakingPart2(
            cue_card=CueCard(
                topic=to_str(pick(cue_card, "topic")),
                bullet_points=_prompt_list(pick(cue_card, "bulletPoints")),
            ),
            prep_seconds=to_int(pick(part2, "prepSeconds"), DEFAULT_PREP_SECONDS, minimum=0),
            talk_seconds=to_int(pick(part2, "talkSeconds"), DEFAULT_TALK_SECONDS, minimum=0),
        ),
        "part3": SpeakingPart(questions=_prompt_list(pick(as_mapping(pick(record, "part3")), "questions"))),
    }


def normalize_assignment_config(
    assignment_type: AssignmentType | str,
    raw: Any,
    *,
    boolean_options: BooleanOptionValues | None = None,
) -> AssignmentConfig:
    """
    Produce a valid config of ``assignment_type`` from arbitrary input.

    Args:
        assignment_type: Skill of the config. Unknown values fall back to reading.
        raw: Persisted config (dict, JSON string, model instance or garbage).
        boolean_options: Enabled boolean option values from a fetched catalog;
            the built-in catalog v1 values are used when omitted.

    Returns:
        A config model that satisfies every invariant of its skill.
    """
    resolved = parse_enum(AssignmentType, assignment_type)
    if resolved is None:
        logger.warning(f"Unknown IELTS assignment type {assignment_type!r}; normalizing as reading")
        resolved = AssignmentType.READING

    record = as_mapping(raw) or {}
    shared = _shared_fields(record)

    if resolved is AssignmentType.READING:
        return ReadingConfig(sections=_reading_sections(pick(record, "sections"), boolean_options), **shared)
    if resolved is AssignmentType.LISTENING:
        return ListeningConfig(sections=_listening_sections(pick(record, "sections"), boolean_options), **shared)
    if resolved is AssignmentType.WRITING:
        return WritingConfig(**_writing_payload(record), **shared)
    return SpeakingConfig(**_speaking_payload(record), **shared)
