"""
Assignment configuration model.

An assignment config is a union discriminated by its skill ``type``. All four
variants share ``version``, ``instructions``, ``timing`` and ``attempts`` and
carry exactly one skill payload:

- reading:   sections[] (title, passage, questions)
- listening: sections[] (title, audio, transcript, playback, questions)
- writing:   task1 (visual prompt) and task2 (essay prompt)
- speaking:  part1, part2 (cue card), part3
"""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter

from src.ielts.questions import IeltsModel, Question, create_question, new_id
from src.ielts.types import AssignmentType, QuestionType

CONFIG_SCHEMA_VERSION = 1

DEFAULT_DURATION_MINUTES = 60
DEFAULT_LIMIT_PLAYS = 1
DEFAULT_PREP_SECONDS = 60
DEFAULT_TALK_SECONDS = 120

VisualType = Literal["line_graph", "bar_chart", "pie_chart", "table", "diagram", "map", "process"]
SampleTiming = Literal["immediate", "after_submission", "after_grading", "specific_date"]


class Timing(IeltsModel):
    enabled: bool = True
    duration_minutes: int = Field(default=DEFAULT_DURATION_MINUTES, ge=1)
    enforce: bool = True
    start_at: str | None = None
    end_at: str | None = None
    auto_submit: bool | None = None
    reject_late_start: bool | None = None


class Attempts(IeltsModel):
    # None means unlimited
    max_attempts: int | None = Field(default=None, ge=1)


# =============================================================================
# Reading / listening
# =============================================================================


class ReadingSection(IeltsModel):
    id: str = Field(default_factory=new_id)
    title: str = ""
    passage: str = ""
    questions: list[Question] = Field(min_length=1)


class Playback(IeltsModel):
    limit_plays: int = Field(default=DEFAULT_LIMIT_PLAYS, ge=0)


class ListeningSection(IeltsModel):
    id: str = Field(default_factory=new_id)
    title: str = ""
    audio_file_id: str | None = None
    transcript: str = ""
    playback: Playback = Field(default_factory=Playback)
    questions: list[Question] = Field(min_length=1)


# =============================================================================
# Writing
# =============================================================================


class WritingTask2(IeltsModel):
    prompt: str = ""
    rubric_id: str | None = None
    sample_response: str | None = None
    show_sample_to_students: bool | None = None
    show_sample_timing: SampleTiming | None = None
    show_sample_date: str | None = None


class WritingTask1(WritingTask2):
    image_file_id: str | None = None
    visual_type: VisualType | None = None


# =============================================================================
# Speaking
# =============================================================================


class SpeakingPart(IeltsModel):
    questions: list[str] = Field(default_factory=lambda: [""], min_length=1)


class CueCard(IeltsModel):
    topic: str = ""
    bullet_points: list[str] = Field(default_factory=lambda: [""], min_length=1)


class SpeakingPart2(IeltsModel):
    cue_card: CueCard = Field(default_factory=CueCard)
    prep_seconds: int = Field(default=DEFAULT_PREP_SECONDS, ge=0)
    talk_seconds: int = Field(default=DEFAULT_TALK_SECONDS, ge=0)


# =============================================================================
# Configs
# =============================================================================


class ConfigBase(IeltsModel):
    version: Literal[1] = CONFIG_SCHEMA_VERSION
    instructions: str = ""
    timing: Timing = Field(default_factory=Timing)
    attempts: Attempts = Field(default_factory=Attempts)


class ReadingConfig(ConfigBase):
    type: Literal["reading"] = "reading"
    sections: list[ReadingSection] = Field(min_length=1)


class ListeningConfig(ConfigBase):
    type: Literal["listening"] = "listening"
    sections: list[ListeningSection] = Field(min_length=1)


class WritingConfig(ConfigBase):
    type: Literal["writing"] = "writing"
    task1: WritingTask1 = Field(default_factory=WritingTask1)
    task2: WritingTask2 = Field(default_factory=WritingTask2)


class SpeakingConfig(ConfigBase):
    type: Literal["speaking"] = "speaking"
    part1: SpeakingPart = Field(default_factory=SpeakingPart)
    part2: SpeakingPart2 = Field(default_factory=SpeakingPart2)
    part3: SpeakingPart = Field(default_factory=SpeakingPart)


AssignmentConfig = Annotated[
    Union[ReadingConfig, ListeningConfig, WritingConfig, SpeakingConfig],
    Field(discriminator="type"),
]

_config_adapter: TypeAdapter[AssignmentConfig] = TypeAdapter(AssignmentConfig)


def parse_assignment_config(data: object) -> AssignmentConfig:
    """Strictly validate a config that must already be well formed."""
    return _config_adapter.validate_python(data)


def create_reading_section(index: int = 0) -> ReadingSection:
    return ReadingSection(
        title=f"Passage {index + 1}",
        questions=[create_question(QuestionType.MULTIPLE_CHOICE)],
    )


def create_listening_section(index: int = 0) -> ListeningSection:
    return ListeningSection(
        title=f"Section {index + 1}",
        questions=[create_question(QuestionType.MULTIPLE_CHOICE)],
    )


def create_assignment_config(assignment_type: AssignmentType | str) -> AssignmentConfig:
    """Default config for a skill: one section, task pair or part set with placeholders."""
    assignment_type = AssignmentType(assignment_type)
    if assignment_type is AssignmentType.READING:
        return ReadingConfig(sections=[create_reading_section(0)])
    if assignment_type is AssignmentType.LISTENING:
        return ListeningConfig(sections=[create_listening_section(0)])
    if assignment_type is AssignmentType.WRITING:
        return WritingConfig()
    return SpeakingConfig()
