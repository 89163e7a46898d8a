"""
Response models for the IELTS catalog endpoints.

These describe the exact outbound shapes; unknown keys are rejected so a
payload that drifted from its contract fails validation instead of leaking.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"


class CatalogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


# ========================================
# Catalog options
# ========================================


class CatalogOption(CatalogModel):
    """One selectable catalog entry (speaking parts, completion formats, sample timings)."""

    id: str
    label: str
    description: str | None = None
    enabled: bool
    sort_order: int


class AssignmentTypeOption(CatalogOption):
    icon: str | None = None


class QuestionTypeOption(CatalogOption):
    skill_type: Literal["reading", "listening"]


class WritingTaskTypeOption(CatalogOption):
    task_number: Literal[1, 2]


class QuestionTypesBySkill(CatalogModel):
    reading: list[QuestionTypeOption]
    listening: list[QuestionTypeOption]


class WritingTaskTypesByTask(CatalogModel):
    task1: list[WritingTaskTypeOption]
    task2: list[WritingTaskTypeOption]


class IeltsConfigResponse(CatalogModel):
    """GET /config/ielts"""

    version: int = Field(ge=1)
    assignment_types: list[AssignmentTypeOption]
    question_types: QuestionTypesBySkill
    writing_task_types: WritingTaskTypesByTask
    speaking_part_types: list[CatalogOption]
    completion_formats: list[CatalogOption]
    sample_timing_options: list[CatalogOption]


# ========================================
# Versions
# ========================================


class ConfigVersionInfo(CatalogModel):
    version: int = Field(ge=1)
    name: str
    description: str | None = None
    is_active: bool
    activated_at: datetime | None = None
    created_at: datetime


class ConfigVersionsResponse(CatalogModel):
    """GET /config/ielts/versions (active_version is 0 when none is active)"""

    versions: list[ConfigVersionInfo]
    active_version: int = Field(ge=0)


# ========================================
# Boolean question options
# ========================================


class QuestionOptionValue(CatalogModel):
    value: str
    label: str
    score: int
    enabled: bool
    sort_order: int


class QuestionOptionsResponse(CatalogModel):
    """GET /config/ielts/question-options"""

    type: Literal["true_false", "yes_no"]
    version: int = Field(ge=1)
    options: list[QuestionOptionValue] = Field(min_length=1)


# ========================================
# Type-card metadata
# ========================================


class TypeMetadataTheme(CatalogModel):
    color_from: str = Field(pattern=HEX_COLOR_PATTERN)
    color_to: str = Field(pattern=HEX_COLOR_PATTERN)
    border_color: str = Field(pattern=HEX_COLOR_PATTERN)


class TypeMetadataItem(CatalogModel):
    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str
    icon: str
    theme: TypeMetadataTheme
    enabled: bool
    sort_order: int


class TypeMetadataResponse(CatalogModel):
    """GET /config/ielts/type-metadata"""

    version: int = Field(ge=1)
    types: list[TypeMetadataItem]


# ========================================
# Readiness
# ========================================


class ReadinessCounts(CatalogModel):
    versions: int = 0
    assignment_types: int = 0
    question_types: int = 0
    writing_task_types: int = 0
    speaking_part_types: int = 0
    completion_formats: int = 0
    sample_timing_options: int = 0


class ReadinessReport(CatalogModel):
    ready: bool
    reason: str | None = None
    checked_at: datetime
    active_version: int | None = None
    counts: ReadinessCounts = Field(default_factory=ReadinessCounts)
