"""
Versioned IELTS catalog models.

Every option row belongs to exactly one catalog version (``config_version``
references ``ielts_config_versions.version``). Rows are written by the seeding
process and are read-only for the config services.

Tables:
- ielts_config_versions: numbered snapshots, at most one flagged active
- ielts_assignment_types: reading/listening/writing/speaking (+ type-card metadata)
- ielts_question_types: partitioned by skill_type (reading | listening)
- ielts_writing_task_types: partitioned by task_number (1 | 2)
- ielts_speaking_part_types
- ielts_completion_formats
- ielts_sample_timing_options
- ielts_question_options: boolean option sets (true_false | yes_no)
"""
from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class IeltsConfigVersion(Base):
    """A numbered, immutable snapshot of every IELTS option catalog."""

    __tablename__ = "ielts_config_versions"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    version: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    activated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<IeltsConfigVersion(version={self.version}, active={self.is_active})>"


def _version_fk():
    return mapped_column(
        ForeignKey("ielts_config_versions.version", ondelete="CASCADE"),
        primary_key=True,
    )


class IeltsAssignmentType(Base):
    """Skill-level assignment type, also the source of type-card metadata."""

    __tablename__ = "ielts_assignment_types"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    config_version: Mapped[int] = _version_fk()
    label: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    icon: Mapped[str | None] = mapped_column(Text)
    theme_color_from: Mapped[str | None] = mapped_column(Text)
    theme_color_to: Mapped[str | None] = mapped_column(Text)
    theme_border_color: Mapped[str | None] = mapped_column(Text)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class IeltsQuestionType(Base):
    """Question type, partitioned by the skill it belongs to."""

    __tablename__ = "ielts_question_types"
    __table_args__ = (
        CheckConstraint("skill_type IN ('reading', 'listening')", name="ck_ielts_question_types_skill"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    config_version: Mapped[int] = _version_fk()
    skill_type: Mapped[str] = mapped_column(Text, primary_key=True)
    label: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class IeltsWritingTaskType(Base):
    """Writing prompt type, partitioned by task number (1 = visual, 2 = essay)."""

    __tablename__ = "ielts_writing_task_types"
    __table_args__ = (
        CheckConstraint("task_number IN (1, 2)", name="ck_ielts_writing_task_types_task"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    config_version: Mapped[int] = _version_fk()
    task_number: Mapped[int] = mapped_column(Integer, primary_key=True)
    label: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class IeltsSpeakingPartType(Base):
    __tablename__ = "ielts_speaking_part_types"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    config_version: Mapped[int] = _version_fk()
    label: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class IeltsCompletionFormat(Base):
    __tablename__ = "ielts_completion_formats"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    config_version: Mapped[int] = _version_fk()
    label: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class IeltsSampleTimingOption(Base):
    """When a writing sample response becomes visible to students."""

    __tablename__ = "ielts_sample_timing_options"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    config_version: Mapped[int] = _version_fk()
    label: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class IeltsQuestionOption(Base):
    """
    One answer value of a boolean-style question type.

    option_type:
        true_false -> used by true_false_not_given questions
        yes_no     -> used by yes_no_not_given questions
    """

    __tablename__ = "ielts_question_options"
    __table_args__ = (
        UniqueConstraint(
            "config_version", "option_type", "value", name="ielts_question_opts_cfg_type_value_key"
        ),
        CheckConstraint("option_type IN ('true_false', 'yes_no')", name="ck_ielts_question_options_type"),
        Index(
            "ielts_question_opts_lookup_idx",
            "config_version",
            "option_type",
            "enabled",
            "sort_order",
        ),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    config_version: Mapped[int] = mapped_column(
        ForeignKey("ielts_config_versions.version", ondelete="CASCADE"), nullable=False
    )
    option_type: Mapped[str] = mapped_column(Text, nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    label: Mapped[str] = mapped_column(Text, nullable=False)
    score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
