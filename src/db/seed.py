"""
Seed data for the initial IELTS catalog version.

Mirrors the values the authoring UI used to hardcode, so a fresh database
serves a complete, active catalog (version 1) without manual setup.

Usage:
    ielts-config seed
    ielts-config seed --version 2 --no-activate
"""
from __future__ import annotations

from datetime import datetime, timezone

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import (
    IeltsAssignmentType,
    IeltsCompletionFormat,
    IeltsConfigVersion,
    IeltsQuestionOption,
    IeltsQuestionType,
    IeltsSampleTimingOption,
    IeltsSpeakingPartType,
    IeltsWritingTaskType,
)

# (id, label, description, icon, (color_from, color_to, border_color))
ASSIGNMENT_TYPES = [
    (
        "reading", "Reading", "Create a reading test with passages and questions",
        "book-open", ("#EFF6FF", "#DBEAFE", "#BFDBFE"),
    ),
    (
        "listening", "Listening", "Build a listening test with audio sections",
        "headphones", ("#FAF5FF", "#F3E8FF", "#E9D5FF"),
    ),
    (
        "writing", "Writing", "Design Task 1 and Task 2 writing prompts",
        "pen-tool", ("#F0FDF4", "#DCFCE7", "#BBF7D0"),
    ),
    (
        "speaking", "Speaking", "Set up speaking test with all three parts",
        "mic", ("#FFF7ED", "#FFEDD5", "#FED7AA"),
    ),
]

READING_QUESTION_TYPES = [
    ("multiple_choice", "Multiple Choice"),
    ("true_false_not_given", "True/False/Not Given"),
    ("yes_no_not_given", "Yes/No/Not Given"),
    ("matching_headings", "Matching Headings"),
    ("matching_information", "Matching Information"),
    ("matching_features", "Matching Features"),
    ("sentence_completion", "Sentence Completion"),
    ("completion", "Completion (Form/Note/Table/etc.)"),
    ("diagram_labeling", "Diagram Labeling"),
    ("short_answer", "Short Answer"),
]

LISTENING_QUESTION_TYPES = [
    ("multiple_choice", "Multiple Choice"),
    ("matching", "Matching"),
    ("map_diagram_labeling", "Map/Diagram Labeling"),
    ("completion", "Completion (Form/Note/Table/etc.)"),
    ("sentence_completion", "Sentence Completion"),
    ("short_answer", "Short Answer"),
]

WRITING_TASK1_TYPES = [
    ("line_graph", "Line Graph"),
    ("bar_chart", "Bar Chart"),
    ("pie_chart", "Pie Chart"),
    ("table", "Table"),
    ("diagram", "Diagram"),
    ("map", "Map"),
    ("process", "Process"),
]

WRITING_TASK2_TYPES = [
    ("opinion", "Opinion Essay"),
    ("discussion", "Discussion Essay"),
    ("problem_solution", "Problem-Solution Essay"),
    ("advantages_disadvantages", "Advantages & Disadvantages Essay"),
    ("double_question", "Double Question Essay"),
]

SPEAKING_PART_TYPES = [
    ("part1_personal", "Part 1: Personal Questions"),
    ("part2_cue_card", "Part 2: Cue Card"),
    ("part3_discussion", "Part 3: Discussion"),
]

COMPLETION_FORMATS = [
    ("form", "Form Completion"),
    ("note", "Note Completion"),
    ("table", "Table Completion"),
    ("flow_chart", "Flow Chart Completion"),
    ("summary", "Summary Completion"),
]

SAMPLE_TIMING_OPTIONS = [
    ("immediate", "Immediately", "Show sample response immediately"),
    ("after_submission", "After student submits", "Show after student submits their work"),
    ("after_grading", "After grading is complete", "Show after teacher grades the submission"),
    ("specific_date", "On a specific date", "Show on a specific date and time"),
]

# option_type -> [(value, label, score)]
QUESTION_OPTIONS = {
    "true_false": [("true", "True", 1), ("false", "False", 0), ("not_given", "Not Given", 0)],
    "yes_no": [("yes", "Yes", 1), ("no", "No", 0), ("not_given", "Not Given", 0)],
}


def build_catalog_rows(version: int) -> list:
    """Build every option row of the initial catalog for ``version``."""
    rows: list = []

    for order, (type_id, label, description, icon, theme) in enumerate(ASSIGNMENT_TYPES, start=1):
        rows.append(
            IeltsAssignmentType(
                id=type_id,
                config_version=version,
                label=label,
                description=description,
                icon=icon,
                theme_color_from=theme[0],
                theme_color_to=theme[1],
                theme_border_color=theme[2],
                enabled=True,
                sort_order=order,
            )
        )

    for skill, types in (("reading", READING_QUESTION_TYPES), ("listening", LISTENING_QUESTION_TYPES)):
        for order, (type_id, label) in enumerate(types, start=1):
            rows.append(
                IeltsQuestionType(
                    id=type_id,
                    config_version=version,
                    skill_type=skill,
                    label=label,
                    enabled=True,
                    sort_order=order,
                )
            )

    for task_number, types in ((1, WRITING_TASK1_TYPES), (2, WRITING_TASK2_TYPES)):
        for order, (type_id, label) in enumerate(types, start=1):
            rows.append(
                IeltsWritingTaskType(
                    id=type_id,
                    config_version=version,
                    task_number=task_number,
                    label=label,
                    enabled=True,
                    sort_order=order,
                )
            )

    for order, (part_id, label) in enumerate(SPEAKING_PART_TYPES, start=1):
        rows.append(
            IeltsSpeakingPartType(
                id=part_id, config_version=version, label=label, enabled=True, sort_order=order
            )
        )

    for order, (format_id, label) in enumerate(COMPLETION_FORMATS, start=1):
        rows.append(
            IeltsCompletionFormat(
                id=format_id, config_version=version, label=label, enabled=True, sort_order=order
            )
        )

    for order, (timing_id, label, description) in enumerate(SAMPLE_TIMING_OPTIONS, start=1):
        rows.append(
            IeltsSampleTimingOption(
                id=timing_id,
                config_version=version,
                label=label,
                description=description,
                enabled=True,
                sort_order=order,
            )
        )

    for option_type, options in QUESTION_OPTIONS.items():
        for order, (value, label, score) in enumerate(options, start=1):
            rows.append(
                IeltsQuestionOption(
                    config_version=version,
                    option_type=option_type,
                    value=value,
                    label=label,
                    score=score,
                    enabled=True,
                    sort_order=order,
                )
            )

    return rows


async def seed_catalog(
    session: AsyncSession,
    version: int = 1,
    name: str = "Initial",
    description: str | None = "First IELTS configuration version",
    activate: bool = True,
) -> bool:
    """
    Insert a complete catalog version.

    Returns False (and writes nothing) when the version already exists.
    Activating a version deactivates every other version in the same
    transaction so at most one version stays active.
    """
    existing = await session.scalar(
        select(IeltsConfigVersion.version).where(IeltsConfigVersion.version == version)
    )
    if existing is not None:
        logger.info(f"IELTS catalog version {version} already exists; skipping seed")
        return False

    if activate:
        await session.execute(
            update(IeltsConfigVersion)
            .where(IeltsConfigVersion.is_active.is_(True))
            .values(is_active=False)
        )

    session.add(
        IeltsConfigVersion(
            version=version,
            name=name,
            description=description,
            is_active=activate,
            activated_at=datetime.now(timezone.utc) if activate else None,
        )
    )
    await session.flush()

    rows = build_catalog_rows(version)
    session.add_all(rows)
    await session.flush()

    logger.info(f"Seeded IELTS catalog version {version} ({len(rows)} option rows, active={activate})")
    return True
