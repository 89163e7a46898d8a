"""
IELTS catalog reads.

CatalogService assembles the aggregate catalog payload for one version,
lists versions, and reports whether the active version carries the minimum
reference data authoring needs.

Reads that are independent of each other run concurrently with
asyncio.gather. An AsyncSession cannot run statements concurrently, so
every concurrent read opens its own session from the shared factory. The
join is all-or-nothing: every read is awaited to completion, then the first
failure (in table order) is raised and no partial payload is returned.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from collections.abc import Awaitable
from typing import Any

from loguru import logger
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.catalog.version_resolver import resolve_version
from src.db.database import get_session_factory
from src.db.models import (
    IeltsAssignmentType,
    IeltsCompletionFormat,
    IeltsConfigVersion,
    IeltsQuestionType,
    IeltsSampleTimingOption,
    IeltsSpeakingPartType,
    IeltsWritingTaskType,
)

# Catalog tables keyed by the name they carry in readiness counts
CATALOG_TABLES = {
    "assignment_types": IeltsAssignmentType,
    "question_types": IeltsQuestionType,
    "writing_task_types": IeltsWritingTaskType,
    "speaking_part_types": IeltsSpeakingPartType,
    "completion_formats": IeltsCompletionFormat,
    "sample_timing_options": IeltsSampleTimingOption,
}


def _option(row: Any) -> dict[str, Any]:
    return {
        "id": row.id,
        "label": row.label,
        "description": row.description,
        "enabled": row.enabled,
        "sort_order": row.sort_order,
    }


def _assignment_type(row: IeltsAssignmentType) -> dict[str, Any]:
    return {**_option(row), "icon": row.icon}


def _question_type(row: IeltsQuestionType) -> dict[str, Any]:
    return {**_option(row), "skill_type": row.skill_type}


def _writing_task_type(row: IeltsWritingTaskType) -> dict[str, Any]:
    return {**_option(row), "task_number": row.task_number}


async def _gather_all(*reads: Awaitable[Any]) -> list[Any]:
    """Await every read; raise the first failure once all have settled."""
    results = await asyncio.gather(*reads, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


def _version_info(row: IeltsConfigVersion) -> dict[str, Any]:
    return {
        "version": row.version,
        "name": row.name,
        "description": row.description,
        "is_active": row.is_active,
        "activated_at": row.activated_at,
        "created_at": row.created_at,
    }


class CatalogService:
    """Read access to the versioned IELTS catalog."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None):
        self._session_factory = session_factory or get_session_factory()

    async def _all(self, stmt: Select) -> list[Any]:
        async with self._session_factory() as session:
            result = await session.scalars(stmt)
            return list(result.all())

    async def _scalar(self, stmt: Select) -> Any:
        async with self._session_factory() as session:
            return await session.scalar(stmt)

    async def resolve_version(self, requested: int | None = None) -> int | None:
        async with self._session_factory() as session:
            return await resolve_version(session, requested)

    async def version_exists(self, version: int) -> bool:
        found = await self._scalar(
            select(IeltsConfigVersion.version).where(IeltsConfigVersion.version == version)
        )
        return found is not None

    # ========================================
    # Aggregate catalog
    # ========================================

    async def fetch_catalog(self, version: int) -> dict[str, Any] | None:
        """
        Build the full catalog payload for ``version``.

        Returns None when the version does not exist. Rows sharing a table are
        partitioned by skill or task number, each partition in sort order.
        """
        if not await self.version_exists(version):
            return None

        def rows_of(model: Any) -> Select:
            return select(model).where(model.config_version == version).order_by(model.sort_order)

        (
            assignment_types,
            question_types,
            writing_task_types,
            speaking_part_types,
            completion_formats,
            sample_timing_options,
        ) = await _gather_all(*(self._all(rows_of(model)) for model in CATALOG_TABLES.values()))

        logger.debug(
            f"Fetched IELTS catalog v{version}: {len(assignment_types)} assignment types, "
            f"{len(question_types)} question types"
        )

        return {
            "version": version,
            "assignment_types": [_assignment_type(row) for row in assignment_types],
            "question_types": {
                skill: [_question_type(row) for row in question_types if row.skill_type == skill]
                for skill in ("reading", "listening")
            },
            "writing_task_types": {
                f"task{task}": [_writing_task_type(row) for row in writing_task_types if row.task_number == task]
                for task in (1, 2)
            },
            "speaking_part_types": [_option(row) for row in speaking_part_types],
            "completion_formats": [_option(row) for row in completion_formats],
            "sample_timing_options": [_option(row) for row in sample_timing_options],
        }

    async def get_config(self, version: int | None = None) -> dict[str, Any] | None:
        """Catalog for ``version``, or for the active version when omitted."""
        resolved = await self.resolve_version(version)
        if resolved is None:
            return None
        return await self.fetch_catalog(resolved)

    # ========================================
    # Versions
    # ========================================

    async def list_versions(self) -> dict[str, Any]:
        """All versions newest first, plus the active version number (or None)."""
        rows = await self._all(select(IeltsConfigVersion).order_by(IeltsConfigVersion.version.desc()))
        active = next((row.version for row in rows if row.is_active), None)
        return {"versions": [_version_info(row) for row in rows], "active_version": active}

    # ========================================
    # Readiness
    # ========================================

    async def readiness_report(self) -> dict[str, Any]:
        """
        Check that the active version carries every catalog authoring needs.

        Returns a dict with ready, reason, checked_at, active_version and
        per-table counts.
        """
        checked_at = datetime.now(timezone.utc)
        active_version = await self.resolve_version()
        counts = {"versions": 0, **{name: 0 for name in CATALOG_TABLES}}

        if active_version is None:
            return {
                "ready": False,
                "reason": "No active IELTS config version found.",
                "checked_at": checked_at,
                "active_version": None,
                "counts": counts,
            }

        def count_of(model: Any) -> Select:
            return select(func.count()).select_from(model).where(model.config_version == active_version)

        totals = await _gather_all(
            self._scalar(select(func.count()).select_from(IeltsConfigVersion)),
            *(self._scalar(count_of(model)) for model in CATALOG_TABLES.values()),
        )
        counts = dict(zip(counts.keys(), (int(total or 0) for total in totals)))

        missing = [name for name, total in counts.items() if total <= 0]
        return {
            "ready": not missing,
            "reason": f"Missing IELTS config data: {', '.join(missing)}." if missing else None,
            "checked_at": checked_at,
            "active_version": active_version,
            "counts": counts,
        }
