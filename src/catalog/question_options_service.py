"""
Boolean question option sets (True/False/Not Given, Yes/No/Not Given).

Option values are versioned with the rest of the catalog so the authoring UI
and the normalizer agree on which answers a boolean question accepts.
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.catalog.version_resolver import resolve_version
from src.db.database import get_session_factory
from src.db.models import IeltsQuestionOption
from src.ielts.coercion import canonical_boolean_value
from src.ielts.types import BooleanOptionType, parse_enum


def normalize_option_value(value: Any) -> str | None:
    """Canonical spelling of a stored or submitted option value ("Not Given" -> "not_given")."""
    return canonical_boolean_value(value)


def parse_option_type(value: Any) -> BooleanOptionType | None:
    return parse_enum(BooleanOptionType, value)


class QuestionOptionsService:
    """Resolves enabled boolean option sets for a catalog version."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None):
        self._session_factory = session_factory or get_session_factory()

    async def fetch_boolean_options(
        self,
        option_type: BooleanOptionType | str,
        version: int | None = None,
    ) -> dict[str, Any] | None:
        """
        Enabled options of ``option_type`` for ``version`` (active when omitted).

        Returns None when the version is missing or has no enabled options of
        that type; an empty option list is never returned.

        Raises:
            ValueError: ``option_type`` is not true_false or yes_no.
        """
        option_type = BooleanOptionType(option_type)

        async with self._session_factory() as session:
            target_version = await resolve_version(session, version)
            if target_version is None:
                return None

            rows = (
                await session.scalars(
                    select(IeltsQuestionOption)
                    .where(
                        IeltsQuestionOption.config_version == target_version,
                        IeltsQuestionOption.option_type == option_type.value,
                        IeltsQuestionOption.enabled.is_(True),
                    )
                    .order_by(IeltsQuestionOption.sort_order)
                )
            ).all()

        if not rows:
            return None

        return {
            "type": option_type.value,
            "version": target_version,
            "options": [
                {
                    "value": row.value,
                    "label": row.label,
                    "score": row.score,
                    "enabled": row.enabled,
                    "sort_order": row.sort_order,
                }
                for row in rows
            ],
        }

    async def fetch_boolean_option_values(
        self,
        version: int | None = None,
    ) -> dict[BooleanOptionType, list[str]]:
        """
        Canonical enabled values per option set, ready to hand to the normalizer.

        Option sets that cannot be resolved are left out so callers fall back
        to the built-in values for them.
        """
        values: dict[BooleanOptionType, list[str]] = {}
        for option_type in BooleanOptionType:
            payload = await self.fetch_boolean_options(option_type, version)
            if payload is None:
                logger.warning(f"No enabled {option_type.value} options for IELTS catalog version {version or 'active'}")
                continue
            canonical = [normalize_option_value(option["value"]) for option in payload["options"]]
            values[option_type] = [value for value in canonical if value]
        return values
