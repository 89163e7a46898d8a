"""
IELTS type-card metadata.

Maps enabled assignment-type rows of a catalog version to presentation-ready
cards (title, description, icon, colour theme). Resolution never fails
outward: whenever real rows cannot be served, the built-in four-card table is
returned and the reason is logged once per process.

Fallback reasons:
- active_version_missing       no version is flagged active
- requested_version_not_found  the requested version does not exist
- db_empty_for_version         the version has no enabled assignment types
- invalid_rows                 some row has an empty id or title
- query_failed                 the catalog read raised
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config import get_settings
from src.catalog.schemas import HEX_COLOR_PATTERN
from src.catalog.version_resolver import resolve_version
from src.core.log_dedup import WarningDeduplicator, get_warning_deduplicator
from src.db.database import get_session_factory
from src.db.models import IeltsAssignmentType
from src.ielts.types import FallbackReason

DEDUP_KIND = "ielts_type_metadata"

_HEX_COLOR = re.compile(HEX_COLOR_PATTERN)


@dataclass(frozen=True)
class TypeDefaults:
    icon: str
    description: str
    color_from: str
    color_to: str
    border_color: str

    @property
    def theme(self) -> dict[str, str]:
        return {"color_from": self.color_from, "color_to": self.color_to, "border_color": self.border_color}


TYPE_DEFAULTS = {
    "reading": TypeDefaults(
        "book-open", "Create a reading test with passages and questions", "#EFF6FF", "#DBEAFE", "#BFDBFE"
    ),
    "listening": TypeDefaults(
        "headphones", "Build a listening test with audio sections", "#FAF5FF", "#F3E8FF", "#E9D5FF"
    ),
    "writing": TypeDefaults(
        "pen-tool", "Design Task 1 and Task 2 writing prompts", "#F0FDF4", "#DCFCE7", "#BBF7D0"
    ),
    "speaking": TypeDefaults(
        "mic", "Set up speaking test with all three parts", "#FFF7ED", "#FFEDD5", "#FED7AA"
    ),
}

GENERIC_DEFAULTS = TypeDefaults("book-open", "Create an IELTS assignment", "#F8FAFC", "#F1F5F9", "#CBD5E1")

FALLBACK_TYPE_METADATA: list[dict[str, Any]] = [
    {
        "id": type_id,
        "title": type_id.capitalize(),
        "description": defaults.description,
        "icon": defaults.icon,
        "theme": defaults.theme,
        "enabled": True,
        "sort_order": order,
    }
    for order, (type_id, defaults) in enumerate(TYPE_DEFAULTS.items(), start=1)
]


@dataclass
class TypeMetadataResult:
    """Resolved cards plus, for in-process callers, why the fallback was used."""

    version: int
    types: list[dict[str, Any]]
    fallback_reason: FallbackReason | None = None

    @property
    def is_fallback(self) -> bool:
        return self.fallback_reason is not None

    def to_payload(self) -> dict[str, Any]:
        return {"version": self.version, "types": self.types}


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _color(value: Any, default: str) -> str:
    text = _text(value)
    return text if _HEX_COLOR.match(text) else default


def map_type_row(row: Any) -> dict[str, Any] | None:
    """Card for one assignment-type row, or None when id or title is blank."""
    type_id = _text(row.id)
    title = _text(row.label)
    if not type_id or not title:
        return None

    defaults = TYPE_DEFAULTS.get(type_id, GENERIC_DEFAULTS)
    return {
        "id": type_id,
        "title": title,
        "description": _text(row.description) or defaults.description,
        "icon": _text(row.icon) or defaults.icon,
        "theme": {
            "color_from": _color(row.theme_color_from, defaults.color_from),
            "color_to": _color(row.theme_color_to, defaults.color_to),
            "border_color": _color(row.theme_border_color, defaults.border_color),
        },
        "enabled": bool(row.enabled),
        "sort_order": row.sort_order,
    }


class TypeMetadataService:
    """Resolves type-card metadata with a guaranteed fallback."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        deduplicator: WarningDeduplicator | None = None,
        default_version: int | None = None,
    ):
        self._session_factory = session_factory or get_session_factory()
        self._deduplicator = deduplicator or get_warning_deduplicator()
        self._default_version = default_version or get_settings().ielts_fallback_version

    def _fallback(self, reason: FallbackReason, version: int, **details: Any) -> TypeMetadataResult:
        first_time, occurrences = self._deduplicator.record(DEDUP_KIND, reason.value)
        if first_time:
            logger.bind(
                event="ielts_type_metadata_fallback_used",
                reason=reason.value,
                fallback_count=len(FALLBACK_TYPE_METADATA),
                **details,
            ).warning(f"Using fallback IELTS type metadata configuration ({reason.value})")
        else:
            logger.debug(f"IELTS type metadata fallback {reason.value} repeated ({occurrences}x)")

        return TypeMetadataResult(
            version=version,
            types=copy.deepcopy(FALLBACK_TYPE_METADATA),
            fallback_reason=reason,
        )

    def _requested_or_default(self, requested: int | None) -> int:
        return requested if requested is not None and requested > 0 else self._default_version

    async def resolve(self, version: int | None = None) -> TypeMetadataResult:
        """
        Cards for ``version`` (active version when omitted).

        Never raises; see the module docstring for the fallback reasons.
        """
        try:
            async with self._session_factory() as session:
                target_version = await resolve_version(session, version)
                if target_version is None:
                    if version is not None:
                        return self._fallback(
                            FallbackReason.REQUESTED_VERSION_NOT_FOUND,
                            self._requested_or_default(version),
                            requested_version=version,
                        )
                    return self._fallback(FallbackReason.ACTIVE_VERSION_MISSING, self._default_version)

                rows = (
                    await session.scalars(
                        select(IeltsAssignmentType)
                        .where(
                            IeltsAssignmentType.config_version == target_version,
                            IeltsAssignmentType.enabled.is_(True),
                        )
                        .order_by(IeltsAssignmentType.sort_order, IeltsAssignmentType.id)
                    )
                ).all()
        except Exception as e:  # Intentionally broad - type metadata must always be served
            return self._fallback(
                FallbackReason.QUERY_FAILED,
                self._requested_or_default(version),
                err=str(e),
                requested_version=version,
            )

        if not rows:
            return self._fallback(FallbackReason.DB_EMPTY_FOR_VERSION, target_version, config_version=target_version)

        cards = [map_type_row(row) for row in rows]
        valid = [card for card in cards if card is not None]
        if len(valid) != len(rows):
            return self._fallback(
                FallbackReason.INVALID_ROWS,
                target_version,
                config_version=target_version,
                row_count=len(rows),
                invalid_count=len(rows) - len(valid),
            )

        return TypeMetadataResult(version=target_version, types=valid)

    async def resolve_type_metadata(self, version: int | None = None) -> dict[str, Any]:
        """Wire payload ``{version, types}``."""
        return (await self.resolve(version)).to_payload()
