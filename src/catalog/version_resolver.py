"""
Catalog version resolution.

A request either names a catalog version explicitly or gets the active one.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import IeltsConfigVersion


async def resolve_version(session: AsyncSession, requested: int | None = None) -> int | None:
    """
    Resolve the catalog version a request should read.

    With ``requested`` the exact version must exist. Without it the active
    version is used; if several rows are flagged active the newest wins.

    Returns:
        The version number, or None when nothing matches.
    """
    if requested is not None:
        stmt = select(IeltsConfigVersion.version).where(IeltsConfigVersion.version == requested)
    else:
        stmt = (
            select(IeltsConfigVersion.version)
            .where(IeltsConfigVersion.is_active.is_(True))
            .order_by(IeltsConfigVersion.version.desc())
            .limit(1)
        )
    return await session.scalar(stmt)
