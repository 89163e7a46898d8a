"""
Fixtures for catalog integration tests.

Each test gets its own file-backed SQLite database (aiosqlite). A file is used
instead of :memory: so the concurrent per-read sessions of the catalog fan-out
all see the same data.
"""
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.db.models import Base, IeltsConfigVersion
from src.db.seed import seed_catalog


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Async session factory bound to an empty catalog database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ielts_catalog.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def seeded_factory(session_factory):
    """Session factory whose database holds the initial catalog as active version 1."""
    async with session_factory() as session:
        await seed_catalog(session, version=1)
        await session.commit()
    return session_factory


@pytest.fixture
def add_versions(session_factory):
    """Insert bare version rows: add_versions((1, False), (2, True), ...)."""
    async def _add(*versions):
        async with session_factory() as session:
            for number, active in versions:
                session.add(IeltsConfigVersion(version=number, name=f"v{number}", is_active=active))
            await session.commit()

    return _add
