"""
End-to-end API tests against a seeded SQLite catalog.

Requests go through httpx's ASGI transport on the test's event loop, so the
aiosqlite connections and the application share one loop.
"""

import httpx
import pytest
import pytest_asyncio

from src.api.main import app
from src.api.routers.ielts_config_router import (
    get_catalog_service,
    get_question_options_service,
    get_type_metadata_service,
)
from src.catalog.catalog_service import CatalogService
from src.catalog.question_options_service import QuestionOptionsService
from src.catalog.type_metadata_service import TypeMetadataService
from src.core.log_dedup import WarningDeduplicator
from src.db.database import configure_engine, dispose_engine

PREFIX = "/api/v1/config/ielts"


@pytest_asyncio.fixture
async def api(seeded_factory, tmp_path):
    """HTTP client whose services read the seeded catalog."""
    # Health checks use the module-level engine; point it at the same file
    configure_engine(f"sqlite:///{tmp_path / 'ielts_catalog.db'}")
    app.dependency_overrides[get_catalog_service] = lambda: CatalogService(seeded_factory)
    app.dependency_overrides[get_question_options_service] = lambda: QuestionOptionsService(seeded_factory)
    app.dependency_overrides[get_type_metadata_service] = lambda: TypeMetadataService(
        seeded_factory, deduplicator=WarningDeduplicator(), default_version=1
    )

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    await dispose_engine()


class TestCatalogEndpoints:
    @pytest.mark.asyncio
    async def test_active_catalog(self, api):
        response = await api.get(PREFIX)

        assert response.status_code == 200
        body = response.json()
        assert body["version"] == 1
        assert [row["id"] for row in body["assignment_types"]] == ["reading", "listening", "writing", "speaking"]
        assert len(body["question_types"]["reading"]) == 10

    @pytest.mark.asyncio
    async def test_unknown_version(self, api):
        response = await api.get(PREFIX, params={"version": "5"})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "IELTS_CONFIG_VERSION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_version_beyond_integer_column(self, api):
        response = await api.get(PREFIX, params={"version": "99999999999999999999"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "IELTS_CONFIG_INVALID_VERSION"

    @pytest.mark.asyncio
    async def test_largest_integer_version_not_found(self, api):
        response = await api.get(PREFIX, params={"version": "2147483647"})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "IELTS_CONFIG_VERSION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_versions(self, api):
        response = await api.get(f"{PREFIX}/versions")
        assert response.status_code == 200
        body = response.json()
        assert body["active_version"] == 1
        assert body["versions"][0]["name"] == "Initial"

    @pytest.mark.asyncio
    async def test_question_options(self, api):
        response = await api.get(f"{PREFIX}/question-options", params={"type": "yes_no"})
        assert response.status_code == 200
        assert [o["value"] for o in response.json()["options"]] == ["yes", "no", "not_given"]

    @pytest.mark.asyncio
    async def test_question_options_unknown_version(self, api):
        response = await api.get(f"{PREFIX}/question-options", params={"type": "yes_no", "version": "4"})
        assert response.status_code == 404
        assert response.json()["error"]["details"]["version"] == 4

    @pytest.mark.asyncio
    async def test_type_metadata(self, api):
        response = await api.get(f"{PREFIX}/type-metadata")
        assert response.status_code == 200
        assert response.json()["types"][1]["icon"] == "headphones"

    @pytest.mark.asyncio
    async def test_type_metadata_fallback_still_200(self, api):
        response = await api.get(f"{PREFIX}/type-metadata", params={"version": "99"})
        assert response.status_code == 200
        body = response.json()
        assert body["version"] == 99
        assert len(body["types"]) == 4


class TestHealth:
    @pytest.mark.asyncio
    async def test_healthy_when_seeded(self, api):
        response = await api.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["components"] == {"database": "ok", "ielts_config": "ready"}
        assert body["ielts_config"]["active_version"] == 1
