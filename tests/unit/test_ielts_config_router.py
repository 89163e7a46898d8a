"""
Unit tests for the IELTS config endpoints.

Services are replaced with in-memory fakes through FastAPI dependency
overrides; the application lifespan (database startup) is not run.
"""

import copy
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from src.api.main import app
from src.api.routers.ielts_config_router import (
    get_catalog_service,
    get_question_options_service,
    get_type_metadata_service,
)
from src.catalog.type_metadata_service import FALLBACK_TYPE_METADATA
from src.ielts.types import BooleanOptionType

PREFIX = "/api/v1/config/ielts"


class FakeCatalogService:
    def __init__(self, catalogs=None, active=None, versions=None):
        self.catalogs = catalogs or {}
        self.active = active
        self.versions = versions or []
        self.requested = []

    async def fetch_catalog(self, version):
        self.requested.append(version)
        return self.catalogs.get(version)

    async def get_config(self, version=None):
        if version is not None:
            return await self.fetch_catalog(version)
        return self.catalogs.get(self.active) if self.active else None

    async def list_versions(self):
        return {"versions": self.versions, "active_version": self.active}


class FakeQuestionOptionsService:
    def __init__(self, payloads=None):
        self.payloads = payloads or {}
        self.calls = []

    async def fetch_boolean_options(self, option_type, version=None):
        self.calls.append((option_type, version))
        return self.payloads.get(option_type)


class FakeTypeMetadataService:
    def __init__(self):
        self.calls = []

    async def resolve_type_metadata(self, version=None):
        self.calls.append(version)
        return {"version": version or 1, "types": copy.deepcopy(FALLBACK_TYPE_METADATA)}


def version_row(number, active):
    return {
        "version": number,
        "name": f"v{number}",
        "description": None,
        "is_active": active,
        "activated_at": None,
        "created_at": datetime(2025, 1, number, tzinfo=timezone.utc),
    }


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def catalog(sample_catalog_payload):
    v2 = copy.deepcopy(sample_catalog_payload)
    v2["version"] = 2
    fake = FakeCatalogService(
        catalogs={1: sample_catalog_payload, 2: v2},
        active=1,
        versions=[version_row(2, False), version_row(1, True)],
    )
    app.dependency_overrides[get_catalog_service] = lambda: fake
    return fake


@pytest.fixture
def options_service():
    fake = FakeQuestionOptionsService(
        {
            BooleanOptionType.TRUE_FALSE: {
                "type": "true_false",
                "version": 1,
                "options": [
                    {"value": "true", "label": "True", "score": 1, "enabled": True, "sort_order": 1},
                    {"value": "false", "label": "False", "score": 0, "enabled": True, "sort_order": 2},
                ],
            }
        }
    )
    app.dependency_overrides[get_question_options_service] = lambda: fake
    return fake


@pytest.fixture
def metadata_service():
    fake = FakeTypeMetadataService()
    app.dependency_overrides[get_type_metadata_service] = lambda: fake
    return fake


def error_code(response):
    return response.json()["error"]["code"]


class TestRoot:
    def test_service_info(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "ielts-config-service"


class TestGetConfig:
    """GET /config/ielts"""

    def test_active_version(self, client, catalog):
        response = client.get(PREFIX)
        assert response.status_code == 200
        body = response.json()
        assert body["version"] == 1
        assert body["question_types"]["reading"][0]["skill_type"] == "reading"

    def test_requested_version(self, client, catalog):
        response = client.get(PREFIX, params={"version": "2"})
        assert response.status_code == 200
        assert response.json()["version"] == 2

    def test_leading_digits_accepted(self, client, catalog):
        response = client.get(PREFIX, params={"version": "2abc"})
        assert response.status_code == 200
        assert catalog.requested == [2]

    def test_empty_version_means_active(self, client, catalog):
        response = client.get(f"{PREFIX}?version=")
        assert response.status_code == 200
        assert response.json()["version"] == 1

    @pytest.mark.parametrize(
        "version",
        ["0", "-1", "abc", "2147483648", "99999999999999999999", "9" * 5000],
        ids=["zero", "negative", "letters", "int32_overflow", "twenty_digits", "too_long_to_parse"],
    )
    def test_invalid_version(self, client, catalog, version):
        response = client.get(PREFIX, params={"version": version})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "IELTS_CONFIG_INVALID_VERSION"
        assert error["details"]["field"] == "version"
        assert error["details"]["received"] == version
        assert catalog.requested == []

    def test_largest_version_reaches_service(self, client, catalog):
        response = client.get(PREFIX, params={"version": "2147483647"})
        assert response.status_code == 404
        assert catalog.requested == [2147483647]

    def test_unknown_version(self, client, catalog):
        response = client.get(PREFIX, params={"version": "5"})
        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "IELTS_CONFIG_VERSION_NOT_FOUND"
        assert error["details"]["requestedVersion"] == 5

    def test_no_active_version(self, client):
        app.dependency_overrides[get_catalog_service] = lambda: FakeCatalogService()
        response = client.get(PREFIX)
        assert response.status_code == 404
        assert error_code(response) == "IELTS_CONFIG_NOT_FOUND"

    def test_malformed_catalog_data(self, client, catalog):
        catalog.catalogs[1]["question_types"]["reading"][0]["skill_type"] = "writing"

        response = client.get(PREFIX)

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "IELTS_CONFIG_INVALID_DATA"
        assert error["details"]["field"] == "question_types.reading.0.skill_type"


class TestGetVersions:
    """GET /config/ielts/versions"""

    def test_lists_versions(self, client, catalog):
        response = client.get(f"{PREFIX}/versions")
        assert response.status_code == 200
        body = response.json()
        assert [row["version"] for row in body["versions"]] == [2, 1]
        assert body["active_version"] == 1

    def test_no_active_version_reports_zero(self, client):
        fake = FakeCatalogService(versions=[version_row(1, False)])
        app.dependency_overrides[get_catalog_service] = lambda: fake
        response = client.get(f"{PREFIX}/versions")
        assert response.status_code == 200
        assert response.json()["active_version"] == 0

    def test_no_versions(self, client):
        app.dependency_overrides[get_catalog_service] = lambda: FakeCatalogService()
        response = client.get(f"{PREFIX}/versions")
        assert response.status_code == 404
        assert error_code(response) == "IELTS_CONFIG_NOT_FOUND"


class TestGetQuestionOptions:
    """GET /config/ielts/question-options"""

    def test_options_returned(self, client, options_service):
        response = client.get(f"{PREFIX}/question-options", params={"type": "true_false"})
        assert response.status_code == 200
        assert [o["value"] for o in response.json()["options"]] == ["true", "false"]
        assert options_service.calls == [(BooleanOptionType.TRUE_FALSE, None)]

    def test_version_passed_through(self, client, options_service):
        client.get(f"{PREFIX}/question-options", params={"type": "true_false", "version": "3"})
        assert options_service.calls == [(BooleanOptionType.TRUE_FALSE, 3)]

    @pytest.mark.parametrize(
        "query",
        ["", "?type=maybe", "?type=TRUE_FALSE", "?type=true_false&type=yes_no", "?type=yes_no&version=1&version=2"],
    )
    def test_invalid_query(self, client, options_service, query):
        response = client.get(f"{PREFIX}/question-options{query}")
        assert response.status_code == 400
        assert error_code(response) == "IELTS_QUESTION_OPTIONS_INVALID_QUERY"
        assert options_service.calls == []

    def test_invalid_version(self, client, options_service):
        response = client.get(f"{PREFIX}/question-options", params={"type": "yes_no", "version": "0"})
        assert response.status_code == 400
        assert error_code(response) == "IELTS_CONFIG_INVALID_VERSION"

    def test_not_found(self, client, options_service):
        response = client.get(f"{PREFIX}/question-options", params={"type": "yes_no"})
        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "IELTS_QUESTION_OPTIONS_NOT_FOUND"
        assert error["details"]["type"] == "yes_no"
        assert error["details"]["version"] == "active"


class TestGetTypeMetadata:
    """GET /config/ielts/type-metadata"""

    def test_cards_returned(self, client, metadata_service):
        response = client.get(f"{PREFIX}/type-metadata")
        assert response.status_code == 200
        body = response.json()
        assert [card["id"] for card in body["types"]] == ["reading", "listening", "writing", "speaking"]
        # The fallback reason never reaches the wire
        assert set(body) == {"version", "types"}

    def test_version_passed_through(self, client, metadata_service):
        response = client.get(f"{PREFIX}/type-metadata", params={"version": "3"})
        assert response.json()["version"] == 3
        assert metadata_service.calls == [3]

    def test_repeated_version(self, client, metadata_service):
        response = client.get(f"{PREFIX}/type-metadata?version=1&version=2")
        assert response.status_code == 400
        assert error_code(response) == "IELTS_TYPE_METADATA_INVALID_QUERY"

    def test_invalid_version(self, client, metadata_service):
        response = client.get(f"{PREFIX}/type-metadata", params={"version": "x"})
        assert response.status_code == 400
        assert error_code(response) == "IELTS_CONFIG_INVALID_VERSION"

    def test_oversized_version(self, client, metadata_service):
        response = client.get(f"{PREFIX}/type-metadata", params={"version": "99999999999999999999"})
        assert response.status_code == 400
        assert error_code(response) == "IELTS_CONFIG_INVALID_VERSION"
        assert metadata_service.calls == []
