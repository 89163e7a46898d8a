"""
IELTS configuration router.

Endpoints:
- GET /config/ielts                    catalog of the active or requested version
- GET /config/ielts/versions           all catalog versions
- GET /config/ielts/question-options   boolean option set (true_false | yes_no)
- GET /config/ielts/type-metadata      type-card metadata (always served)

Query validation happens here; services only ever see a positive version.
"""

from __future__ import annotations

from typing import TypeVar

from fastapi import APIRouter, Depends, Query, Request
from loguru import logger
from pydantic import BaseModel

from src.api.errors import IeltsApiError
from src.catalog.catalog_service import CatalogService
from src.catalog.question_options_service import QuestionOptionsService, parse_option_type
from src.catalog.schemas import (
    ConfigVersionsResponse,
    IeltsConfigResponse,
    QuestionOptionsResponse,
    TypeMetadataResponse,
)
from src.catalog.type_metadata_service import TypeMetadataService
from src.core.response_validator import ResponseValidationError, validate_response
from src.ielts.coercion import INT32_MAX, parse_leading_int

router = APIRouter()

ModelT = TypeVar("ModelT", bound=BaseModel)

VERSION_HINT = "Version must be a positive integer"


# ========================================
# Dependencies
# ========================================


def get_catalog_service() -> CatalogService:
    return CatalogService()


def get_question_options_service() -> QuestionOptionsService:
    return QuestionOptionsService()


def get_type_metadata_service() -> TypeMetadataService:
    return TypeMetadataService()


# ========================================
# Helpers
# ========================================


def parse_version_param(raw: str | None) -> int | None:
    """Parse an optional ``version`` query value (leading digits, 1..INT32_MAX)."""
    if raw is None:
        return None
    version = parse_leading_int(raw)
    if version is None or not 1 <= version <= INT32_MAX:
        raise IeltsApiError(
            400,
            "IELTS_CONFIG_INVALID_VERSION",
            "Invalid version parameter",
            {"field": "version", "received": raw, "hint": VERSION_HINT},
        )
    return version


def _single_query_values(request: Request, names: tuple[str, ...]) -> bool:
    return all(len(request.query_params.getlist(name)) <= 1 for name in names)


def _validated(payload: object, model: type[ModelT], message: str, hint: str) -> ModelT:
    try:
        return validate_response(payload, model)
    except ResponseValidationError as e:
        raise IeltsApiError(
            500,
            "IELTS_CONFIG_INVALID_DATA",
            message,
            {"field": e.path, "message": e.message, "hint": hint},
        ) from e


# ========================================
# Endpoints
# ========================================


@router.get("/config/ielts", response_model=IeltsConfigResponse)
async def get_ielts_config(
    version: str | None = Query(None, description="Catalog version (active version when omitted)"),
    catalog: CatalogService = Depends(get_catalog_service),
) -> IeltsConfigResponse:
    """Get the active IELTS configuration catalog, or a specific version."""
    # An empty value means "not provided" here
    requested = parse_version_param(version or None)

    if requested is not None:
        payload = await catalog.fetch_catalog(requested)
        if payload is None:
            raise IeltsApiError(
                404,
                "IELTS_CONFIG_VERSION_NOT_FOUND",
                f"IELTS configuration version {requested} not found",
                {
                    "requestedVersion": requested,
                    "hint": "Use GET /api/v1/config/ielts/versions to see available versions",
                },
            )
    else:
        payload = await catalog.get_config()
        if payload is None:
            raise IeltsApiError(
                404,
                "IELTS_CONFIG_NOT_FOUND",
                "No active IELTS configuration found",
                {"hint": "Contact support to initialize IELTS configuration"},
            )

    return _validated(
        payload,
        IeltsConfigResponse,
        "Invalid IELTS configuration data in database",
        "Database contains malformed configuration data. Contact support.",
    )


@router.get("/config/ielts/versions", response_model=ConfigVersionsResponse)
async def get_ielts_config_versions(
    catalog: CatalogService = Depends(get_catalog_service),
) -> ConfigVersionsResponse:
    """List every catalog version, newest first."""
    listing = await catalog.list_versions()
    if not listing["versions"]:
        raise IeltsApiError(
            404,
            "IELTS_CONFIG_NOT_FOUND",
            "No IELTS configuration versions found",
            {"hint": "Contact support to initialize IELTS configuration"},
        )

    return _validated(
        {"versions": listing["versions"], "active_version": listing["active_version"] or 0},
        ConfigVersionsResponse,
        "Invalid IELTS configuration version data",
        "Database contains malformed version data. Contact support.",
    )


@router.get("/config/ielts/question-options", response_model=QuestionOptionsResponse)
async def get_ielts_question_options(
    request: Request,
    type: str | None = Query(None, description="true_false | yes_no"),
    version: str | None = Query(None),
    options_service: QuestionOptionsService = Depends(get_question_options_service),
) -> QuestionOptionsResponse:
    """Enabled option values for boolean-style question types."""
    option_type = parse_option_type(type) if type is not None else None
    if option_type is None or option_type.value != type or not _single_query_values(request, ("type", "version")):
        raise IeltsApiError(
            400,
            "IELTS_QUESTION_OPTIONS_INVALID_QUERY",
            "Invalid query parameters",
            {"hint": "Use type=true_false|yes_no and optional positive integer version"},
        )
    requested = parse_version_param(version)

    payload = await options_service.fetch_boolean_options(option_type, requested)
    if payload is None:
        logger.warning(f"IELTS question options requested but not found (type={option_type.value}, version={requested})")
        raise IeltsApiError(
            404,
            "IELTS_QUESTION_OPTIONS_NOT_FOUND",
            "IELTS question options not found",
            {
                "type": option_type.value,
                "version": requested if requested is not None else "active",
                "hint": "Ensure IELTS question options exist for the requested config version",
            },
        )

    return _validated(
        payload,
        QuestionOptionsResponse,
        "Invalid IELTS question option data",
        "Database contains malformed question option data. Contact support.",
    )


@router.get("/config/ielts/type-metadata", response_model=TypeMetadataResponse)
async def get_ielts_type_metadata(
    request: Request,
    version: str | None = Query(None),
    metadata_service: TypeMetadataService = Depends(get_type_metadata_service),
) -> TypeMetadataResponse:
    """Type-card metadata; falls back to built-in cards instead of failing."""
    if not _single_query_values(request, ("version",)):
        raise IeltsApiError(
            400,
            "IELTS_TYPE_METADATA_INVALID_QUERY",
            "Invalid query parameters",
            {"hint": "Use optional positive integer version"},
        )
    requested = parse_version_param(version)

    payload = await metadata_service.resolve_type_metadata(requested)
    return _validated(
        payload,
        TypeMetadataResponse,
        "Invalid IELTS type metadata",
        "Type metadata rows are malformed. Contact support.",
    )
