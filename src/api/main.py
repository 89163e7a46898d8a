"""
FastAPI application for the IELTS config service.

Provides REST API for:
- The versioned IELTS option catalog
- Boolean question option sets
- Type-card metadata for assignment type pickers
- Health and readiness of the catalog data
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from config import get_settings
from src.api.errors import IeltsApiError, ielts_api_error_handler
from src.api.routers import ielts_config_router
from src.catalog.catalog_service import CatalogService
from src.db.database import check_database_health, dispose_engine, init_db

settings = get_settings()

SERVICE_NAME = "ielts-config-service"
SERVICE_VERSION = "0.1.0"


async def _check_ielts_config_readiness() -> dict[str, Any]:
    """Readiness of the active catalog version (never raises)."""
    try:
        report = await CatalogService().readiness_report()
    except (SQLAlchemyError, OSError) as e:
        return {"ready": False, "reason": f"Readiness check failed: {e}", "active_version": None}
    report["checked_at"] = report["checked_at"].isoformat()
    return report


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    logger.info(f"Starting {SERVICE_NAME}...")
    await init_db()
    readiness = await _check_ielts_config_readiness()
    if not readiness["ready"]:
        logger.warning(f"IELTS config not ready: {readiness['reason']} (run `ielts-config seed`)")
    logger.info(f"Service started on {settings.api_host}:{settings.api_port}")

    yield

    # Shutdown
    logger.info(f"Shutting down {SERVICE_NAME}...")
    await dispose_engine()


app = FastAPI(
    title="IELTS Config Service",
    description="""
    Versioned configuration catalog for IELTS assignment authoring.

    ## Features

    - **Catalog**: assignment types, question types per skill, writing task types,
      speaking parts, completion formats and sample-timing options, per version
    - **Question options**: True/False/Not Given and Yes/No/Not Given answer sets
    - **Type metadata**: card title, icon and colour theme per skill, with a
      built-in fallback that is always served
    """,
    version=SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(IeltsApiError, ielts_api_error_handler)


# ========================================
# Health & Status Endpoints
# ========================================


@app.get("/", tags=["Health"])
def root() -> dict[str, str]:
    """Root endpoint returning service info."""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "ok",
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, Any]:
    """Health check with database connectivity and catalog readiness."""
    db_status, db_error = await check_database_health()
    readiness = await _check_ielts_config_readiness() if db_status == "ok" else {
        "ready": False,
        "reason": "Database unavailable",
        "active_version": None,
    }

    if db_status != "ok":
        overall_status = "unhealthy"
    elif not readiness["ready"]:
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    result = {
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {
            "database": db_status,
            "ielts_config": "ready" if readiness["ready"] else "not_ready",
        },
        "ielts_config": readiness,
    }

    if db_error:
        result["errors"] = {"database": db_error}

    return result


# ========================================
# Mount routers
# ========================================

app.include_router(ielts_config_router.router, prefix=settings.api_prefix, tags=["IELTS Config"])
