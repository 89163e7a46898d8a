"""API routers for the IELTS config service."""

from src.api.routers import ielts_config_router

__all__ = [
    "ielts_config_router",
]
