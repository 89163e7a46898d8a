"""
API error model.

Every non-2xx response of the config endpoints uses the body

    {"error": {"code": "...", "message": "...", "details": {...}}}
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


def error_body(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    return {"error": {"code": code, "message": message, "details": details or {}}}


class IeltsApiError(Exception):
    """Raised by routers to produce an error response with a stable code."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details or {}

    def to_body(self) -> dict[str, Any]:
        return error_body(self.code, self.message, self.details)


async def ielts_api_error_handler(request: Request, exc: IeltsApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())
