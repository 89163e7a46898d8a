"""
Response Validator - Fail loudly if an outbound payload has the wrong shape.

Philosophy:
- Every catalog payload is checked immediately before it leaves the service
- A failure means the stored catalog is corrupted, never a client mistake
- No silent repair here; repairing input configs is the normalizer's job
"""

from typing import Any, Optional, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class ResponseValidationError(Exception):
    """Raised when an outbound payload does not match its response model."""

    def __init__(self, model_name: str, path: str, message: str, error_count: int = 1):
        self.model_name = model_name
        self.path = path
        self.message = message
        self.error_count = error_count
        super().__init__(f"{model_name} invalid at '{path}': {message}")

    def to_details(self) -> dict[str, Any]:
        return {"path": self.path, "message": self.message}


def _first_error(exc: ValidationError) -> tuple[str, str]:
    errors = exc.errors()
    if not errors:
        return "", str(exc)
    first = errors[0]
    path = ".".join(str(part) for part in first.get("loc", ()))
    return path, first.get("msg", "invalid value")


def validate_response(payload: Any, model: type[ModelT], *, context: Optional[str] = None) -> ModelT:
    """
    Validate ``payload`` against ``model``.

    Args:
        payload: Mapping (or model instance) about to be returned.
        model: Response model describing the exact outbound shape.
        context: Optional label for the log line (e.g. the endpoint).

    Returns: the validated model instance

    Raises:
        ResponseValidationError: carrying the first failing field path.
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        path, message = _first_error(e)
        logger.error(
            f"RESPONSE INVALID: {model.__name__} at '{path}': {message}"
            + (f" ({context})" if context else "")
        )
        raise ResponseValidationError(model.__name__, path, message, e.error_count()) from e
