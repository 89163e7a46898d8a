"""
Core Module - Cross-cutting helpers shared by the catalog and the API.

Components:
- response_validator: outbound payload validation (ResponseValidationError)
- log_dedup: once-per-process warning de-duplication (WarningDeduplicator)
"""

from src.core.log_dedup import WarningDeduplicator, get_warning_deduplicator
from src.core.response_validator import ResponseValidationError, validate_response

__all__ = [
    "ResponseValidationError",
    "WarningDeduplicator",
    "get_warning_deduplicator",
    "validate_response",
]
