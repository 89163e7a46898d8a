"""
Parse-or-default helpers used to repair persisted config data.

Every helper is total: it returns the coerced value or the supplied default
and never raises on unexpected input.
"""
from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_snake

from src.ielts.types import BOOLEAN_VALUE_ALIASES

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# Largest value a persisted integer field (Postgres INTEGER) can hold
INT32_MAX = 2**31 - 1


def as_mapping(value: Any) -> Mapping | None:
    """
    Interpret ``value`` as a record.

    Accepts mappings, pydantic models (dumped in the persisted layout) and JSON
    object strings. Anything else yields None.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if isinstance(value, Mapping):
        return value
    if isinstance(value, (str, bytes)):
        try:
            decoded = json.loads(value)
        except (ValueError, RecursionError):
            return None
        return decoded if isinstance(decoded, Mapping) else None
    return None


def as_list(value: Any) -> list | None:
    """Return ``value`` as a list when it is an array, otherwise None."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return None


def pick(record: Mapping | None, key: str) -> Any:
    """Read a camelCase field, accepting its snake_case spelling as well."""
    if not record:
        return None
    if key in record:
        return record[key]
    return record.get(to_snake(key))


def to_str(value: Any, default: str = "") -> str:
    """Strings pass through, integers are rendered, anything else is ``default``."""
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return str(value)
        except ValueError:
            # Exceeds the interpreter's int-to-str digit limit
            return default
    return default


def to_optional_str(value: Any, default: str | None = None) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return default


def to_non_empty_str(value: Any, default: str) -> str:
    text = to_str(value)
    return text if text.strip() else default


def to_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "false"):
            return lowered == "true"
    return default


def to_optional_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    return None


def _parse_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return None
        parsed = int(value)
    elif isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    return parsed if -INT32_MAX - 1 <= parsed <= INT32_MAX else None


def to_int(
    value: Any,
    default: int,
    *,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    """Parse an integer, falling back to ``default`` when unparseable or out of bounds."""
    parsed = _parse_int(value)
    if parsed is None:
        return default
    if minimum is not None and parsed < minimum:
        return default
    if maximum is not None and parsed > maximum:
        return default
    return parsed


def to_optional_int(value: Any, *, minimum: int | None = None) -> int | None:
    parsed = _parse_int(value)
    if parsed is None or (minimum is not None and parsed < minimum):
        return None
    return parsed


def parse_leading_int(value: str | None) -> int | None:
    """
    Parse the leading integer of a query value ("2abc" -> 2, "abc" -> None).

    Mirrors how browser clients historically sent version numbers.
    """
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        return None


def canonical_boolean_value(value: Any) -> str | None:
    """Canonicalize a boolean-question answer ("Not Given" -> "not_given")."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if not isinstance(value, str):
        return None
    key = " ".join(value.strip().lower().split())
    if not key:
        return None
    return BOOLEAN_VALUE_ALIASES.get(key, key.replace(" ", "_"))
