"""
Warning de-duplication.

Some warnings describe a standing condition (e.g. "type metadata is served
from built-in defaults") and would otherwise be logged on every request.
A WarningDeduplicator remembers which (kind, reason) pairs were already
emitted so each one is logged once per process.
"""

import threading
from typing import Optional


class WarningDeduplicator:
    """Remembers emitted (kind, reason) pairs and counts repeats."""

    def __init__(self):
        self._counts: dict[tuple[str, str], int] = {}
        self._lock = threading.Lock()

    def record(self, kind: str, reason: str) -> tuple[bool, int]:
        """
        Register one occurrence of (kind, reason).

        Returns: (first_time, occurrence_count)
        """
        key = (kind, reason)
        with self._lock:
            count = self._counts.get(key, 0) + 1
            self._counts[key] = count
        return count == 1, count

    def count(self, kind: str, reason: str) -> int:
        with self._lock:
            return self._counts.get((kind, reason), 0)

    def reset(self) -> None:
        """Forget everything (tests)."""
        with self._lock:
            self._counts.clear()


# Singleton
_deduplicator: Optional[WarningDeduplicator] = None


def get_warning_deduplicator() -> WarningDeduplicator:
    """Get the process-wide deduplicator instance."""
    global _deduplicator
    if _deduplicator is None:
        _deduplicator = WarningDeduplicator()
    return _deduplicator
