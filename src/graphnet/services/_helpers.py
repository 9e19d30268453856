"""Shared service-layer helper functions."""

from __future__ import annotations

import time
from datetime import UTC, datetime


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (for audit logs and events)."""
    return datetime.now(UTC).isoformat()


def elapsed_ms(start: float) -> float:
    """Milliseconds since *start* (a ``time.time()`` value)."""
    return round((time.time() - start) * 1000, 3)
