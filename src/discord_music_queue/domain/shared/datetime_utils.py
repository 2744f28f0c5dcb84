"""Date/time helpers.

Every timestamp the queue stores is a timezone-aware UTC ``datetime``.
"""

from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return a timezone-aware datetime in UTC."""
    return datetime.now(UTC)
