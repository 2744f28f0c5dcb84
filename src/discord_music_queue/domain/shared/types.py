"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from discord_music_queue.domain.shared.types import DiscordSnowflake, NonEmptyStr

    class MyModel(BaseModel):
        guild_id: DiscordSnowflake
        name: NonEmptyStr
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import AfterValidator, Field

from .messages import ErrorMessages

# ── Numeric constraints ─────────────────────────────────────────────

DiscordSnowflake = Annotated[int, Field(gt=0, lt=2**64)]
"""Positive integer that fits a Discord snowflake (1 … 2^64-1)."""

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositionMs = Annotated[int, Field(ge=0)]
"""Playback offset into a track, in milliseconds."""

VolumeInt = Annotated[int, Field(ge=0, le=200)]
"""Playback volume as a percentage: 0 … 200 (100 is unity gain)."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

KeyPrefixStr = Annotated[str, Field(min_length=1, max_length=32, pattern=r"^[A-Za-z0-9_:-]+$")]
"""Namespace prefix for store keys."""


# ── Settings-specific constraints ──────────────────────────────────

RetentionSeconds = Annotated[int, Field(ge=60, le=30 * 86_400)]
"""Key family retention window: 1 minute … 30 days."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if v.tzinfo is None:
        raise ValueError(ErrorMessages.TIMEZONE_REQUIRED_UTC_DATETIME)
    return v.astimezone(UTC)


UtcDatetimeField = Annotated[datetime, AfterValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC after parsing."""


# ── Pydantic-compatible ID aliases ──────────────────────────────────

ChannelIdField = DiscordSnowflake
"""Channel ID used as a plain Pydantic field."""
