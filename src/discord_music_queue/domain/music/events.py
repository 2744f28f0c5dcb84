"""Lifecycle events emitted by a guild's music queue.

Every event carries the guild id and, for in-process subscribers, the queue
handle that produced it (excluded from serialization).
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from discord_music_queue.domain.music.entities import Song
from discord_music_queue.domain.music.value_objects import QueueMutation, TrackEndReason
from discord_music_queue.domain.shared.events import DomainEvent
from discord_music_queue.domain.shared.types import (
    DiscordSnowflake,
    NonNegativeInt,
    PositionMs,
    VolumeInt,
)


class QueueEvent(DomainEvent):
    """Base class for all queue lifecycle events."""

    guild_id: DiscordSnowflake
    queue: Any = Field(default=None, exclude=True, repr=False)


class SongStarted(QueueEvent):
    event_type: Literal["SongStarted"] = "SongStarted"
    song: Song
    position_ms: PositionMs = 0


class SongReplayed(QueueEvent):
    event_type: Literal["SongReplayed"] = "SongReplayed"
    song: Song


class SongEnded(QueueEvent):
    event_type: Literal["SongEnded"] = "SongEnded"
    song: Song | None = None
    reason: TrackEndReason = TrackEndReason.FINISHED


class QueueFinished(QueueEvent):
    event_type: Literal["QueueFinished"] = "QueueFinished"


class PlaybackPaused(QueueEvent):
    event_type: Literal["PlaybackPaused"] = "PlaybackPaused"
    system: bool = False


class PlaybackResumed(QueueEvent):
    event_type: Literal["PlaybackResumed"] = "PlaybackResumed"


class VolumeChanged(QueueEvent):
    event_type: Literal["VolumeChanged"] = "VolumeChanged"
    previous: VolumeInt
    volume: VolumeInt


class ReplayModeChanged(QueueEvent):
    event_type: Literal["ReplayModeChanged"] = "ReplayModeChanged"
    enabled: bool


class SongSeeked(QueueEvent):
    event_type: Literal["SongSeeked"] = "SongSeeked"
    position_ms: PositionMs


class QueueMutated(QueueEvent):
    event_type: Literal["QueueMutated"] = "QueueMutated"
    action: QueueMutation
    count: NonNegativeInt = 0


class SessionCreated(QueueEvent):
    event_type: Literal["SessionCreated"] = "SessionCreated"


class SessionDestroyed(QueueEvent):
    event_type: Literal["SessionDestroyed"] = "SessionDestroyed"
