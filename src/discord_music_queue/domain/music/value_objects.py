"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum


def to_physical_index(logical: int) -> int:
    """Translate a caller-visible queue index into the stored list index.

    The pending list is written head-first, so the oldest entry sits at the
    tail: logical 0 is physical -1, logical 1 is physical -2 and logical -1
    (the newest entry) is physical 0.
    """
    return -logical - 1


@dataclass(frozen=True, slots=True)
class QueueKeys:
    """The key family that holds one guild's queue state."""

    current: str
    next: str
    position: str
    skips: str
    system_pause: str
    replay: str
    volume: str
    text: str

    @classmethod
    def for_guild(cls, prefix: str, guild_id: int) -> QueueKeys:
        base = f"{prefix}.{guild_id}"
        return cls(
            current=f"{base}.current",
            next=f"{base}.next",
            position=f"{base}.position",
            skips=f"{base}.skips",
            system_pause=f"{base}.systemPause",
            replay=f"{base}.replay",
            volume=f"{base}.volume",
            text=f"{base}.text",
        )

    def all(self) -> tuple[str, ...]:
        return tuple(getattr(self, f.name) for f in fields(self))


class TrackEndReason(Enum):
    """Why the playback engine stopped emitting audio for a song."""

    FINISHED = "finished"
    LOAD_FAILED = "load_failed"
    STOPPED = "stopped"
    REPLACED = "replaced"
    CLEANUP = "cleanup"

    @property
    def may_start_next(self) -> bool:
        """Whether the queue should advance on its own after this end."""
        return self in {TrackEndReason.FINISHED, TrackEndReason.LOAD_FAILED}


class QueueMutation(Enum):
    """Structural changes made to the pending list."""

    ADD = "add"
    REMOVE = "remove"
    MOVE = "move"
    SHUFFLE = "shuffle"
    CLEAR = "clear"


class PlaybackState(Enum):
    """Observable state of a guild's queue.

    - IDLE: nothing loaded and nothing pending
    - LOADED: a current song is staged but the engine is not playing it
    - PLAYING / PAUSED: the engine is playing or holding the current song
    """

    IDLE = "idle"
    LOADED = "loaded"
    PLAYING = "playing"
    PAUSED = "paused"
