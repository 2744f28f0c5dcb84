"""Core domain entities for the music bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from discord_music_queue.domain.shared.datetime_utils import utcnow
from discord_music_queue.domain.shared.exceptions import ValidationError
from discord_music_queue.domain.shared.messages import ErrorMessages
from discord_music_queue.domain.shared.types import (
    DiscordSnowflake,
    NonEmptyStr,
    NonNegativeInt,
    PositionMs,
    UtcDatetimeField,
)

if TYPE_CHECKING:
    import discord


class Track(BaseModel):
    """Immutable reference to something the playback engine can play."""

    model_config = ConfigDict(frozen=True)

    # Opaque to the queue: an encoded engine track, a stream URL or a file path.
    source: NonEmptyStr
    title: str | None = None
    author: str | None = None
    uri: str | None = None
    length_ms: NonNegativeInt | None = None
    is_stream: bool = False

    @property
    def display_title(self) -> str:
        return self.title or self.uri or self.source


class Requester(BaseModel):
    """Identity of the user who queued a song."""

    model_config = ConfigDict(frozen=True)

    id: DiscordSnowflake | None = None
    name: str | None = None
    avatar: str | None = None
    default_avatar_url: str | None = None

    @classmethod
    def from_member(
        cls, member: discord.Member | None, requester_id: int | None = None
    ) -> Requester:
        """Build a requester from a guild member, preferring an explicit id."""
        if member is None:
            return cls(id=requester_id)

        avatar = member.avatar.key if member.avatar is not None else None
        return cls(
            id=requester_id if requester_id is not None else member.id,
            name=member.display_name,
            avatar=avatar,
            default_avatar_url=member.default_avatar.url,
        )


class Song(BaseModel):
    """A track plus the metadata captured when it was queued.

    Songs are never mutated after creation; they are replaced wholesale when
    popped off the pending list or overwritten as the current song.
    """

    model_config = ConfigDict(frozen=True)

    track: Track
    added_at: UtcDatetimeField = Field(default_factory=utcnow)
    requester: Requester | None = None

    @classmethod
    def create(
        cls,
        track: Track | str,
        *,
        added_at: datetime | None = None,
        requester: Requester | None = None,
    ) -> Song:
        if isinstance(track, str):
            if not track.strip():
                raise ValidationError(ErrorMessages.EMPTY_TRACK_SOURCE, field="source")
            track = Track(source=track)
        return cls(track=track, added_at=added_at or utcnow(), requester=requester)

    @property
    def title(self) -> str:
        return self.track.display_title

    def was_requested_by(self, user_id: int) -> bool:
        return self.requester is not None and self.requester.id == user_id


@dataclass(frozen=True, slots=True)
class NowPlaying:
    song: Song
    position_ms: PositionMs = 0


@dataclass(frozen=True, slots=True)
class VolumeChange:
    """Result of a volume swap: the value replaced and the value now stored."""

    previous: int
    next: int

    @property
    def delta(self) -> int:
        return self.next - self.previous


Addable = Song | Track | str
"""Anything :meth:`MusicQueue.add` accepts as a queue entry."""


def snowflake_of(value: Any) -> int | None:
    """Return the id of a snowflake-like object, or the value itself if it is an int."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    return int(value.id)
