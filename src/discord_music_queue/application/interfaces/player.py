"""Port interfaces for the playback engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from discord_music_queue.domain.music.value_objects import TrackEndReason
from discord_music_queue.domain.shared.types import ChannelIdField, DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import Song


@dataclass(frozen=True, slots=True)
class TrackEnd:
    """Notification delivered when the engine stops playing a song."""

    guild_id: DiscordSnowflake
    song: Song | None
    reason: TrackEndReason = TrackEndReason.FINISHED


TrackEndCallback = Callable[[TrackEnd], Awaitable[None]]


class Player(ABC):
    """One guild's live connection to the playback engine."""

    guild_id: DiscordSnowflake

    @property
    @abstractmethod
    def playing(self) -> bool:
        ...

    @property
    @abstractmethod
    def paused(self) -> bool:
        ...

    @property
    @abstractmethod
    def channel_id(self) -> ChannelIdField | None:
        """The voice channel the player is connected to, or None."""
        ...

    @property
    @abstractmethod
    def position_ms(self) -> int:
        """Best-known playback offset of the current song."""
        ...

    @abstractmethod
    async def play(self, song: Song, *, position_ms: int = 0) -> None:
        """Start *song* at *position_ms*, replacing whatever is playing.

        A song that fails to load is reported through the track-end callback
        after this call has returned, never while it is still running.
        """
        ...

    @abstractmethod
    async def pause(self, state: bool = True) -> None:
        ...

    @abstractmethod
    async def set_volume(self, volume: int) -> None:
        ...

    @abstractmethod
    async def seek(self, position_ms: int) -> None:
        ...

    @abstractmethod
    async def stop(self) -> None:
        ...

    @abstractmethod
    async def connect(self, channel_id: ChannelIdField, *, self_deaf: bool = True) -> None:
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        ...

    @abstractmethod
    def set_on_track_end_callback(self, callback: TrackEndCallback) -> None:
        """Set the coroutine invoked once per song that stops playing."""
        ...


class PlayerProvider(ABC):
    """Registry of live players, one per guild."""

    @abstractmethod
    def get(self, guild_id: DiscordSnowflake) -> Player | None:
        ...

    @abstractmethod
    def create(self, guild_id: DiscordSnowflake) -> Player:
        """Create and register a player.

        Synchronous so that check-then-create cannot interleave with another
        coroutine on the same event loop.
        """
        ...

    @abstractmethod
    async def destroy(self, guild_id: DiscordSnowflake) -> bool:
        """Unregister and tear down a player.

        Implementations must unregister before their first await, so that a
        concurrent caller observes the player as already gone.

        Returns:
            True if a player existed.
        """
        ...
