"""Queue Application Service - the per-guild queue state machine.

All authoritative state lives in the injected :class:`QueueStore` under the
guild's key family, so any worker holding a ``MusicQueue`` for the same guild
observes and mutates the same queue.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ...config.settings import QueueSettings
from ...domain.music.codec import SongCodec
from ...domain.music.entities import (
    Addable,
    NowPlaying,
    Requester,
    Song,
    Track,
    VolumeChange,
    snowflake_of,
)
from ...domain.music.events import (
    PlaybackPaused,
    PlaybackResumed,
    QueueFinished,
    QueueMutated,
    ReplayModeChanged,
    SongReplayed,
    SongSeeked,
    SongStarted,
    VolumeChanged,
)
from ...domain.music.value_objects import (
    PlaybackState,
    QueueKeys,
    QueueMutation,
    to_physical_index,
)
from ...domain.shared.datetime_utils import utcnow
from ...domain.shared.exceptions import InvalidOperationError, ValidationError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake
from .playback_session import PlaybackSession

if TYPE_CHECKING:
    import discord

    from ...domain.music.repository import QueueStore
    from ...domain.shared.events import EventBus
    from ..interfaces.channel_directory import ChannelDirectory
    from ..interfaces.player import Player, PlayerProvider

logger = logging.getLogger(__name__)

_TRUE = "1"
_FALSE = "0"
MIN_VOLUME = 0
MAX_VOLUME = 200


class MusicQueue:
    """Store-backed queue for a single guild."""

    def __init__(
        self,
        guild_id: DiscordSnowflake,
        *,
        store: QueueStore,
        players: PlayerProvider,
        events: EventBus,
        channels: ChannelDirectory | None = None,
        settings: QueueSettings | None = None,
    ) -> None:
        self.guild_id = guild_id
        self._store = store
        self._players = players
        self._events = events
        self._channels = channels
        self._settings = settings or QueueSettings()
        self.keys = QueueKeys.for_guild(self._settings.key_prefix, guild_id)
        self.session = PlaybackSession(self, players=players, events=events)

    def __repr__(self) -> str:
        return f"<MusicQueue guild_id={self.guild_id}>"

    # === Player access ===

    @property
    def player(self) -> Player | None:
        return self._players.get(self.guild_id)

    @property
    def playing(self) -> bool:
        player = self.player
        return player is not None and player.playing

    @property
    def paused(self) -> bool:
        player = self.player
        return player is not None and player.paused

    @property
    def voice_channel_id(self) -> int | None:
        player = self.player
        return player.channel_id if player is not None else None

    def get_voice_channel(self) -> Any | None:
        channel_id = self.voice_channel_id
        if channel_id is None or self._channels is None:
            return None
        return self._channels.get_voice_channel(self.guild_id, channel_id)

    async def state(self) -> PlaybackState:
        if not await self._store.exists(self.keys.current):
            return PlaybackState.IDLE
        if self.paused:
            return PlaybackState.PAUSED
        if self.playing:
            return PlaybackState.PLAYING
        return PlaybackState.LOADED

    # === Playback transitions ===

    async def start(self, replaying: bool = False) -> bool:
        """Play the current song, or advance to the next one if none is loaded.

        This is the only method that asks the engine to play something.
        """
        np = await self.now_playing()
        if np is None:
            return await self.advance()

        player = self.player
        if player is None:
            logger.warning(LogTemplates.PLAYBACK_NO_PLAYER, self.guild_id, "start")
            return False

        await player.play(np.song, position_ms=np.position_ms)
        logger.info(
            LogTemplates.PLAYBACK_STARTED, np.song.title, self.guild_id, np.position_ms, replaying
        )

        if replaying:
            await self._events.publish(
                SongReplayed(guild_id=self.guild_id, queue=self, song=np.song)
            )
        else:
            await self._events.publish(
                SongStarted(
                    guild_id=self.guild_id,
                    queue=self,
                    song=np.song,
                    position_ms=np.position_ms,
                )
            )
        return True

    async def advance(self, *, skipped: bool = False) -> bool:
        """Move to the next song.

        Called with ``skipped=True`` by a caller-initiated skip and with the
        default by the session binding when a song ends naturally.

        Returns:
            True if something started playing.
        """
        logger.debug(LogTemplates.QUEUE_ADVANCING, self.guild_id, skipped)
        await self._store.delete(self.keys.position)

        replaying = await self.get_replay()
        if replaying and not skipped:
            logger.debug(LogTemplates.QUEUE_REPLAYING, self.guild_id)
            return await self.start(replaying=True)

        if replaying:
            await self.set_replay(False)
            logger.debug(LogTemplates.QUEUE_REPLAY_BROKEN, self.guild_id)

        # Pop and promote in one store call so a racing advance cannot lose a song.
        entry = await self._store.rpopset(self.keys.next, self.keys.current)
        await self.refresh()

        if entry:
            return await self.start(replaying=False)

        logger.info(LogTemplates.QUEUE_FINISHED, self.guild_id)
        await self._events.publish(QueueFinished(guild_id=self.guild_id, queue=self))
        return False

    async def skip(self) -> bool:
        """Stop the current song and advance past it, breaking replay mode."""
        player = self.player
        if player is not None:
            # The engine reports this end as STOPPED, which never advances on its own.
            await player.stop()
        return await self.advance(skipped=True)

    async def stop(self) -> None:
        player = self.player
        if player is None:
            return
        await player.stop()
        logger.info(LogTemplates.PLAYBACK_STOPPED, self.guild_id)

    async def can_start(self) -> bool:
        """Whether there is a current or pending song that could be played."""
        return await self._store.exists(self.keys.current, self.keys.next) > 0

    async def pause(self, *, system: bool = False) -> None:
        player = self.player
        if player is not None:
            await player.pause(True)
        await self.set_system_paused(system)
        logger.debug(LogTemplates.PLAYBACK_PAUSED, self.guild_id, system)
        await self._events.publish(
            PlaybackPaused(guild_id=self.guild_id, queue=self, system=system)
        )

    async def resume(self) -> None:
        player = self.player
        if player is not None:
            await player.pause(False)
        await self.set_system_paused(False)
        logger.debug(LogTemplates.PLAYBACK_RESUMED, self.guild_id)
        await self._events.publish(PlaybackResumed(guild_id=self.guild_id, queue=self))

    async def seek(self, position_ms: int) -> None:
        if position_ms < 0:
            raise ValidationError(ErrorMessages.INVALID_POSITION, field="position_ms")
        player = self.player
        if player is not None:
            await player.seek(position_ms)
        logger.debug(LogTemplates.PLAYBACK_SEEKED, position_ms, self.guild_id)
        await self._events.publish(
            SongSeeked(guild_id=self.guild_id, queue=self, position_ms=position_ms)
        )

    async def record_position(self, position_ms: int) -> None:
        """Persist the engine's reported playback offset for the current song."""
        if position_ms < 0:
            raise ValidationError(ErrorMessages.INVALID_POSITION, field="position_ms")
        await self._store.set(self.keys.position, str(position_ms))
        await self.refresh()

    # === Flags ===

    async def get_system_paused(self) -> bool:
        return await self._store.get(self.keys.system_pause) == _TRUE

    async def set_system_paused(self, value: bool) -> bool:
        await self._store.set(self.keys.system_pause, _TRUE if value else _FALSE)
        await self.refresh()
        return value

    async def get_replay(self) -> bool:
        """Whether the current song repeats instead of advancing when it ends."""
        return await self._store.get(self.keys.replay) == _TRUE

    async def set_replay(self, value: bool) -> bool:
        if value and not await self._store.exists(self.keys.current):
            raise InvalidOperationError(
                operation="enable replay",
                current_state=PlaybackState.IDLE.value,
                message=ErrorMessages.REPLAY_WITHOUT_CURRENT,
            )

        await self._store.set(self.keys.replay, _TRUE if value else _FALSE)
        await self.refresh()
        await self._events.publish(
            ReplayModeChanged(guild_id=self.guild_id, queue=self, enabled=value)
        )
        return value

    async def get_volume(self) -> int:
        raw = await self._store.get(self.keys.volume)
        return int(raw) if raw else self._settings.default_volume

    async def set_volume(self, value: int) -> VolumeChange:
        """Apply *value* to the player and return the volume it replaced."""
        if not MIN_VOLUME <= value <= MAX_VOLUME:
            raise ValidationError(
                ErrorMessages.INVALID_VOLUME.format(minimum=MIN_VOLUME, maximum=MAX_VOLUME),
                field="volume",
            )

        player = self.player
        if player is not None:
            await player.set_volume(value)
        previous_raw = await self._store.getset(self.keys.volume, str(value))
        await self.refresh()

        previous = int(previous_raw) if previous_raw else self._settings.default_volume
        logger.debug(LogTemplates.VOLUME_CHANGED, previous, value, self.guild_id)
        await self._events.publish(
            VolumeChanged(guild_id=self.guild_id, queue=self, previous=previous, volume=value)
        )
        return VolumeChange(previous=previous, next=value)

    # === Channel bindings ===

    async def connect(self, channel_id: int, *, self_deaf: bool = True) -> None:
        player = self.player or await self.session.create()
        await player.connect(channel_id, self_deaf=self_deaf)

    async def leave(self) -> None:
        player = self.player
        if player is not None:
            await player.disconnect()
        await self.unbind_text_channel()

    async def get_text_channel_id(self) -> int | None:
        raw = await self._store.get(self.keys.text)
        return int(raw) if raw else None

    async def bind_text_channel(self, channel_id: int) -> int:
        await self._store.set(self.keys.text, str(channel_id))
        await self.refresh()
        logger.debug(LogTemplates.TEXT_CHANNEL_BOUND, channel_id, self.guild_id)
        return channel_id

    async def unbind_text_channel(self) -> None:
        await self._store.delete(self.keys.text)
        logger.debug(LogTemplates.TEXT_CHANNEL_UNBOUND, self.guild_id)

    async def get_text_channel(self) -> Any | None:
        """Resolve the bound text channel, dropping the binding if it has gone away."""
        channel_id = await self.get_text_channel_id()
        if channel_id is None or self._channels is None:
            return None

        channel = self._channels.get_text_channel(self.guild_id, channel_id)
        if channel is None:
            logger.info(LogTemplates.TEXT_CHANNEL_STALE, channel_id, self.guild_id)
            await self.unbind_text_channel()
        return channel

    # === Pending list ===

    async def add(
        self,
        songs: Addable | Iterable[Addable],
        *,
        requester: int | Any | None = None,
        user_info: discord.Member | None = None,
        added_at: datetime | None = None,
        play_next: bool = False,
    ) -> int:
        """Queue one song or a batch of songs.

        Args:
            songs: A song, track, source string, or an iterable of them.
            requester: The requesting user, as an id or any object with ``id``.
            user_info: Guild member used to fill in the requester's display data.
            added_at: Enqueue timestamp; defaults to now.
            play_next: Put the batch ahead of everything already pending.

        Returns:
            Number of songs queued.
        """
        items = list(songs) if _is_batch(songs) else [songs]
        if not items:
            logger.debug(LogTemplates.QUEUE_ADD_EMPTY, self.guild_id)
            return 0

        identity = None
        requester_id = snowflake_of(requester)
        if requester_id is not None or user_info is not None:
            identity = Requester.from_member(user_info, requester_id)

        added = added_at or utcnow()
        encoded = [
            SongCodec.encode(_to_song(item, added_at=added, requester=identity))
            for item in items
        ]

        if play_next:
            await self._store.rpush(self.keys.next, *reversed(encoded))
        else:
            await self._store.lpush(self.keys.next, *encoded)
        await self.refresh()

        logger.info(LogTemplates.QUEUE_ADDED, len(encoded), self.guild_id)
        await self._emit_mutation(QueueMutation.ADD, len(encoded))
        return len(encoded)

    async def get_current_track(self) -> Song | None:
        return SongCodec.decode_optional(await self._store.get(self.keys.current))

    async def now_playing(self) -> NowPlaying | None:
        song = await self.get_current_track()
        if song is None:
            return None
        position = await self._store.get(self.keys.position)
        return NowPlaying(song=song, position_ms=int(position) if position else 0)

    async def get_at(self, index: int) -> Song | None:
        return SongCodec.decode_optional(
            await self._store.lindex(self.keys.next, to_physical_index(index))
        )

    async def remove_at(self, index: int) -> bool:
        removed = await self._store.lrem_at(self.keys.next, to_physical_index(index))
        await self.refresh()
        await self._emit_mutation(QueueMutation.REMOVE, 1 if removed else 0)
        return removed

    async def move_tracks(self, from_index: int, to_index: int) -> bool:
        moved = await self._store.lmove_index(
            self.keys.next, to_physical_index(from_index), to_physical_index(to_index)
        )
        await self.refresh()
        await self._emit_mutation(QueueMutation.MOVE, 1 if moved else 0)
        return moved

    async def shuffle_tracks(self) -> int:
        seed = time.time_ns() // 1_000_000 % 2**31
        count = await self._store.lshuffle(self.keys.next, seed)
        await self.refresh()
        await self._emit_mutation(QueueMutation.SHUFFLE, count)
        return count

    async def clear_tracks(self) -> int:
        count = await self._store.lclear(self.keys.next)
        await self.refresh()
        await self._emit_mutation(QueueMutation.CLEAR, count)
        return count

    async def count(self) -> int:
        return await self._store.llen(self.keys.next)

    async def tracks(self, start: int = 0, end: int | float | None = -1) -> list[Song]:
        """Return pending songs from logical *start* to *end* inclusive, next first.

        ``-1``, ``None`` and ``math.inf`` all mean "to the end of the list".
        """
        if end is None or end == math.inf:
            end = -1
        physical_start = to_physical_index(int(end))
        physical_end = to_physical_index(start)

        entries = await self._store.lrange(self.keys.next, physical_start, physical_end)
        return [SongCodec.decode(entry) for entry in reversed(entries)]

    # === Key family ===

    async def refresh(self) -> None:
        """Re-arm the retention window on every key of the family."""
        await self._store.pexpire_many(self.keys.all(), self._settings.retention_ms)

    async def clear(self) -> int:
        """Delete the whole key family."""
        removed = await self._store.delete(*self.keys.all())
        logger.info(LogTemplates.QUEUE_CLEARED, removed, self.guild_id)
        return removed

    async def _emit_mutation(self, action: QueueMutation, count: int) -> None:
        await self._events.publish(
            QueueMutated(guild_id=self.guild_id, queue=self, action=action, count=count)
        )


def _is_batch(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, str | Song | Track)


def _to_song(item: Addable, *, added_at: datetime, requester: Requester | None) -> Song:
    if isinstance(item, Song):
        return item
    if isinstance(item, Track | str):
        return Song.create(item, added_at=added_at, requester=requester)
    raise ValidationError(
        ErrorMessages.UNSUPPORTED_ADDABLE.format(type_name=type(item).__name__), field="songs"
    )
