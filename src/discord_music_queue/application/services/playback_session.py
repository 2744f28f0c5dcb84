"""Binding between a guild's queue and its live player."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.music.events import SessionCreated, SessionDestroyed, SongEnded
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.shared.events import EventBus
    from ..interfaces.player import Player, PlayerProvider, TrackEnd
    from .queue_service import MusicQueue

logger = logging.getLogger(__name__)


class PlaybackSession:
    """Owns the lifecycle of one guild's player and its track-end continuation.

    The end notification carries the reason playback stopped. Ends caused by
    a caller (skip, stop, replacing the song) never advance the queue here;
    the caller has already done so, which prevents a double advance without
    any shared flag.

    An end is also dropped when its song is no longer the current one, which
    covers a natural end that was still being delivered when a skip landed.
    """

    def __init__(self, queue: MusicQueue, *, players: PlayerProvider, events: EventBus) -> None:
        self._queue = queue
        self._players = players
        self._events = events

    @property
    def guild_id(self) -> int:
        return self._queue.guild_id

    @property
    def player(self) -> Player | None:
        return self._players.get(self.guild_id)

    @property
    def active(self) -> bool:
        return self.player is not None

    async def create(self) -> Player:
        """Return the guild's player, creating and wiring it on first use."""
        player = self._players.get(self.guild_id)
        if player is not None:
            logger.debug(LogTemplates.SESSION_EXISTS, self.guild_id)
            return player

        player = self._players.create(self.guild_id)
        player.set_on_track_end_callback(self._on_track_end)
        logger.info(LogTemplates.SESSION_CREATED, self.guild_id)
        await self._events.publish(SessionCreated(guild_id=self.guild_id, queue=self._queue))
        return player

    async def destroy(self) -> bool:
        """Tear the player down. Returns False if there was nothing to destroy."""
        if self._players.get(self.guild_id) is None:
            logger.debug(LogTemplates.SESSION_ABSENT, self.guild_id)
            return False

        if not await self._players.destroy(self.guild_id):
            return False

        logger.info(LogTemplates.SESSION_DESTROYED, self.guild_id)
        await self._events.publish(SessionDestroyed(guild_id=self.guild_id, queue=self._queue))
        return True

    async def _on_track_end(self, end: TrackEnd) -> None:
        logger.debug(LogTemplates.TRACK_ENDED, self.guild_id, end.reason.value)
        await self._events.publish(
            SongEnded(guild_id=self.guild_id, queue=self._queue, song=end.song, reason=end.reason)
        )

        if not end.reason.may_start_next:
            logger.debug(LogTemplates.TRACK_END_IGNORED, self.guild_id, end.reason.value)
            return

        # A skip may have promoted the next song while this end was in flight.
        if await self._queue.get_current_track() != end.song:
            logger.debug(LogTemplates.TRACK_END_STALE, end.song.title, self.guild_id)
            return

        await self._queue.advance()
