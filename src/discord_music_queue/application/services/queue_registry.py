"""Per-guild cache of queue handles sharing one store, player provider and bus."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...config.settings import QueueSettings
from ...domain.shared.messages import LogTemplates
from .queue_service import MusicQueue

if TYPE_CHECKING:
    from ...domain.music.repository import QueueStore
    from ...domain.shared.events import EventBus
    from ..interfaces.channel_directory import ChannelDirectory
    from ..interfaces.player import PlayerProvider

logger = logging.getLogger(__name__)


class QueueRegistry:
    """Hands out one :class:`MusicQueue` per guild.

    Handles are cheap; the state they front lives in the store, so dropping
    a handle never loses queue data.
    """

    def __init__(
        self,
        *,
        store: QueueStore,
        players: PlayerProvider,
        events: EventBus,
        channels: ChannelDirectory | None = None,
        settings: QueueSettings | None = None,
    ) -> None:
        self._store = store
        self._players = players
        self._events = events
        self._channels = channels
        self._settings = settings or QueueSettings()
        self._queues: dict[int, MusicQueue] = {}

    def get(self, guild_id: int) -> MusicQueue:
        queue = self._queues.get(guild_id)
        if queue is None:
            queue = MusicQueue(
                guild_id,
                store=self._store,
                players=self._players,
                events=self._events,
                channels=self._channels,
                settings=self._settings,
            )
            self._queues[guild_id] = queue
            logger.debug(LogTemplates.QUEUE_CREATED, guild_id)
        return queue

    def discard(self, guild_id: int) -> bool:
        removed = self._queues.pop(guild_id, None) is not None
        if removed:
            logger.debug(LogTemplates.QUEUE_DISCARDED, guild_id)
        return removed

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._queues

    def __len__(self) -> int:
        return len(self._queues)
