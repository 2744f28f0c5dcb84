"""Dependency Injection Container

Manages the dependency graph of the queue subsystem with lazy
initialization. Components are created on first access and cached for the
lifetime of the container; no module-level singletons are involved, so
tests and tools can build as many independent containers as they need.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import discord

    from ..application.interfaces.channel_directory import ChannelDirectory
    from ..application.interfaces.player import PlayerProvider
    from ..application.services.queue_registry import QueueRegistry
    from ..domain.music.repository import QueueStore
    from ..domain.shared.events import EventBus
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. The Discord
    client must be provided with :meth:`set_client` before the player
    provider or channel directory are used.
    """

    settings: Settings
    _client: discord.Client | None = None

    _store: QueueStore | None = None
    _event_bus: EventBus | None = None
    _player_provider: PlayerProvider | None = None
    _channel_directory: ChannelDirectory | None = None
    _queue_registry: QueueRegistry | None = None

    def set_client(self, client: discord.Client) -> None:
        """Set the Discord client instance."""
        self._client = client

    @property
    def client(self) -> discord.Client:
        """Get the Discord client instance."""
        if self._client is None:
            raise RuntimeError("Discord client not initialized. Call set_client() first.")
        return self._client

    # === Persistence ===

    @property
    def store(self) -> QueueStore:
        """Get the queue store."""
        if self._store is None:
            from ..infrastructure.persistence.redis_store import RedisQueueStore

            self._store = RedisQueueStore.from_settings(self.settings.redis)
            logger.info(LogTemplates.STORE_CONNECTED, self.settings.redis.url)
        return self._store

    # === Events ===

    @property
    def event_bus(self) -> EventBus:
        """Get the event bus shared by every queue."""
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    # === Discord Adapters ===

    @property
    def player_provider(self) -> PlayerProvider:
        """Get the per-guild player provider."""
        if self._player_provider is None:
            from ..infrastructure.discord.player import DiscordPlayerManager

            self._player_provider = DiscordPlayerManager(
                self.client,
                audio=self.settings.audio,
                discord_settings=self.settings.discord,
            )
        return self._player_provider

    @property
    def channel_directory(self) -> ChannelDirectory:
        """Get the channel directory."""
        if self._channel_directory is None:
            from ..infrastructure.discord.channel_directory import DiscordChannelDirectory

            self._channel_directory = DiscordChannelDirectory(self.client)
        return self._channel_directory

    # === Application Services ===

    @property
    def queue_registry(self) -> QueueRegistry:
        """Get the registry handing out one queue per guild."""
        if self._queue_registry is None:
            from ..application.services.queue_registry import QueueRegistry

            self._queue_registry = QueueRegistry(
                store=self.store,
                players=self.player_provider,
                events=self.event_bus,
                channels=self.channel_directory,
                settings=self.settings.queue,
            )
        return self._queue_registry

    # === Lifecycle ===

    async def close(self) -> None:
        """Release the store connection and drop cached components."""
        if self._event_bus is not None:
            self._event_bus.clear()

        if self._store is not None:
            await self._store.close()

        self._store = None
        self._event_bus = None
        self._player_provider = None
        self._channel_directory = None
        self._queue_registry = None


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
