"""Tests for QueueRegistry."""

import pytest
from conftest import GUILD_ID, OTHER_GUILD_ID

from discord_music_queue.application.services.queue_registry import QueueRegistry
from discord_music_queue.config.settings import QueueSettings


@pytest.fixture
def registry(store, players, event_bus, channels):
    return QueueRegistry(store=store, players=players, events=event_bus, channels=channels)


class TestQueueRegistry:
    def test_returns_same_handle(self, registry):
        assert registry.get(GUILD_ID) is registry.get(GUILD_ID)
        assert len(registry) == 1

    def test_separate_guilds(self, registry):
        first = registry.get(GUILD_ID)
        second = registry.get(OTHER_GUILD_ID)

        assert first is not second
        assert GUILD_ID in registry
        assert OTHER_GUILD_ID in registry

    def test_discard(self, registry):
        registry.get(GUILD_ID)

        assert registry.discard(GUILD_ID) is True
        assert registry.discard(GUILD_ID) is False
        assert GUILD_ID not in registry

    @pytest.mark.asyncio
    async def test_discarded_handle_state_survives(self, registry, store):
        await registry.get(GUILD_ID).add("encoded:x")
        registry.discard(GUILD_ID)

        assert await registry.get(GUILD_ID).count() == 1

    def test_applies_settings(self, store, players, event_bus):
        registry = QueueRegistry(
            store=store,
            players=players,
            events=event_bus,
            settings=QueueSettings(key_prefix="radio"),
        )

        assert registry.get(GUILD_ID).keys.current == f"radio.{GUILD_ID}.current"
