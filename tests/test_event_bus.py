"""Tests for the EventBus and queue event models."""

import pydantic
import pytest
from conftest import GUILD_ID

from discord_music_queue.domain.music.events import QueueFinished, SongSeeked, VolumeChanged
from discord_music_queue.domain.shared.events import EventBus


@pytest.fixture
def bus():
    return EventBus()


class TestEventBus:
    @pytest.mark.asyncio
    async def test_dispatches_by_exact_type(self, bus):
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(QueueFinished, handler)

        await bus.publish(QueueFinished(guild_id=GUILD_ID))
        await bus.publish(SongSeeked(guild_id=GUILD_ID, position_ms=10))

        assert len(received) == 1
        assert isinstance(received[0], QueueFinished)

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_block_others(self, bus, caplog):
        received = []

        async def broken(event):
            raise RuntimeError("boom")

        async def healthy(event):
            received.append(event)

        bus.subscribe(QueueFinished, broken)
        bus.subscribe(QueueFinished, healthy)

        await bus.publish(QueueFinished(guild_id=GUILD_ID))

        assert len(received) == 1
        assert "Error in handler for QueueFinished" in caplog.text

    @pytest.mark.asyncio
    async def test_unsubscribe_and_clear(self, bus):
        async def handler(event):
            pass

        bus.subscribe(QueueFinished, handler)
        bus.subscribe(SongSeeked, handler)
        bus.unsubscribe(QueueFinished, handler)

        assert bus.handler_count(QueueFinished) == 0
        assert bus.handler_count(SongSeeked) == 1

        bus.clear()
        assert bus.handler_count(SongSeeked) == 0

    @pytest.mark.asyncio
    async def test_publish_without_handlers(self, bus):
        await bus.publish(QueueFinished(guild_id=GUILD_ID))


class TestQueueEvents:
    def test_queue_handle_not_serialized(self):
        event = QueueFinished(guild_id=GUILD_ID, queue=object())

        payload = event.model_dump()

        assert "queue" not in payload
        assert payload["event_type"] == "QueueFinished"
        assert payload["guild_id"] == GUILD_ID

    def test_events_are_frozen(self):
        event = VolumeChanged(guild_id=GUILD_ID, previous=100, volume=50)

        with pytest.raises(pydantic.ValidationError):
            event.volume = 10  # type: ignore[misc]

    def test_payload_validation(self):
        with pytest.raises(pydantic.ValidationError):
            VolumeChanged(guild_id=GUILD_ID, previous=100, volume=500)
