"""Tests for PlaybackSession lifecycle and track-end handling."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from conftest import GUILD_ID, make_song

from discord_music_queue.application.interfaces.player import TrackEnd
from discord_music_queue.domain.music.value_objects import TrackEndReason


def _names(events):
    return [type(e).__name__ for e in events]


class TestCreate:
    @pytest.mark.asyncio
    async def test_creates_and_wires_player(self, queue, players, recorded_events):
        player = await queue.session.create()

        assert players.get(GUILD_ID) is player
        assert queue.session.active is True
        player.set_on_track_end_callback.assert_called_once()
        assert _names(recorded_events) == ["SessionCreated"]

    @pytest.mark.asyncio
    async def test_second_create_returns_existing(self, queue, players, recorded_events):
        """Should be a no-op returning the same player."""
        first = await queue.session.create()
        second = await queue.session.create()

        assert first is second
        assert players.created == 1
        assert _names(recorded_events) == ["SessionCreated"]

    @pytest.mark.asyncio
    async def test_concurrent_creates_yield_one_player(self, queue, players):
        results = await asyncio.gather(*(queue.session.create() for _ in range(5)))

        assert players.created == 1
        assert all(player is results[0] for player in results)


class TestDestroy:
    @pytest.mark.asyncio
    async def test_destroy_twice(self, queue, players, recorded_events):
        """Should tear down once and treat the second call as a no-op."""
        player = await queue.session.create()
        recorded_events.clear()

        assert await queue.session.destroy() is True
        assert await queue.session.destroy() is False

        player.disconnect.assert_awaited_once()
        assert queue.session.active is False
        assert _names(recorded_events) == ["SessionDestroyed"]

    @pytest.mark.asyncio
    async def test_destroy_without_session(self, queue, recorded_events):
        assert await queue.session.destroy() is False
        assert recorded_events == []

    @pytest.mark.asyncio
    async def test_concurrent_destroys(self, queue, players, recorded_events):
        await queue.session.create()
        recorded_events.clear()

        results = await asyncio.gather(queue.session.destroy(), queue.session.destroy())

        assert sorted(results) == [False, True]
        assert _names(recorded_events) == ["SessionDestroyed"]

    @pytest.mark.asyncio
    async def test_provider_refusal(self, queue, players):
        await queue.session.create()
        players.destroy = AsyncMock(return_value=False)

        assert await queue.session.destroy() is False


class TestTrackEnd:
    """Tests for the continuation fired when a song stops."""

    @pytest.fixture
    def song(self):
        return make_song("a")

    async def _fire(self, queue, song, reason):
        callback = queue.player.set_on_track_end_callback.call_args.args[0]
        await callback(TrackEnd(guild_id=GUILD_ID, song=song, reason=reason))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reason", [TrackEndReason.FINISHED, TrackEndReason.LOAD_FAILED])
    async def test_advancing_reasons(self, queue, song, reason, recorded_events):
        await queue.session.create()
        await queue.add([song, make_song("b")])
        await queue.advance()
        recorded_events.clear()

        await self._fire(queue, song, reason)

        assert (await queue.get_current_track()).title == "B"
        names = _names(recorded_events)
        assert names[0] == "SongEnded"
        assert "SongStarted" in names
        assert recorded_events[0].reason is reason

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "reason", [TrackEndReason.STOPPED, TrackEndReason.REPLACED, TrackEndReason.CLEANUP]
    )
    async def test_caller_caused_ends_do_not_advance(self, queue, song, reason, recorded_events):
        await queue.session.create()
        await queue.add([song, make_song("b")])
        await queue.advance()
        recorded_events.clear()

        await self._fire(queue, song, reason)

        assert (await queue.get_current_track()).title == "A"
        assert _names(recorded_events) == ["SongEnded"]

    @pytest.mark.asyncio
    async def test_end_of_song_that_is_no_longer_current_is_dropped(
        self, queue, song, recorded_events
    ):
        await queue.session.create()
        await queue.add([song, make_song("b"), make_song("c")])
        await queue.advance()
        await queue.advance(skipped=True)
        recorded_events.clear()

        await self._fire(queue, song, TrackEndReason.LOAD_FAILED)

        assert (await queue.get_current_track()).title == "B"
        assert _names(recorded_events) == ["SongEnded"]

    @pytest.mark.asyncio
    async def test_replayed_song_finishing_restarts_it(self, queue, song, recorded_events):
        await queue.session.create()
        await queue.add([song, make_song("b")])
        await queue.advance()
        await queue.set_replay(True)
        recorded_events.clear()

        await self._fire(queue, song, TrackEndReason.FINISHED)

        assert (await queue.get_current_track()).title == "A"
        assert _names(recorded_events) == ["SongEnded", "SongReplayed"]

    @pytest.mark.asyncio
    async def test_last_song_finishing_emits_finished(self, queue, song, recorded_events):
        await queue.session.create()
        await queue.add(song)
        await queue.advance()
        recorded_events.clear()

        await self._fire(queue, song, TrackEndReason.FINISHED)

        assert _names(recorded_events) == ["SongEnded", "QueueFinished"]
        assert await queue.get_current_track() is None
