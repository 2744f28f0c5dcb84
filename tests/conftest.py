from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from discord_music_queue.application.interfaces.player import Player, PlayerProvider
from discord_music_queue.domain.music.entities import Requester, Song, Track
from discord_music_queue.domain.shared.events import EventBus
from discord_music_queue.infrastructure.persistence.memory_store import InMemoryQueueStore

GUILD_ID = 987654321
OTHER_GUILD_ID = 123456789
ADDED_AT = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


# ============================================================================
# Playback Engine Fakes
# ============================================================================


def make_player(guild_id: int = GUILD_ID) -> MagicMock:
    """Create a Player double whose async commands are AsyncMocks."""
    player = MagicMock(spec=Player)
    player.guild_id = guild_id
    player.playing = False
    player.paused = False
    player.channel_id = None
    player.position_ms = 0
    for name in ("play", "pause", "set_volume", "seek", "stop", "connect", "disconnect"):
        setattr(player, name, AsyncMock())
    return player


class FakePlayerProvider(PlayerProvider):
    """Dictionary-backed provider handing out Player doubles."""

    def __init__(self) -> None:
        self.players: dict[int, MagicMock] = {}
        self.created = 0

    def get(self, guild_id):
        return self.players.get(guild_id)

    def create(self, guild_id):
        player = self.players.get(guild_id)
        if player is None:
            player = make_player(guild_id)
            self.players[guild_id] = player
            self.created += 1
        return player

    async def destroy(self, guild_id):
        player = self.players.pop(guild_id, None)
        if player is None:
            return False
        await player.disconnect()
        return True


# ============================================================================
# Store / Bus Fixtures
# ============================================================================


class ManualClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def store(clock):
    """In-process queue store driven by a manual clock."""
    return InMemoryQueueStore(clock=clock)


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def recorded_events(event_bus):
    """Subscribe a recorder to every queue event type and return the list it fills."""
    from discord_music_queue.domain.music import events as queue_events

    received = []

    async def record(event):
        received.append(event)

    for name in dir(queue_events):
        obj = getattr(queue_events, name)
        if (
            isinstance(obj, type)
            and issubclass(obj, queue_events.QueueEvent)
            and obj is not queue_events.QueueEvent
        ):
            event_bus.subscribe(obj, record)
    return received


@pytest.fixture
def players():
    return FakePlayerProvider()


@pytest.fixture
def channels():
    """Channel directory double; lookups succeed unless overridden."""
    directory = MagicMock()
    directory.get_text_channel.return_value = MagicMock(name="text_channel")
    directory.get_voice_channel.return_value = MagicMock(name="voice_channel")
    return directory


@pytest.fixture
def queue(store, players, event_bus, channels):
    """Queue for GUILD_ID wired to in-process collaborators."""
    from discord_music_queue.application.services.queue_service import MusicQueue

    return MusicQueue(GUILD_ID, store=store, players=players, events=event_bus, channels=channels)


@pytest.fixture
def player(queue, players):
    """Create the guild's player up front and return it."""
    return players.create(queue.guild_id)


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


def make_song(name: str, **kwargs) -> Song:
    track = Track(source=f"encoded:{name}", title=name.title(), uri=f"https://example.com/{name}")
    return Song(track=track, added_at=kwargs.pop("added_at", ADDED_AT), **kwargs)


@pytest.fixture
def sample_song():
    return make_song(
        "alpha",
        requester=Requester(id=111, name="TestUser", avatar="abc123"),
    )


def titles(songs) -> list[str]:
    return [song.title for song in songs]
