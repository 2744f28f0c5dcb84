"""Application services: the queue state machine and its player binding."""

from discord_music_queue.application.services.playback_session import PlaybackSession
from discord_music_queue.application.services.queue_registry import QueueRegistry
from discord_music_queue.application.services.queue_service import MusicQueue

__all__ = [
    "MusicQueue",
    "PlaybackSession",
    "QueueRegistry",
]
