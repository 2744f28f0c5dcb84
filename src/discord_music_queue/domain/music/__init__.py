"""
Music Bounded Context

Songs, the persisted key layout, the store port and queue lifecycle events.
"""

from discord_music_queue.domain.music.codec import SongCodec
from discord_music_queue.domain.music.entities import (
    NowPlaying,
    Requester,
    Song,
    Track,
    VolumeChange,
)
from discord_music_queue.domain.music.repository import QueueStore
from discord_music_queue.domain.music.value_objects import (
    PlaybackState,
    QueueKeys,
    QueueMutation,
    TrackEndReason,
    to_physical_index,
)

__all__ = [
    # Entities
    "Track",
    "Requester",
    "Song",
    "NowPlaying",
    "VolumeChange",
    # Value Objects
    "QueueKeys",
    "QueueMutation",
    "PlaybackState",
    "TrackEndReason",
    "to_physical_index",
    # Codec
    "SongCodec",
    # Repository
    "QueueStore",
]
