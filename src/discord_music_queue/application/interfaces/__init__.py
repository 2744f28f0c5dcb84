"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters.
"""

from discord_music_queue.application.interfaces.channel_directory import ChannelDirectory
from discord_music_queue.application.interfaces.player import (
    Player,
    PlayerProvider,
    TrackEnd,
    TrackEndCallback,
)

__all__ = [
    "ChannelDirectory",
    "Player",
    "PlayerProvider",
    "TrackEnd",
    "TrackEndCallback",
]
