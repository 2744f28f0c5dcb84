"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (Redis and in-process queue stores)
- Discord (voice playback, channel lookups)
"""

from discord_music_queue.infrastructure.discord.channel_directory import DiscordChannelDirectory
from discord_music_queue.infrastructure.discord.player import DiscordPlayerManager
from discord_music_queue.infrastructure.persistence.redis_store import RedisQueueStore

__all__ = [
    "DiscordChannelDirectory",
    "DiscordPlayerManager",
    "RedisQueueStore",
]
