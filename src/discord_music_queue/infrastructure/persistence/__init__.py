"""Queue store adapters."""

from discord_music_queue.infrastructure.persistence.memory_store import InMemoryQueueStore
from discord_music_queue.infrastructure.persistence.redis_store import RedisQueueStore

__all__ = [
    "InMemoryQueueStore",
    "RedisQueueStore",
]
