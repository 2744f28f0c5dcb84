"""Redis implementation of the queue store."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from discord_music_queue.config.settings import RedisSettings
from discord_music_queue.domain.music.repository import QueueStore
from discord_music_queue.domain.shared.exceptions import StoreUnavailableError
from discord_music_queue.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

# Lua scripts run atomically on the server; each one replaces what would
# otherwise be a racy read-modify-write from the client.

RPOPSET_SCRIPT = """
local value = redis.call('RPOP', KEYS[1])
if value then
  redis.call('SET', KEYS[2], value)
else
  redis.call('DEL', KEYS[2])
end
return value
"""

LREMAT_SCRIPT = """
local len = redis.call('LLEN', KEYS[1])
local index = tonumber(ARGV[1])
if index < 0 then index = len + index end
if index < 0 or index >= len then return 0 end
redis.call('LSET', KEYS[1], index, ARGV[2])
redis.call('LREM', KEYS[1], 1, ARGV[2])
return 1
"""

# Rewrites the list in chunks to stay under Lua's unpack() limit.
_REWRITE_LIST = """
redis.call('DEL', KEYS[1])
for i = 1, #list, 1000 do
  redis.call('RPUSH', KEYS[1], unpack(list, i, math.min(i + 999, #list)))
end
"""

LMOVE_INDEX_SCRIPT = (
    """
local len = redis.call('LLEN', KEYS[1])
local from = tonumber(ARGV[1])
local to = tonumber(ARGV[2])
if from < 0 then from = len + from end
if to < 0 then to = len + to end
if from < 0 or from >= len or to < 0 or to >= len then return 0 end
if from == to then return 1 end
local list = redis.call('LRANGE', KEYS[1], 0, -1)
local value = table.remove(list, from + 1)
table.insert(list, to + 1, value)
"""
    + _REWRITE_LIST
    + """
return 1
"""
)

LSHUFFLE_SCRIPT = (
    """
local list = redis.call('LRANGE', KEYS[1], 0, -1)
if #list < 2 then return #list end
math.randomseed(tonumber(ARGV[1]))
for i = #list, 2, -1 do
  local j = math.random(i)
  list[i], list[j] = list[j], list[i]
end
"""
    + _REWRITE_LIST
    + """
return #list
"""
)

# Written over the doomed element before LREM; cannot collide with a JSON song.
_REMOVED_MARKER = "\x00__removed__\x00"


class RedisQueueStore(QueueStore):
    """Queue store backed by a ``redis.asyncio`` client.

    The client must be created with ``decode_responses=True``.
    """

    def __init__(self, redis: Redis) -> None:
        self._redis = redis
        self._rpopset = redis.register_script(RPOPSET_SCRIPT)
        self._lremat = redis.register_script(LREMAT_SCRIPT)
        self._lmove_index = redis.register_script(LMOVE_INDEX_SCRIPT)
        self._lshuffle = redis.register_script(LSHUFFLE_SCRIPT)

    @classmethod
    def from_settings(cls, settings: RedisSettings) -> RedisQueueStore:
        client = Redis.from_url(
            settings.url,
            decode_responses=True,
            socket_timeout=settings.socket_timeout_s,
            health_check_interval=settings.health_check_interval_s,
        )
        return cls(client)

    @property
    def client(self) -> Redis:
        return self._redis

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.error(LogTemplates.STORE_UNAVAILABLE, operation, e)
            raise StoreUnavailableError(operation) from e

    # === Scalars ===

    async def get(self, key: str) -> str | None:
        async with self._guard("get"):
            return await self._redis.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._guard("set"):
            await self._redis.set(key, value)

    async def getset(self, key: str, value: str) -> str | None:
        async with self._guard("getset"):
            return await self._redis.set(key, value, get=True)

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        async with self._guard("delete"):
            return await self._redis.delete(*keys)

    async def exists(self, *keys: str) -> int:
        if not keys:
            return 0
        async with self._guard("exists"):
            return await self._redis.exists(*keys)

    # === Lists ===

    async def lpush(self, key: str, *values: str) -> int:
        if not values:
            return await self.llen(key)
        async with self._guard("lpush"):
            return await self._redis.lpush(key, *values)

    async def rpush(self, key: str, *values: str) -> int:
        if not values:
            return await self.llen(key)
        async with self._guard("rpush"):
            return await self._redis.rpush(key, *values)

    async def rpopset(self, source: str, destination: str) -> str | None:
        async with self._guard("rpopset"):
            return await self._rpopset(keys=[source, destination])

    async def lindex(self, key: str, index: int) -> str | None:
        async with self._guard("lindex"):
            return await self._redis.lindex(key, index)

    async def lrem_at(self, key: str, index: int) -> bool:
        async with self._guard("lrem_at"):
            return bool(await self._lremat(keys=[key], args=[index, _REMOVED_MARKER]))

    async def lmove_index(self, key: str, from_index: int, to_index: int) -> bool:
        async with self._guard("lmove_index"):
            return bool(await self._lmove_index(keys=[key], args=[from_index, to_index]))

    async def lshuffle(self, key: str, seed: int) -> int:
        async with self._guard("lshuffle"):
            return int(await self._lshuffle(keys=[key], args=[seed]))

    async def lclear(self, key: str) -> int:
        async with self._guard("lclear"):
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.llen(key)
                pipe.delete(key)
                count, _ = await pipe.execute()
        return int(count)

    async def llen(self, key: str) -> int:
        async with self._guard("llen"):
            return await self._redis.llen(key)

    async def lrange(self, key: str, start: int, end: int) -> list[str]:
        async with self._guard("lrange"):
            return await self._redis.lrange(key, start, end)

    # === Expiry ===

    async def pexpire_many(self, keys: Sequence[str], ttl_ms: int) -> list[bool]:
        async with self._guard("pexpire_many"):
            async with self._redis.pipeline(transaction=False) as pipe:
                for key in keys:
                    pipe.pexpire(key, ttl_ms)
                results = await pipe.execute(raise_on_error=False)

        failures = [r for r in results if isinstance(r, Exception)]
        if failures:
            # TTL is advisory; the next mutation re-arms it.
            logger.warning(
                LogTemplates.STORE_REFRESH_PARTIAL, len(failures), len(keys), failures[0]
            )
        return [not isinstance(r, Exception) and bool(r) for r in results]

    # === Lifecycle ===

    async def ping(self) -> bool:
        async with self._guard("ping"):
            return bool(await self._redis.ping())

    async def close(self) -> None:
        await self._redis.aclose()
        logger.info(LogTemplates.STORE_CLOSED)
