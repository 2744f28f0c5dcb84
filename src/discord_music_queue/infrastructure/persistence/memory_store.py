"""In-process implementation of the queue store.

Useful for single-worker deployments and tests. State does not survive a
restart and is not shared between processes.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable, Sequence

from discord_music_queue.domain.music.repository import QueueStore


class InMemoryQueueStore(QueueStore):
    """Dictionary-backed store with the same semantics as :class:`RedisQueueStore`.

    Each method completes without awaiting, so every operation is atomic with
    respect to other coroutines on the same event loop. Expired keys are
    purged lazily when touched.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._scalars: dict[str, str] = {}
        self._lists: dict[str, list[str]] = {}
        self._expires_at: dict[str, float] = {}

    # === Internals ===

    def _purge(self, key: str) -> None:
        deadline = self._expires_at.get(key)
        if deadline is not None and deadline <= self._clock():
            self._drop(key)

    def _drop(self, key: str) -> bool:
        self._expires_at.pop(key, None)
        existed = self._scalars.pop(key, None) is not None
        return self._lists.pop(key, None) is not None or existed

    def _has(self, key: str) -> bool:
        self._purge(key)
        return key in self._scalars or key in self._lists

    def _list(self, key: str) -> list[str]:
        self._purge(key)
        return self._lists.get(key, [])

    def _store_list(self, key: str, values: list[str]) -> None:
        if values:
            self._lists[key] = values
        else:
            self._drop(key)

    def _set_scalar(self, key: str, value: str) -> None:
        self._lists.pop(key, None)
        self._expires_at.pop(key, None)
        self._scalars[key] = value

    @staticmethod
    def _normalize(index: int, length: int) -> int | None:
        if index < 0:
            index += length
        return index if 0 <= index < length else None

    def ttl_ms(self, key: str) -> int | None:
        """Remaining lifetime of *key* in milliseconds, or None if it never expires."""
        if not self._has(key):
            return None
        deadline = self._expires_at.get(key)
        if deadline is None:
            return None
        return max(0, int((deadline - self._clock()) * 1000))

    # === Scalars ===

    async def get(self, key: str) -> str | None:
        self._purge(key)
        return self._scalars.get(key)

    async def set(self, key: str, value: str) -> None:
        self._set_scalar(key, value)

    async def getset(self, key: str, value: str) -> str | None:
        self._purge(key)
        previous = self._scalars.get(key)
        self._set_scalar(key, value)
        return previous

    async def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self._has(key) and self._drop(key))

    async def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if self._has(key))

    # === Lists ===

    async def lpush(self, key: str, *values: str) -> int:
        items = self._list(key)
        items = list(reversed(values)) + items
        self._store_list(key, items)
        return len(items)

    async def rpush(self, key: str, *values: str) -> int:
        items = self._list(key) + list(values)
        self._store_list(key, items)
        return len(items)

    async def rpopset(self, source: str, destination: str) -> str | None:
        items = self._list(source)
        if not items:
            self._drop(destination)
            return None
        value = items[-1]
        self._store_list(source, items[:-1])
        self._set_scalar(destination, value)
        return value

    async def lindex(self, key: str, index: int) -> str | None:
        items = self._list(key)
        position = self._normalize(index, len(items))
        return items[position] if position is not None else None

    async def lrem_at(self, key: str, index: int) -> bool:
        items = list(self._list(key))
        position = self._normalize(index, len(items))
        if position is None:
            return False
        del items[position]
        self._store_list(key, items)
        return True

    async def lmove_index(self, key: str, from_index: int, to_index: int) -> bool:
        items = list(self._list(key))
        source = self._normalize(from_index, len(items))
        target = self._normalize(to_index, len(items))
        if source is None or target is None:
            return False
        items.insert(target, items.pop(source))
        self._store_list(key, items)
        return True

    async def lshuffle(self, key: str, seed: int) -> int:
        items = list(self._list(key))
        random.Random(seed).shuffle(items)
        self._store_list(key, items)
        return len(items)

    async def lclear(self, key: str) -> int:
        count = len(self._list(key))
        self._drop(key)
        return count

    async def llen(self, key: str) -> int:
        return len(self._list(key))

    async def lrange(self, key: str, start: int, end: int) -> list[str]:
        items = self._list(key)
        length = len(items)
        if start < 0:
            start = max(0, start + length)
        if end < 0:
            end += length
        if start > end or start >= length:
            return []
        return items[start : end + 1]

    # === Expiry ===

    async def pexpire_many(self, keys: Sequence[str], ttl_ms: int) -> list[bool]:
        deadline = self._clock() + ttl_ms / 1000
        results = []
        for key in keys:
            exists = self._has(key)
            if exists:
                self._expires_at[key] = deadline
            results.append(exists)
        return results

    # === Lifecycle ===

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._scalars.clear()
        self._lists.clear()
        self._expires_at.clear()
