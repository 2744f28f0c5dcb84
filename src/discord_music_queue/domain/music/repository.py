"""
Queue Store Interface

Abstract base class defining the key-value primitives the queue state machine
relies on. Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence


class QueueStore(ABC):
    """Abstract adapter over a namespaced key-value store.

    Every method is a single atomic store operation (or, for
    :meth:`pexpire_many`, a single pipelined batch). Callers never compose
    read-then-write pairs for state that other workers may touch
    concurrently; the compound list operations below exist for that reason.

    Negative list indices count from the tail, as in Redis.
    """

    # === Scalars ===

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value stored at *key*, or None if absent."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def getset(self, key: str, value: str) -> str | None:
        """Replace the value at *key* and return the previous one atomically."""
        ...

    @abstractmethod
    async def delete(self, *keys: str) -> int:
        """Delete every key given.

        Returns:
            Number of keys that existed.
        """
        ...

    @abstractmethod
    async def exists(self, *keys: str) -> int:
        """Return how many of the given keys exist."""
        ...

    # === Lists ===

    @abstractmethod
    async def lpush(self, key: str, *values: str) -> int:
        """Insert values at the head, one after another, and return the new length."""
        ...

    @abstractmethod
    async def rpush(self, key: str, *values: str) -> int:
        """Append values at the tail and return the new length."""
        ...

    @abstractmethod
    async def rpopset(self, source: str, destination: str) -> str | None:
        """Pop the tail of *source* and store it as the scalar *destination*.

        When *source* is empty, *destination* is deleted and None is returned.
        """
        ...

    @abstractmethod
    async def lindex(self, key: str, index: int) -> str | None:
        ...

    @abstractmethod
    async def lrem_at(self, key: str, index: int) -> bool:
        """Remove the element at *index*. Returns False if the index is out of range."""
        ...

    @abstractmethod
    async def lmove_index(self, key: str, from_index: int, to_index: int) -> bool:
        """Move the element at *from_index* so that it ends up at *to_index*.

        Returns False if either index is out of range.
        """
        ...

    @abstractmethod
    async def lshuffle(self, key: str, seed: int) -> int:
        """Shuffle the list in place using *seed* and return its length."""
        ...

    @abstractmethod
    async def lclear(self, key: str) -> int:
        """Delete the list and return how many elements it held, atomically."""
        ...

    @abstractmethod
    async def llen(self, key: str) -> int:
        ...

    @abstractmethod
    async def lrange(self, key: str, start: int, end: int) -> list[str]:
        """Return the elements between *start* and *end*, both inclusive."""
        ...

    # === Expiry ===

    @abstractmethod
    async def pexpire_many(self, keys: Sequence[str], ttl_ms: int) -> list[bool]:
        """Re-arm the expiry of every key in one batch.

        Failures of individual keys are reported as False and never raised;
        keys that do not exist also report False.
        """
        ...

    # === Lifecycle ===

    @abstractmethod
    async def ping(self) -> bool:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...
