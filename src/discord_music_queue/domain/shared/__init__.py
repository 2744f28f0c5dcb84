"""
Shared Domain Kernel

Contains types, events and exceptions shared across the package.
"""

from discord_music_queue.domain.shared.events import DomainEvent, EventBus
from discord_music_queue.domain.shared.exceptions import (
    DomainError,
    InvalidOperationError,
    StoreUnavailableError,
    ValidationError,
)

__all__ = [
    "DomainEvent",
    "EventBus",
    "DomainError",
    "ValidationError",
    "InvalidOperationError",
    "StoreUnavailableError",
]
