# ruff: noqa: N999
"""
Domain Layer

Contains pure queue logic organized by bounded contexts:
- shared/: Cross-cutting types, events and exceptions
- music/: Songs, queue keys, the store port and lifecycle events
"""

from discord_music_queue.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
