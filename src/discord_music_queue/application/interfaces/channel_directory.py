"""Port interface for resolving stored channel ids to live channels."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from discord_music_queue.domain.shared.types import ChannelIdField, DiscordSnowflake


class ChannelDirectory(ABC):
    """Looks up channels on the chat platform.

    Lookups may return None when a channel was deleted or the bot lost access;
    callers treat that as a stale binding, not as an error.
    """

    @abstractmethod
    def get_text_channel(
        self, guild_id: DiscordSnowflake, channel_id: ChannelIdField
    ) -> Any | None:
        ...

    @abstractmethod
    def get_voice_channel(
        self, guild_id: DiscordSnowflake, channel_id: ChannelIdField
    ) -> Any | None:
        ...
