"""discord.py adapters for the playback and channel ports."""

from .channel_directory import DiscordChannelDirectory
from .player import DiscordPlayer, DiscordPlayerManager

__all__ = ["DiscordChannelDirectory", "DiscordPlayer", "DiscordPlayerManager"]
