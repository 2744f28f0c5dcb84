"""Channel lookups backed by the discord.py client cache."""

from __future__ import annotations

import discord

from discord_music_queue.application.interfaces.channel_directory import ChannelDirectory


class DiscordChannelDirectory(ChannelDirectory):
    """Resolves channel ids against the guilds the client can see.

    Only cached guilds are consulted; no HTTP requests are made.
    """

    def __init__(self, client: discord.Client) -> None:
        self._client = client

    def _lookup(self, guild_id: int, channel_id: int) -> discord.abc.GuildChannel | None:
        guild = self._client.get_guild(guild_id)
        if guild is None:
            return None
        return guild.get_channel(channel_id)

    def get_text_channel(self, guild_id: int, channel_id: int) -> discord.TextChannel | None:
        channel = self._lookup(guild_id, channel_id)
        return channel if isinstance(channel, discord.TextChannel) else None

    def get_voice_channel(
        self, guild_id: int, channel_id: int
    ) -> discord.VoiceChannel | discord.StageChannel | None:
        channel = self._lookup(guild_id, channel_id)
        if isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            return channel
        return None
