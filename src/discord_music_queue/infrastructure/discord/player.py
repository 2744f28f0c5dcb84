"""discord.py playback engine implementing the Player port."""

from __future__ import annotations

import asyncio
import logging
from time import monotonic
from typing import TYPE_CHECKING

import discord

from discord_music_queue.application.interfaces.player import (
    Player,
    PlayerProvider,
    TrackEnd,
    TrackEndCallback,
)
from discord_music_queue.config.settings import AudioSettings, DiscordSettings
from discord_music_queue.domain.music.value_objects import TrackEndReason
from discord_music_queue.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.music.entities import Song

logger = logging.getLogger(__name__)


class DiscordPlayer(Player):
    """Plays songs through the guild's ``discord.VoiceClient`` with FFmpeg.

    ``song.track.source`` must be something FFmpeg can open (a stream URL or
    a file path). Volume is a percentage applied by ``PCMVolumeTransformer``.
    """

    def __init__(
        self,
        client: discord.Client,
        guild_id: int,
        *,
        audio: AudioSettings | None = None,
        discord_settings: DiscordSettings | None = None,
    ) -> None:
        self._client = client
        self.guild_id = guild_id
        self._audio = audio or AudioSettings()
        self._discord = discord_settings or DiscordSettings()
        self._volume = 100
        self._song: Song | None = None
        self._on_track_end: TrackEndCallback | None = None

        # Reason tagged onto the next "after" callback when we cut a song short.
        self._pending_end_reason: TrackEndReason | None = None
        self._offset_ms = 0
        self._started_at: float | None = None
        self._paused_at: float | None = None
        self._pending_dispatches: set[asyncio.Task[None]] = set()

    def _voice_client(self) -> discord.VoiceClient | None:
        guild = self._client.get_guild(self.guild_id)
        if guild is None:
            return None
        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    # === State ===

    @property
    def playing(self) -> bool:
        vc = self._voice_client()
        return vc is not None and vc.is_playing()

    @property
    def paused(self) -> bool:
        vc = self._voice_client()
        return vc is not None and vc.is_paused()

    @property
    def channel_id(self) -> int | None:
        vc = self._voice_client()
        if vc is not None and vc.channel is not None:
            return vc.channel.id
        return None

    @property
    def position_ms(self) -> int:
        if self._started_at is None:
            return self._offset_ms
        reference = self._paused_at if self._paused_at is not None else monotonic()
        return self._offset_ms + int((reference - self._started_at) * 1000)

    def set_on_track_end_callback(self, callback: TrackEndCallback) -> None:
        self._on_track_end = callback

    # === Playback ===

    def _create_source(self, song: Song, position_ms: int) -> discord.PCMVolumeTransformer:
        before_options = self._audio.before_options
        if position_ms > 0:
            before_options = f"{before_options} -ss {position_ms / 1000:.3f}"
        source = discord.FFmpegPCMAudio(
            song.track.source,
            before_options=before_options,
            options=self._audio.options,
        )
        return discord.PCMVolumeTransformer(source, volume=self._volume / 100)

    async def play(self, song: Song, *, position_ms: int = 0) -> None:
        vc = self._voice_client()
        if vc is None:
            logger.warning(LogTemplates.VOICE_NOT_CONNECTED, self.guild_id)
            return

        if vc.is_playing() or vc.is_paused():
            self._pending_end_reason = TrackEndReason.REPLACED
            vc.stop()

        try:
            source = self._create_source(song, position_ms)
        except discord.ClientException as e:
            logger.error(
                LogTemplates.PLAYBACK_FAILED_START, e, extra={"guild_id": self.guild_id}
            )
            # Reported from a fresh task, never from inside the caller's play().
            task = asyncio.get_running_loop().create_task(
                self._dispatch_end(song, TrackEndReason.LOAD_FAILED)
            )
            self._pending_dispatches.add(task)
            task.add_done_callback(self._pending_dispatches.discard)
            return

        loop = asyncio.get_running_loop()

        def after_callback(error: Exception | None = None) -> None:
            if error:
                logger.warning(LogTemplates.TRACK_END_ERROR, self.guild_id, error)
            reason = self._pending_end_reason or (
                TrackEndReason.LOAD_FAILED if error else TrackEndReason.FINISHED
            )
            self._pending_end_reason = None
            asyncio.run_coroutine_threadsafe(self._dispatch_end(song, reason), loop)

        self._song = song
        self._offset_ms = position_ms
        self._started_at = monotonic()
        self._paused_at = None
        vc.play(source, after=after_callback)

    async def pause(self, state: bool = True) -> None:
        vc = self._voice_client()
        if vc is None:
            return

        if state and vc.is_playing():
            vc.pause()
            self._paused_at = monotonic()
        elif not state and vc.is_paused():
            vc.resume()
            if self._paused_at is not None and self._started_at is not None:
                self._started_at += monotonic() - self._paused_at
            self._paused_at = None

    async def set_volume(self, volume: int) -> None:
        self._volume = volume
        vc = self._voice_client()
        if vc is not None and isinstance(vc.source, discord.PCMVolumeTransformer):
            vc.source.volume = volume / 100

    async def seek(self, position_ms: int) -> None:
        vc = self._voice_client()
        if vc is None or self._song is None or vc.source is None:
            return

        # Swapping the source keeps the running "after" callback attached.
        vc.source = self._create_source(self._song, position_ms)
        self._offset_ms = position_ms
        self._started_at = monotonic()
        if self._paused_at is not None:
            self._paused_at = self._started_at

    async def stop(self) -> None:
        vc = self._voice_client()
        if vc is None:
            return
        if vc.is_playing() or vc.is_paused():
            self._pending_end_reason = TrackEndReason.STOPPED
            vc.stop()

    # === Connection ===

    async def connect(self, channel_id: int, *, self_deaf: bool = True) -> None:
        guild = self._client.get_guild(self.guild_id)
        if guild is None:
            logger.warning(LogTemplates.GUILD_NOT_FOUND, self.guild_id)
            return

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            logger.warning(LogTemplates.CHANNEL_NOT_VOICE, channel_id)
            return

        vc = self._voice_client()
        try:
            async with asyncio.timeout(self._discord.connect_timeout_s):
                if vc is not None:
                    await vc.move_to(channel)
                else:
                    await channel.connect(self_deaf=self_deaf)
        except TimeoutError:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            return
        logger.info(LogTemplates.VOICE_CONNECTED, channel_id, self.guild_id)

    async def disconnect(self) -> None:
        vc = self._voice_client()
        if vc is None:
            return
        if vc.is_playing() or vc.is_paused():
            self._pending_end_reason = TrackEndReason.CLEANUP
        await vc.disconnect(force=True)
        logger.info(LogTemplates.VOICE_DISCONNECTED, self.guild_id)

    async def _dispatch_end(self, song: Song, reason: TrackEndReason) -> None:
        if self._song is song:
            self._song = None
            self._started_at = None
            self._offset_ms = 0

        if self._on_track_end is None:
            logger.warning(LogTemplates.TRACK_END_NO_CALLBACK, self.guild_id)
            return

        try:
            await self._on_track_end(TrackEnd(guild_id=self.guild_id, song=song, reason=reason))
        except Exception:
            logger.exception(LogTemplates.TRACK_END_CALLBACK_ERROR, self.guild_id)


class DiscordPlayerManager(PlayerProvider):
    """Creates one :class:`DiscordPlayer` per guild."""

    def __init__(
        self,
        client: discord.Client,
        *,
        audio: AudioSettings | None = None,
        discord_settings: DiscordSettings | None = None,
    ) -> None:
        self._client = client
        self._audio = audio
        self._discord = discord_settings
        self._players: dict[int, DiscordPlayer] = {}

    def get(self, guild_id: int) -> DiscordPlayer | None:
        return self._players.get(guild_id)

    def create(self, guild_id: int) -> DiscordPlayer:
        player = self._players.get(guild_id)
        if player is None:
            player = DiscordPlayer(
                self._client, guild_id, audio=self._audio, discord_settings=self._discord
            )
            self._players[guild_id] = player
        return player

    async def destroy(self, guild_id: int) -> bool:
        player = self._players.pop(guild_id, None)
        if player is None:
            return False
        await player.stop()
        await player.disconnect()
        return True

    def __len__(self) -> int:
        return len(self._players)
