"""Serialization of songs to and from their stored string form."""

from __future__ import annotations

import pydantic

from discord_music_queue.domain.music.entities import Song
from discord_music_queue.domain.shared.exceptions import ValidationError
from discord_music_queue.domain.shared.messages import ErrorMessages


class SongCodec:
    """Lossless JSON mapping between :class:`Song` values and store strings."""

    @staticmethod
    def encode(song: Song) -> str:
        return song.model_dump_json(exclude_none=True)

    @staticmethod
    def decode(payload: str) -> Song:
        try:
            return Song.model_validate_json(payload)
        except pydantic.ValidationError as e:
            detail = f"{e.error_count()} validation error(s)"
            raise ValidationError(
                ErrorMessages.MALFORMED_SONG_PAYLOAD.format(error=detail),
                field="song",
            ) from e

    @classmethod
    def decode_optional(cls, payload: str | None) -> Song | None:
        return cls.decode(payload) if payload else None
