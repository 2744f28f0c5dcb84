"""Tests for SongCodec and the Song entity."""

import json
from datetime import UTC, datetime, timedelta, timezone

import pydantic
import pytest
from conftest import ADDED_AT, make_song

from discord_music_queue.domain.music.codec import SongCodec
from discord_music_queue.domain.music.entities import Requester, Song, Track, snowflake_of
from discord_music_queue.domain.shared.exceptions import ValidationError


class TestRoundTrip:
    """decode(encode(s)) == s for representative songs."""

    @pytest.mark.parametrize(
        "song",
        [
            make_song("bare"),
            make_song(
                "full",
                requester=Requester(id=1, name="N", avatar="h", default_avatar_url="u"),
            ),
            Song(
                track=Track(source="x", length_ms=0, is_stream=True, author="Artist"),
                added_at=ADDED_AT,
                requester=Requester(id=42),
            ),
        ],
    )
    def test_lossless(self, song):
        assert SongCodec.decode(SongCodec.encode(song)) == song

    def test_offset_timestamps_normalise_to_utc(self):
        """Should keep the same instant when the input carries a non-UTC offset."""
        local = datetime(2024, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        song = Song.create("x", added_at=local)

        decoded = SongCodec.decode(SongCodec.encode(song))

        assert decoded.added_at == ADDED_AT
        assert decoded.added_at.tzinfo == UTC


class TestEncoding:
    def test_omits_absent_fields(self):
        payload = json.loads(SongCodec.encode(Song.create("x", added_at=ADDED_AT)))

        assert "requester" not in payload
        assert payload["track"] == {"source": "x", "is_stream": False}

    def test_decode_optional(self):
        assert SongCodec.decode_optional(None) is None
        assert SongCodec.decode_optional("") is None


class TestDecodingErrors:
    @pytest.mark.parametrize(
        "payload",
        ["not json", "{}", '{"track": {"source": ""}, "added_at": "2024-01-01T00:00:00Z"}'],
    )
    def test_malformed_payload(self, payload):
        with pytest.raises(ValidationError) as exc_info:
            SongCodec.decode(payload)

        assert exc_info.value.field == "song"

    def test_naive_timestamp_rejected(self):
        with pytest.raises(ValidationError):
            SongCodec.decode('{"track": {"source": "x"}, "added_at": "2024-01-01T00:00:00"}')


class TestSongEntity:
    def test_title_falls_back_to_uri_then_source(self):
        assert Song.create(Track(source="s", uri="u")).title == "u"
        assert Song.create("s").title == "s"
        assert Song.create(Track(source="s", title="T", uri="u")).title == "T"

    def test_immutable(self, sample_song):
        with pytest.raises(pydantic.ValidationError):
            sample_song.requester = None  # type: ignore[misc]

    def test_was_requested_by(self, sample_song):
        assert sample_song.was_requested_by(111)
        assert not sample_song.was_requested_by(222)
        assert not make_song("anon").was_requested_by(111)

    def test_requester_from_member_without_avatar(self):
        from unittest.mock import MagicMock

        member = MagicMock(id=5, display_name="Nick", avatar=None)
        member.default_avatar.url = "default.png"

        requester = Requester.from_member(member, 9)

        assert requester.id == 9
        assert requester.avatar is None
        assert requester.default_avatar_url == "default.png"

    def test_snowflake_of(self):
        from unittest.mock import MagicMock

        assert snowflake_of(None) is None
        assert snowflake_of(7) == 7
        assert snowflake_of(MagicMock(id=8)) == 8
