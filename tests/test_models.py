"""Test override and YouTube data models"""

import pytest

from music_replacer.tracks.models import TrackOverride
from music_replacer.youtube.extractor import select_audio_stream
from music_replacer.youtube.models import AudioStream, StreamItem


class TestTrackOverride:
    """Test TrackOverride serialization"""

    def test_json_round_trip(self):
        override = TrackOverride(
            "Harmony",
            "https://rr1.googlevideo.com/videoplayback",
            False,
            {"Url": "https://www.youtube.com/watch?v=abc", "Name": "Hármony ♫"},
        )
        assert TrackOverride.from_json(override.to_json()) == override

    def test_origin_url(self):
        remote = TrackOverride("Harmony", "https://dl", False, {"Url": "https://watch"})
        local = TrackOverride("Harmony", "/music/harmony.wav", True)
        assert remote.origin_url == "https://watch"
        assert local.origin_url == "/music/harmony.wav"

    def test_missing_optional_fields(self):
        override = TrackOverride.from_json('{"name": "Harmony", "original_path": "/a.wav"}')
        assert override.from_local is False
        assert override.additional_info == {}

    @pytest.mark.parametrize("text", [
        "not json",
        "[]",
        '{"name": "Harmony"}',
        '{"name": "Harmony", "original_path": "/a.wav", "additional_info": [1]}',
    ])
    def test_invalid_records(self, text):
        with pytest.raises(ValueError):
            TrackOverride.from_json(text)


class TestStreamItem:
    """Test StreamItem creation from yt-dlp info"""

    def test_from_full_info(self):
        item = StreamItem.from_info({
            "id": "abcdefghijk",
            "webpage_url": "https://www.youtube.com/watch?v=abcdefghijk",
            "title": "Harmony Remix",
            "duration": 213.4,
            "uploader": "Some Channel",
            "uploader_url": "https://www.youtube.com/@somechannel",
        })
        assert item == StreamItem(
            url="https://www.youtube.com/watch?v=abcdefghijk",
            name="Harmony Remix",
            duration=213,
            uploader_name="Some Channel",
            uploader_url="https://www.youtube.com/@somechannel",
        )

    def test_from_flat_entry(self):
        item = StreamItem.from_info({
            "id": "abcdefghijk",
            "url": "abcdefghijk",
            "title": "Harmony Remix",
            "duration": None,
            "channel": "Some Channel",
            "channel_url": "https://www.youtube.com/channel/UC123",
        })
        assert item.url == "https://www.youtube.com/watch?v=abcdefghijk"
        assert item.duration == 0
        assert item.uploader_name == "Some Channel"
        assert item.uploader_url == "https://www.youtube.com/channel/UC123"


class TestSelectAudioStream:
    """Test picking the m4a audio stream"""

    FORMATS = [
        {"format_id": "139", "ext": "m4a", "acodec": "mp4a.40.5", "vcodec": "none",
         "abr": 48.8, "url": "https://dl/139", "protocol": "https"},
        {"format_id": "140", "ext": "m4a", "acodec": "mp4a.40.2", "vcodec": "none",
         "abr": 129.5, "url": "https://dl/140", "protocol": "https"},
        {"format_id": "251", "ext": "webm", "acodec": "opus", "vcodec": "none",
         "abr": 160.0, "url": "https://dl/251", "protocol": "https"},
        {"format_id": "18", "ext": "mp4", "acodec": "mp4a.40.2", "vcodec": "avc1",
         "abr": 96.0, "url": "https://dl/18", "protocol": "https"},
        {"format_id": "hls-140", "ext": "m4a", "acodec": "mp4a.40.2", "vcodec": "none",
         "abr": 256.0, "url": "https://manifest/140", "protocol": "m3u8_native"},
    ]

    def test_best_m4a(self):
        assert select_audio_stream({"formats": self.FORMATS}) == AudioStream(
            url="https://dl/140", format_id="140", ext="m4a", abr=129.5
        )

    def test_no_m4a(self):
        formats = [fmt for fmt in self.FORMATS if fmt["ext"] != "m4a"]
        assert select_audio_stream({"formats": formats}) is None
        assert select_audio_stream({}) is None
