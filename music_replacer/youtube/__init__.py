"""
YouTube module for music-replacer.

Looks up videos and their audio streams with yt-dlp:
    - search(): find videos for a free-text query
    - lookup_stream_item(): metadata of a single video URL
    - resolve_audio_stream(): best m4a audio-only stream of a video
"""

from music_replacer.youtube.extractor import (
    lookup_stream_item,
    resolve_audio_stream,
    search,
    select_audio_stream,
)
from music_replacer.youtube.models import AudioStream, StreamItem

__all__ = [
    "AudioStream",
    "StreamItem",
    "lookup_stream_item",
    "resolve_audio_stream",
    "search",
    "select_audio_stream",
]
