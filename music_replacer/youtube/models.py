"""
Data models for YouTube lookups.

StreamItem is what a search or a URL lookup returns; AudioStream is a
single direct-download audio format resolved from a video.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StreamItem:
    """
    Immutable representation of a YouTube video.

    Attributes:
        url: Watch URL of the video.
             Example: "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        name: Video title.
        duration: Duration in seconds, 0 when unknown.
        uploader_name: Channel name.
        uploader_url: Channel URL, empty when unknown.
    """

    url: str
    name: str
    duration: int = 0
    uploader_name: str = ""
    uploader_url: str = ""

    @classmethod
    def from_info(cls, info: dict[str, Any]) -> "StreamItem":
        """
        Create a StreamItem from a yt-dlp info dict.

        Works for both full extraction results and flat search entries;
        flat entries may lack webpage_url and only carry url or id.
        """
        url = info.get("webpage_url") or info.get("url") or ""
        if not url.startswith("http") and info.get("id"):
            url = f"https://www.youtube.com/watch?v={info['id']}"

        duration = info.get("duration") or 0

        return cls(
            url=url,
            name=info.get("title") or "",
            duration=int(duration),
            uploader_name=info.get("uploader") or info.get("channel") or "",
            uploader_url=info.get("uploader_url") or info.get("channel_url") or "",
        )


@dataclass(frozen=True)
class AudioStream:
    """
    A direct-download audio stream of a video.

    Attributes:
        url: Direct download URL (expires after a few hours).
        format_id: yt-dlp format id, e.g. "140".
        ext: Container extension, e.g. "m4a".
        abr: Average bitrate in kbit/s, None when yt-dlp doesn't know.
    """

    url: str
    format_id: str
    ext: str
    abr: float | None = None

    @classmethod
    def from_format(cls, fmt: dict[str, Any]) -> "AudioStream":
        return cls(
            url=fmt["url"],
            format_id=str(fmt.get("format_id", "")),
            ext=fmt.get("ext", ""),
            abr=fmt.get("abr"),
        )
