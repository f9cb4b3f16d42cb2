"""
YouTube lookups for music-replacer.

All extraction goes through yt-dlp without downloading anything: the
actual audio is converted and downloaded by the conversion endpoint
(see music_replacer.download.converter).

Usage:
    from music_replacer.youtube.extractor import resolve_audio_stream, search

    results = search("osrs harmony orchestral", limit=5)
    stream = resolve_audio_stream(results[0].url)
    if stream is not None:
        print(stream.url)
"""

from pathlib import Path
from typing import Any

from yt_dlp import YoutubeDL
from yt_dlp.utils import YoutubeDLError

from music_replacer.core.exceptions import YouTubeError
from music_replacer.core.logger import get_logger
from music_replacer.youtube.models import AudioStream, StreamItem

logger = get_logger(__name__)


# Only this container is accepted from YouTube, the conversion
# endpoint turns it into WAV
AUDIO_EXT = "m4a"


class YtDlpLogger:
    """
    Logger handed to yt-dlp so its output goes through our logging
    instead of straight to stderr.

    yt-dlp ignores quiet=True for certain errors; everything is
    routed to DEBUG except errors, which are kept in last_error for
    the exception message.
    """

    def __init__(self) -> None:
        self.last_error: str | None = None

    def debug(self, msg: str) -> None:
        logger.debug(f"yt-dlp: {msg}")

    def info(self, msg: str) -> None:
        logger.debug(f"yt-dlp: {msg}")

    def warning(self, msg: str) -> None:
        logger.debug(f"yt-dlp warning: {msg}")

    def error(self, msg: str) -> None:
        self.last_error = msg
        logger.debug(f"yt-dlp error: {msg}")


def _get_yt_dlp_options(
    yt_logger: YtDlpLogger,
    cookie_file: Path | None = None,
    flat: bool = False
) -> dict[str, Any]:
    """
    Build yt-dlp options dictionary for info extraction only.

    Args:
        yt_logger: Logger to capture yt-dlp output.
        cookie_file: Optional cookies.txt, needed for age-restricted videos.
        flat: Don't resolve each search entry (much faster for searches).
    """
    options: dict[str, Any] = {
        "quiet": True,
        "no_warnings": True,
        "noprogress": True,
        "skip_download": True,
        "encoding": "UTF-8",
        "logger": yt_logger,
        # Try multiple YouTube player clients (fixes "format not available")
        "extractor_args": {
            "youtube": {
                "player_client": ["web", "android", "default"],
            }
        },
    }

    if flat:
        options["extract_flat"] = "in_playlist"

    if cookie_file is not None:
        options["cookiefile"] = str(cookie_file)

    return options


def _extract_info(
    url: str,
    cookie_file: Path | None = None,
    flat: bool = False
) -> dict[str, Any]:
    """
    Run yt-dlp extraction for url.

    Raises:
        YouTubeError: If yt-dlp fails or returns nothing.
    """
    yt_logger = YtDlpLogger()
    try:
        with YoutubeDL(_get_yt_dlp_options(yt_logger, cookie_file, flat)) as ydl:
            info = ydl.extract_info(url, download=False)
    except YoutubeDLError as e:
        error_msg = str(e)
        if yt_logger.last_error and yt_logger.last_error not in error_msg:
            error_msg = f"{error_msg} | {yt_logger.last_error}"
        raise YouTubeError(
            f"yt-dlp error: {error_msg}",
            details={"url": url, "original_error": str(e)}
        ) from e

    if not info:
        raise YouTubeError("yt-dlp returned no info", details={"url": url})

    return info


def _is_audio_only(fmt: dict[str, Any]) -> bool:
    return (
        fmt.get("vcodec") == "none"
        and fmt.get("acodec") not in (None, "none")
        and bool(fmt.get("url"))
        and str(fmt.get("protocol", "https")).startswith("http")
    )


def select_audio_stream(info: dict[str, Any]) -> AudioStream | None:
    """
    Pick the best m4a audio-only format of an extracted video.

    Formats without a known bitrate rank below any with one.

    Returns:
        The highest-bitrate m4a audio stream, or None when the video
        has no such format.
    """
    candidates = [
        fmt for fmt in info.get("formats") or []
        if fmt.get("ext") == AUDIO_EXT and _is_audio_only(fmt)
    ]
    if not candidates:
        return None

    best = max(candidates, key=lambda fmt: fmt.get("abr") or 0)
    return AudioStream.from_format(best)


def resolve_audio_stream(url: str, cookie_file: Path | None = None) -> AudioStream | None:
    """
    Resolve the direct-download m4a audio stream of a video.

    Args:
        url: Watch URL of the video.
        cookie_file: Optional cookies.txt.

    Returns:
        AudioStream, or None if the video offers no m4a audio.

    Raises:
        YouTubeError: If the video can't be extracted.
    """
    info = _extract_info(url, cookie_file)
    stream = select_audio_stream(info)
    if stream is None:
        logger.debug(f"No {AUDIO_EXT} audio stream among {len(info.get('formats') or [])} formats of {url}")
    return stream


def lookup_stream_item(url: str, cookie_file: Path | None = None) -> StreamItem:
    """
    Fetch title, duration and uploader of a single video.

    Raises:
        YouTubeError: If the video can't be extracted.
    """
    return StreamItem.from_info(_extract_info(url, cookie_file))


def search(query: str, limit: int = 10, cookie_file: Path | None = None) -> list[StreamItem]:
    """
    Search YouTube for videos.

    Args:
        query: Free-text query.
        limit: Maximum number of results.
        cookie_file: Optional cookies.txt.

    Returns:
        StreamItems in YouTube's result order. Entries yt-dlp couldn't
        identify (no id or url) are skipped.

    Raises:
        YouTubeError: If the search fails.
    """
    if not query.strip():
        return []

    info = _extract_info(f"ytsearch{limit}:{query}", cookie_file, flat=True)

    results = []
    for entry in info.get("entries") or []:
        if not entry:
            continue
        item = StreamItem.from_info(entry)
        if item.url:
            results.append(item)

    logger.debug(f"Search '{query}' returned {len(results)} results")
    return results
