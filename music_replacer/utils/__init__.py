"""
Utility functions for music-replacer.

    - Filename sanitization (using yt-dlp's sanitize_filename)
    - Base name extraction for bulk imports
    - Duration formatting for override metadata
    - Directory creation

Usage:
    from music_replacer.utils import (
        sanitize_filename,
        track_name_from_file,
        format_duration,
        ensure_directory
    )
"""

from pathlib import Path

from yt_dlp.utils import sanitize_filename as yt_dlp_sanitize


def sanitize_filename(name: str, restricted: bool = False) -> str:
    """
    Sanitize a string for use as a filename.

    Uses yt-dlp's sanitize_filename function. Track names like
    "Mage Arena" pass through unchanged; path separators and
    characters invalid on Windows are replaced.

    Example:
        sanitize_filename("Harmony")        # "Harmony"
    """
    return yt_dlp_sanitize(name, restricted=restricted)


def track_name_from_file(path: Path) -> str:
    """
    Track name a file stands for in a bulk import.

    Everything from the first dot of the file name on is dropped, so
    "Harmony.wav" and "Harmony.backup.wav" both map to "Harmony".
    """
    return path.name.split(".", 1)[0]


def format_duration(seconds: int | float | None) -> str:
    """
    Format duration in seconds to a human-readable string.

    Examples:
        format_duration(213)   # "3:33"
        format_duration(3735)  # "1:02:15"
        format_duration(None)  # "0:00"
    """
    if not seconds or seconds < 0:
        return "0:00"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it and its parents if necessary.

    Returns:
        The same path (for chaining).

    Raises:
        OSError: If directory cannot be created (permissions, etc.)
    """
    path.mkdir(parents=True, exist_ok=True)
    return path
