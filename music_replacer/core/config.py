"""
Configuration management for music-replacer.

This module handles loading, validating, and providing access to the
application configuration stored in config.yaml.

The configuration file contains:
    - Storage directory (overrides and the configuration store live here)
    - Path to the file listing all known track names
    - Conversion endpoint settings
    - Number of background worker threads
    - Optional cookie file path for yt-dlp

Example config.yaml:
    storage:
      directory: "~/.runelite"

    tracks:
      file: "~/.runelite/music-tracks.txt"

    conversion:
      endpoint: "https://example.com/default/convert-to-wav"
      read_timeout: 60

    executor:
      threads: 4

    youtube:
      cookie_file: null
      search_limit: 10
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from music_replacer.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

# Name of the per-plugin overrides directory inside storage.directory
OVERRIDES_DIRNAME = "music-replacer"

# Configuration store file inside storage.directory
STORE_FILENAME = "music-replacer.db"

DEFAULT_CONVERSION_ENDPOINT = (
    "https://4rri42wrbl.execute-api.us-east-1.amazonaws.com/default/convert-to-wav"
)
DEFAULT_READ_TIMEOUT = 60.0
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_THREADS = 4
DEFAULT_SEARCH_LIMIT = 10


@dataclass(frozen=True)
class StorageConfig:
    """
    Storage locations.

    Attributes:
        directory: Base directory, expanded and absolute.
        overrides_directory: Where override WAV files are stored
                             ({directory}/music-replacer).
        store_path: SQLite file backing the configuration store.
        log_directory: Where log files are written.
    """
    directory: Path
    overrides_directory: Path
    store_path: Path
    log_directory: Path


@dataclass(frozen=True)
class TracksConfig:
    """
    Source of the known track names.

    Attributes:
        file: Text file with one track name per line.
    """
    file: Path


@dataclass(frozen=True)
class ConversionConfig:
    """
    Remote WAV conversion settings.

    Attributes:
        endpoint: URL of the conversion endpoint.
        read_timeout: Seconds to wait for the endpoint's response body.
                      Conversion of long videos is slow, default 60.
        connect_timeout: Seconds to wait for the connection, default 10.
    """
    endpoint: str
    read_timeout: float
    connect_timeout: float


@dataclass(frozen=True)
class ExecutorConfig:
    """Background task pool settings."""
    threads: int


@dataclass(frozen=True)
class YouTubeConfig:
    """
    yt-dlp settings.

    Attributes:
        cookie_file: Optional cookies.txt passed to yt-dlp, for
                     age-restricted videos.
        search_limit: Default number of search results.
    """
    cookie_file: Path | None
    search_limit: int


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable (frozen dataclass).

    Example:
        config = load_config()
        print(f"Overrides in: {config.storage.overrides_directory}")
        print(f"Using {config.executor.threads} threads")
    """
    storage: StorageConfig
    tracks: TracksConfig
    conversion: ConversionConfig
    executor: ExecutorConfig
    youtube: YouTubeConfig


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If the config file is not found, has invalid YAML syntax,
                     is missing required fields, or contains invalid values.

    Thread Safety:
        This function is NOT thread-safe. It should be called once at
        application startup, before any threads are created.
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    _validate_config(raw_config)

    return Config(
        storage=_parse_storage_config(raw_config["storage"]),
        tracks=_parse_tracks_config(raw_config["tracks"]),
        conversion=_parse_conversion_config(_optional_section(raw_config, "conversion")),
        executor=_parse_executor_config(_optional_section(raw_config, "executor")),
        youtube=_parse_youtube_config(_optional_section(raw_config, "youtube")),
    )


def _validate_config(raw_config: dict[str, Any]) -> None:
    """
    Check the configuration has all required sections.

    Raises:
        ConfigError: If a required section is missing or not a dictionary.
    """
    required_sections = ["storage", "tracks"]

    for section in required_sections:
        if section not in raw_config:
            raise ConfigError(
                f"Missing required section: '{section}'",
                details={"missing_section": section}
            )

        if not isinstance(raw_config[section], dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )


def _optional_section(raw_config: dict[str, Any], section: str) -> dict[str, Any]:
    value = raw_config.get(section)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(
            f"Section '{section}' must be a dictionary",
            details={"section": section}
        )
    return value


def _require_path(section: dict[str, Any], field: str) -> Path:
    raw = section.get(field, "")
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigError(
            f"'{field}' must be a non-empty string",
            details={"field": field}
        )
    return Path(raw.strip()).expanduser().resolve()


def _positive_number(section: dict[str, Any], field: str, default: float) -> float:
    raw = section.get(field)
    if raw is None:
        return default
    # bool is an int subclass, reject it explicitly
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or raw <= 0:
        raise ConfigError(
            f"'{field}' must be a positive number",
            details={"field": field, "value": raw}
        )
    return float(raw)


def _positive_int(section: dict[str, Any], field: str, default: int) -> int:
    raw = section.get(field)
    if raw is None:
        return default
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 1:
        raise ConfigError(
            f"'{field}' must be a positive integer",
            details={"field": field, "value": raw}
        )
    return raw


def _parse_storage_config(storage_section: dict[str, Any]) -> StorageConfig:
    """
    Parse the storage section.

    Expands ~ and converts to absolute paths. Does NOT create any
    directory (the overrides directory is created when Tracks is built).
    """
    directory = _require_path(storage_section, "directory")
    return StorageConfig(
        directory=directory,
        overrides_directory=directory / OVERRIDES_DIRNAME,
        store_path=directory / STORE_FILENAME,
        log_directory=directory / OVERRIDES_DIRNAME / "logs",
    )


def _parse_tracks_config(tracks_section: dict[str, Any]) -> TracksConfig:
    """
    Parse the tracks section.

    Raises:
        ConfigError: If the track list file is missing.
    """
    file = _require_path(tracks_section, "file")
    if not file.is_file():
        raise ConfigError(
            f"Track list file not found: {file}",
            details={"field": "tracks.file", "path": str(file)}
        )
    return TracksConfig(file=file)


def _parse_conversion_config(section: dict[str, Any]) -> ConversionConfig:
    endpoint = section.get("endpoint", DEFAULT_CONVERSION_ENDPOINT)
    if not isinstance(endpoint, str) or not endpoint.startswith(("http://", "https://")):
        raise ConfigError(
            "'conversion.endpoint' must be an http(s) URL",
            details={"field": "conversion.endpoint", "value": endpoint}
        )
    return ConversionConfig(
        endpoint=endpoint,
        read_timeout=_positive_number(section, "read_timeout", DEFAULT_READ_TIMEOUT),
        connect_timeout=_positive_number(section, "connect_timeout", DEFAULT_CONNECT_TIMEOUT),
    )


def _parse_executor_config(section: dict[str, Any]) -> ExecutorConfig:
    return ExecutorConfig(threads=_positive_int(section, "threads", DEFAULT_THREADS))


def _parse_youtube_config(section: dict[str, Any]) -> YouTubeConfig:
    """
    Parse the youtube section.

    Raises:
        ConfigError: If cookie_file is given but doesn't exist.
    """
    cookie_file = None
    raw_cookie = section.get("cookie_file")
    if raw_cookie is not None:
        if not isinstance(raw_cookie, str):
            raise ConfigError(
                "'youtube.cookie_file' must be a string path or null",
                details={"field": "youtube.cookie_file"}
            )
        cookie_path = Path(raw_cookie).expanduser().resolve()
        if not cookie_path.exists():
            raise ConfigError(
                f"Cookie file not found: {cookie_path}",
                details={"field": "youtube.cookie_file", "path": str(cookie_path)}
            )
        cookie_file = cookie_path

    return YouTubeConfig(
        cookie_file=cookie_file,
        search_limit=_positive_int(section, "search_limit", DEFAULT_SEARCH_LIMIT),
    )
