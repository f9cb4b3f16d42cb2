"""
music-replacer: Replace game music tracks with your own audio.

Overrides a track of the host client with either a local WAV file or the
audio of a YouTube video, converted to WAV by a remote endpoint.

Architecture:
    core/       - Configuration, configuration store, logging, exceptions
    youtube/    - Search and audio stream lookup with yt-dlp
    download/   - Conversion endpoint client and file transfers
    tracks/     - Track catalog and override management (Tracks)
    host.py     - Host capability set (track names, store, task pool)
    cli.py      - Command-line interface

Usage:
    Command Line:
        music-replacer tracks --overridden
        music-replacer set "Harmony" --file ~/harmony.wav
        music-replacer set "Harmony" --youtube "https://www.youtube.com/watch?v=..."
        music-replacer bulk ~/osrs-remixes
        music-replacer remove --all

    Python API:
        from music_replacer.core import load_config, setup_logging
        from music_replacer.download import WavConverter
        from music_replacer.host import create_host
        from music_replacer.tracks import Tracks

        config = load_config()
        setup_logging(config.storage.log_directory)
        host = create_host(config)
        tracks = Tracks(
            host,
            config.storage.overrides_directory,
            WavConverter(config.conversion.endpoint, config.conversion.read_timeout),
        )
        tracks.create_override_from_file("Harmony", "harmony.wav")
        host.close()

Dependencies:
    - yt-dlp: YouTube search and stream extraction
    - requests: Conversion endpoint client
    - mutagen: WAV header inspection
    - rapidfuzz: Track name suggestions
    - rich-click: CLI
    - tqdm: Console logging
    - pyyaml: Configuration file parsing
"""

__version__ = "0.1.0"
__author__ = "music-replacer"
__license__ = "MIT"

from music_replacer.core import (
    Config,
    ConfigError,
    ConfigStore,
    ConversionError,
    MusicReplacerError,
    StoreError,
    TransferError,
    YouTubeError,
    get_logger,
    load_config,
    setup_logging,
)
from music_replacer.tracks import TrackOverride, Tracks

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "ConfigStore",
    "setup_logging",
    "get_logger",
    # Exceptions
    "MusicReplacerError",
    "ConfigError",
    "StoreError",
    "YouTubeError",
    "ConversionError",
    "TransferError",
    # Tracks
    "TrackOverride",
    "Tracks",
]
