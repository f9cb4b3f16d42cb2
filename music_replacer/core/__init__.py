"""
Core module for music-replacer.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - store: Thread-safe grouped key/value configuration store
    - logger: Logging system with multiple outputs

Usage:
    from music_replacer.core import (
        Config, load_config,
        ConfigStore,
        setup_logging, get_logger,
        MusicReplacerError, ConfigError, StoreError
    )
"""

from music_replacer.core.config import (
    Config,
    ConversionConfig,
    ExecutorConfig,
    StorageConfig,
    TracksConfig,
    YouTubeConfig,
    load_config,
)
from music_replacer.core.exceptions import (
    ConfigError,
    ConversionError,
    MusicReplacerError,
    StoreError,
    TransferError,
    YouTubeError,
)
from music_replacer.core.logger import (
    get_logger,
    log_override_failure,
    setup_logging,
    shutdown_logging,
)
from music_replacer.core.store import ConfigStore

__all__ = [
    # Config
    "Config",
    "StorageConfig",
    "TracksConfig",
    "ConversionConfig",
    "ExecutorConfig",
    "YouTubeConfig",
    "load_config",
    # Store
    "ConfigStore",
    # Exceptions
    "MusicReplacerError",
    "ConfigError",
    "StoreError",
    "YouTubeError",
    "ConversionError",
    "TransferError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_override_failure",
    "shutdown_logging",
]
