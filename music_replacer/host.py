"""
Host capability set for music-replacer.

The plugin only needs three things from the application it runs in:

    - the names of all music tracks
    - a string key/value configuration store scoped by group
    - a shared pool to run background work on

Host bundles them. create_host() builds one from config.yaml for the
command-line front end; an embedding application builds its own.

Usage:
    host = create_host(config)
    try:
        tracks = Tracks(host, config.storage.overrides_directory, converter)
        ...
    finally:
        host.close()
"""

from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, Iterable

from music_replacer.core.config import Config
from music_replacer.core.exceptions import ConfigError, StoreError
from music_replacer.core.logger import get_logger
from music_replacer.core.store import ConfigStore
from music_replacer.utils import ensure_directory

logger = get_logger(__name__)


@dataclass
class Host:
    """
    What the host application provides.

    Attributes:
        track_names: Called once, lazily, for all known track names.
        config: Configuration store, safe for concurrent access.
        executor: Shared pool for mutating operations.
    """

    track_names: Callable[[], Iterable[str]]
    config: ConfigStore
    executor: Executor

    def close(self) -> None:
        """Wait for submitted work, then close the store."""
        self.executor.shutdown(wait=True)
        self.config.close()


def load_track_names(path: Path) -> list[str]:
    """
    Read track names from a text file.

    One name per line, surrounding whitespace stripped. Blank lines and
    lines starting with '#' are ignored.

    Raises:
        ConfigError: If the file can't be read.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    except OSError as e:
        raise ConfigError(
            f"Failed to read track list: {e}",
            details={"file_path": str(path), "original_error": str(e)}
        ) from e

    names = [line.strip() for line in lines]
    names = [name for name in names if name and not name.startswith("#")]
    logger.debug(f"Read {len(names)} track names from {path}")
    return names


def create_host(config: Config) -> Host:
    """
    Build the host capability set from configuration.

    Creates the storage directory if needed, opens the configuration
    store and starts the task pool.

    Raises:
        StoreError: If the storage directory can't be created or the
                    configuration store can't be opened.
    """
    try:
        ensure_directory(config.storage.directory)
        store = ConfigStore(config.storage.store_path)
    except OSError as e:
        raise StoreError(
            f"Failed to open storage directory {config.storage.directory}: {e}",
            details={"path": str(config.storage.directory), "original_error": str(e)}
        ) from e

    executor = ThreadPoolExecutor(
        max_workers=config.executor.threads,
        thread_name_prefix="music-replacer"
    )
    return Host(
        track_names=partial(load_track_names, config.tracks.file),
        config=store,
        executor=executor,
    )
