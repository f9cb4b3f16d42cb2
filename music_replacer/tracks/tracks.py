"""
Access to all track names and all overridden tracks.

Tracks is the single object the rest of the application talks to:

    Catalog (synchronous, caller's thread):
        exists(), override_exists(), overridden_tracks(), get_override()

    Mutations (background, host task pool):
        create_override_from_file()    local .wav
        create_override_from_stream()  YouTube video, converted remotely
        bulk_create_override()         directory of <track name>.wav files
        remove_override(), remove_all_overrides()

Every creation path ends in the same step: transfer the audio to
path_for(name) and, only if that succeeded, write the override record.
A failed creation therefore never leaves a record behind.

Storage:
    config group "musicreplacer", key "track_<name>", value TrackOverride JSON
    <overrides dir>/<name>.wav

Concurrency:
    Operations on different tracks may run in any order. Nothing stops two
    concurrent operations on the same track from racing; the last one to
    write the record wins.
"""

from concurrent.futures import Future
from functools import cached_property
from pathlib import Path

from mutagen.wave import WAVE
from rapidfuzz import fuzz, process
from rapidfuzz.utils import default_process

from music_replacer.core.exceptions import MusicReplacerError, StoreError
from music_replacer.core.logger import get_logger, log_override_failure
from music_replacer.download.converter import WavConverter
from music_replacer.download.transfer import (
    LOCAL_AUDIO_SUFFIX,
    is_supported_local_file,
    transfer_link,
    transfer_local,
)
from music_replacer.host import Host
from music_replacer.tracks.models import (
    INFO_DURATION,
    INFO_FILE,
    INFO_NAME,
    INFO_UPLOADER,
    INFO_UPLOADER_URL,
    INFO_URL,
    TrackOverride,
)
from music_replacer.utils import (
    ensure_directory,
    format_duration,
    sanitize_filename,
    track_name_from_file,
)
from music_replacer.youtube.extractor import resolve_audio_stream
from music_replacer.youtube.models import StreamItem

logger = get_logger(__name__)


CONFIG_GROUP = "musicreplacer"
OVERRIDE_CONFIG_KEY_PREFIX = "track_"

# Minimum rapidfuzz score for suggest()
SUGGESTION_SCORE_CUTOFF = 60


def _config_key(name: str) -> str:
    return OVERRIDE_CONFIG_KEY_PREFIX + name


def _wav_duration(path: Path) -> float | None:
    """Length of a WAV file in seconds, None if the header can't be read."""
    try:
        return WAVE(str(path)).info.length
    except Exception as e:
        logger.debug(f"Couldn't read WAV header of {path}: {e}")
        return None


class Tracks:
    """
    Provides access to all track names as well as all overridden tracks.

    Attributes:
        overrides_dir: Directory holding one WAV per overridden track.

    Args:
        host: Track names, configuration store and task pool.
        overrides_dir: Created if it doesn't exist.
        converter: Conversion endpoint client for YouTube overrides.
        cookie_file: Optional cookies.txt for yt-dlp.

    Raises:
        StoreError: If overrides_dir can't be created.
    """

    def __init__(
        self,
        host: Host,
        overrides_dir: Path,
        converter: WavConverter,
        cookie_file: Path | None = None
    ) -> None:
        self._host = host
        self._config = host.config
        self._executor = host.executor
        self._converter = converter
        self._cookie_file = cookie_file
        self.overrides_dir = overrides_dir

        try:
            ensure_directory(overrides_dir)
        except OSError as e:
            raise StoreError(
                f"Failed to create {overrides_dir}: {e}",
                details={"path": str(overrides_dir), "original_error": str(e)}
            ) from e

    # =========================================================================
    # Catalog
    # =========================================================================

    @cached_property
    def track_names(self) -> tuple[str, ...]:
        """All known track names, sorted and without duplicates."""
        names = tuple(sorted(set(self._host.track_names())))
        logger.debug(f"Loaded {len(names)} track names")
        return names

    @cached_property
    def _track_name_set(self) -> frozenset[str]:
        return frozenset(self.track_names)

    def exists(self, name: str) -> bool:
        """Whether name is a known track."""
        return name in self._track_name_set

    def override_exists(self, name: str) -> bool:
        """Whether an override record exists for name (its file isn't checked)."""
        return self._config.get_configuration(CONFIG_GROUP, _config_key(name)) is not None

    def overridden_tracks(self) -> list[str]:
        """Names of all tracks with an override record."""
        return [
            key[len(OVERRIDE_CONFIG_KEY_PREFIX):]
            for key in self._config.get_configuration_keys(CONFIG_GROUP)
            if key.startswith(OVERRIDE_CONFIG_KEY_PREFIX)
        ]

    def suggest(self, name: str, limit: int = 3) -> list[str]:
        """Known track names closest to name, best first."""
        matches = process.extract(
            name,
            self.track_names,
            scorer=fuzz.WRatio,
            processor=default_process,
            limit=limit,
            score_cutoff=SUGGESTION_SCORE_CUTOFF,
        )
        return [match for match, _score, _index in matches]

    def path_for(self, name: str) -> Path:
        """File the override of name lives in."""
        return self.overrides_dir / f"{sanitize_filename(name)}{LOCAL_AUDIO_SUFFIX}"

    def get_override(self, name: str) -> TrackOverride | None:
        """
        Read the override of name.

        Returns:
            The override, or None if there is none.

        Behavior:
            A record whose file is missing, or that can't be deserialized,
            is stale: it is deleted and None is returned.
        """
        raw = self._config.get_configuration(CONFIG_GROUP, _config_key(name))
        if raw is None:
            return None

        try:
            override = TrackOverride.from_json(raw)
        except ValueError as e:
            logger.warning(f"Deleting unreadable override record for {name}: {e}")
            self._config.unset_configuration(CONFIG_GROUP, _config_key(name))
            return None

        if self.path_for(name).exists():
            return override

        logger.warning(f"Deleting: {override} because there was no override file for it.")
        self._config.unset_configuration(CONFIG_GROUP, _config_key(name))
        return None

    # =========================================================================
    # Creation
    # =========================================================================

    def create_override_from_file(self, name: str, path: Path | str) -> bool:
        """
        Override name with a local WAV file.

        Validation happens right away; the copy runs on the task pool.

        Returns:
            False if name is unknown or path isn't an existing .wav file
            (nothing is submitted), True once the copy is submitted.
        """
        return self.submit_override_from_file(name, path) is not None

    def submit_override_from_file(self, name: str, path: Path | str) -> Future | None:
        """
        Same as create_override_from_file(), but hands back the copy.

        Returns:
            None if validation failed, otherwise a Future resolving to
            True if the override was committed.
        """
        path = Path(path)

        if not self.exists(name):
            logger.warning(f"Not a known track: {name}")
            return None

        if not is_supported_local_file(path):
            logger.warning(f"Can only load {LOCAL_AUDIO_SUFFIX} files. {name} <- {path}")
            return None

        if not path.is_file():
            logger.warning(f"No such file: {path}")
            return None

        return self._executor.submit(self._create_local_override, name, path)

    def create_override_from_stream(self, name: str, stream_item: StreamItem) -> Future:
        """
        Override name with the audio of a YouTube video.

        Runs on the task pool: resolves the best m4a stream of the video,
        then converts and downloads it.

        Returns:
            Future resolving to True if the override was committed.
        """
        return self._executor.submit(self._create_stream_override, name, stream_item)

    def bulk_create_override(self, directory: Path | str) -> Future:
        """
        Create overrides from a directory of files named after tracks.

        Only files whose base name (see track_name_from_file) is a known
        track are used, e.g. "Harmony.wav". Files that aren't WAV are
        rejected by the transfer like any other local file.

        Returns:
            Future resolving to the number of overrides committed.
        """
        return self._executor.submit(self._bulk_create, Path(directory))

    def _bulk_create(self, directory: Path) -> int:
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            logger.warning(f"Error opening `{directory}` for bulk override: {e}")
            return 0

        created = 0
        for path in entries:
            name = track_name_from_file(path)
            if not path.is_file() or not self.exists(name):
                continue
            if self._create_local_override(name, path):
                created += 1

        logger.info(f"Bulk override from {directory}: {created} tracks overridden")
        return created

    def _create_local_override(self, name: str, path: Path) -> bool:
        info = {INFO_FILE: path.name}
        duration = _wav_duration(path) if is_supported_local_file(path) else None
        if duration:
            info[INFO_DURATION] = format_duration(duration)

        return self._create_override(TrackOverride(name, str(path), True, info))

    def _create_stream_override(self, name: str, stream_item: StreamItem) -> bool:
        if not self.exists(name):
            logger.warning(f"Not a known track: {name}")
            return False

        try:
            stream = resolve_audio_stream(stream_item.url, self._cookie_file)
        except MusicReplacerError as e:
            log_override_failure(logger, name, stream_item.url, e.message)
            return False
        except Exception as e:
            log_override_failure(logger, name, stream_item.url, f"Unexpected error: {e}", exc_info=e)
            return False

        if stream is None:
            log_override_failure(logger, name, stream_item.url, "No m4a audio stream available")
            return False

        logger.debug(f"Using format {stream.format_id} ({stream.abr} kbit/s) of {stream_item.url}")

        return self._create_override(TrackOverride(
            name=name,
            original_path=stream.url,
            from_local=False,
            additional_info={
                INFO_URL: stream_item.url,
                INFO_NAME: stream_item.name,
                INFO_DURATION: format_duration(stream_item.duration),
                INFO_UPLOADER: stream_item.uploader_name,
                INFO_UPLOADER_URL: stream_item.uploader_url,
            },
        ))

    def _create_override(self, override: TrackOverride) -> bool:
        """Transfer the audio, then commit the record. Nothing is committed on failure."""
        if not self._transfer(override):
            return False

        self._config.set_configuration(
            CONFIG_GROUP, _config_key(override.name), override.to_json()
        )
        logger.info(f"Overrode {override.name} with {override.origin_url}")
        return True

    def _transfer(self, override: TrackOverride) -> bool:
        destination = self.path_for(override.name)
        try:
            if override.from_local:
                transfer_local(Path(override.original_path), destination)
            else:
                transfer_link(
                    override.original_path, override.origin_url, destination, self._converter
                )
            return True
        except MusicReplacerError as e:
            log_override_failure(logger, override.name, override.origin_url, e.message)
        except Exception as e:
            log_override_failure(
                logger, override.name, override.origin_url, f"Unexpected error: {e}", exc_info=e
            )
        return False

    # =========================================================================
    # Removal
    # =========================================================================

    def remove_override(self, name: str) -> Future | None:
        """
        Remove the override of name.

        Returns:
            Future of the removal, or None if name has no (valid) override.
        """
        if self.get_override(name) is None:
            return None

        return self._executor.submit(self._remove, name)

    def remove_all_overrides(self) -> list[Future]:
        """Clears all overridden tracks."""
        futures = (self.remove_override(name) for name in self.overridden_tracks())
        return [future for future in futures if future is not None]

    def _remove(self, name: str) -> None:
        self._config.unset_configuration(CONFIG_GROUP, _config_key(name))

        path = self.path_for(name)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Couldn't delete {path}: {e}")
            return

        logger.info(f"Removed override of {name}")
