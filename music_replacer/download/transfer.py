"""
Transfers of override audio into the overrides directory.

Both transfers write to a temporary file next to the destination and
move it into place with os.replace() only once all bytes are there, so
a failed transfer never leaves a truncated WAV behind and never touches
the file of an existing override.

    transfer_local():  local .wav  -> <overrides>/<track>.wav
    transfer_link():   m4a stream  -> conversion endpoint -> <overrides>/<track>.wav
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable

from music_replacer.core.exceptions import TransferError
from music_replacer.core.logger import get_logger
from music_replacer.download.converter import WavConverter

logger = get_logger(__name__)


# The only format the host client can play
LOCAL_AUDIO_SUFFIX = ".wav"


def is_supported_local_file(path: Path) -> bool:
    """Whether path ends in the extension local overrides must have (case-sensitive)."""
    return str(path).endswith(LOCAL_AUDIO_SUFFIX)


def _write_atomically(destination: Path, write: Callable[[Path], None]) -> None:
    """
    Call write() with a temp path, then move the temp file onto destination.

    The temp file is removed if write() raises.
    """
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{destination.stem}.", suffix=".part", dir=destination.parent
    )
    os.close(fd)
    tmp_path = Path(tmp_name)

    try:
        write(tmp_path)
        os.replace(tmp_path, destination)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def transfer_local(source: Path, destination: Path) -> None:
    """
    Copy a local WAV file to destination.

    Args:
        source: User-supplied audio file.
        destination: Per-track override path.

    Raises:
        TransferError: If source is not a .wav file (nothing is copied)
                       or the copy fails.
    """
    if not is_supported_local_file(source):
        raise TransferError(
            f"Can only load {LOCAL_AUDIO_SUFFIX} files, got {source.name}",
            details={"path": str(source)}
        )

    try:
        _write_atomically(destination, lambda tmp: shutil.copyfile(source, tmp))
    except OSError as e:
        raise TransferError(
            f"Failed to copy {source}: {e}",
            details={"path": str(source), "original_error": str(e)}
        ) from e

    logger.debug(f"Copied {source} -> {destination}")


def transfer_link(
    download_url: str,
    origin_url: str,
    destination: Path,
    converter: WavConverter
) -> None:
    """
    Convert a remote stream to WAV and download it to destination.

    Args:
        download_url: Direct download URL of the m4a stream.
        origin_url: Watch URL of the video.
        destination: Per-track override path.
        converter: Conversion endpoint client.

    Raises:
        ConversionError: If the endpoint doesn't return a WAV URL.
        TransferError: If the converted file can't be downloaded or written.
    """
    wav_url = converter.convert(origin_url, download_url)

    try:
        _write_atomically(destination, lambda tmp: converter.fetch(wav_url, tmp))
    except OSError as e:
        raise TransferError(
            f"Failed to write {destination}: {e}",
            details={"url": wav_url, "original_error": str(e)}
        ) from e

    logger.debug(f"Downloaded {wav_url} -> {destination}")
