"""
Download module for music-replacer.

Moves override audio into the overrides directory:
    - converter: client for the remote WAV conversion endpoint
    - transfer: local copy and remote conversion transfers
"""

from music_replacer.download.converter import WavConverter
from music_replacer.download.transfer import (
    LOCAL_AUDIO_SUFFIX,
    is_supported_local_file,
    transfer_link,
    transfer_local,
)

__all__ = [
    "WavConverter",
    "LOCAL_AUDIO_SUFFIX",
    "is_supported_local_file",
    "transfer_link",
    "transfer_local",
]
