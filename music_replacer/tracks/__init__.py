"""
Tracks module for music-replacer.

    - models: TrackOverride, the stored override record
    - tracks: Tracks, catalog of track names and override management
"""

from music_replacer.tracks.models import TrackOverride
from music_replacer.tracks.tracks import (
    CONFIG_GROUP,
    OVERRIDE_CONFIG_KEY_PREFIX,
    Tracks,
)

__all__ = [
    "CONFIG_GROUP",
    "OVERRIDE_CONFIG_KEY_PREFIX",
    "TrackOverride",
    "Tracks",
]
