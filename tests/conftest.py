"""Test configuration and fixtures"""

import tempfile
import wave
from concurrent.futures import Executor, Future
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml

from music_replacer.core.store import ConfigStore
from music_replacer.download.converter import WavConverter
from music_replacer.host import Host
from music_replacer.tracks import Tracks


TRACK_NAMES = [
    "Harmony",
    "Newbie Melody",
    "Autumn Voyage",
    "adventure",
    "Harmony",  # hosts report some names twice
]


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)
        return future


class ManualExecutor(Executor):
    """Holds submitted work until run_pending() is called."""

    def __init__(self):
        self.pending = []

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_pending(self):
        pending, self.pending = self.pending, []
        for future, fn, args, kwargs in pending:
            try:
                future.set_result(fn(*args, **kwargs))
            except BaseException as e:
                future.set_exception(e)


def write_wav(path: Path, seconds: float = 1.0, rate: int = 8000) -> Path:
    """Write a silent mono 16-bit WAV file."""
    with wave.open(str(path), "wb") as f:
        f.setnchannels(1)
        f.setsampwidth(2)
        f.setframerate(rate)
        f.writeframes(b"\x00\x00" * int(seconds * rate))
    return path


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def store(temp_dir):
    """Configuration store in the temp directory"""
    config_store = ConfigStore(temp_dir / "store.db")
    yield config_store
    config_store.close()


@pytest.fixture
def converter():
    """Conversion client that never touches the network"""
    return MagicMock(spec=WavConverter)


@pytest.fixture
def executor():
    return InlineExecutor()


@pytest.fixture
def host(store, executor):
    return Host(track_names=lambda: list(TRACK_NAMES), config=store, executor=executor)


@pytest.fixture
def tracks(host, temp_dir, converter):
    """Tracks running background work inline"""
    return Tracks(host, temp_dir / "overrides", converter)


@pytest.fixture
def sample_wav(temp_dir):
    """A 2 second WAV file outside the overrides directory"""
    source_dir = temp_dir / "source"
    source_dir.mkdir()
    return write_wav(source_dir / "my harmony.wav", seconds=2.0)


@pytest.fixture
def config_file(temp_dir):
    """Minimal valid config.yaml with a track list"""
    tracks_file = temp_dir / "tracks.txt"
    tracks_file.write_text("\n".join(TRACK_NAMES) + "\n", encoding="utf-8")

    config_path = temp_dir / "config.yaml"
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            {
                "storage": {"directory": str(temp_dir / "storage")},
                "tracks": {"file": str(tracks_file)},
                "executor": {"threads": 2},
            },
            f,
        )
    return config_path
