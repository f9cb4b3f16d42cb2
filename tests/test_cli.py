"""Test the command-line interface"""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from music_replacer.cli import cli
from music_replacer.youtube.models import AudioStream, StreamItem

from conftest import write_wav


WATCH_URL = "https://www.youtube.com/watch?v=abcdefghijk"


@pytest.fixture
def run(config_file):
    """Invoke the CLI with the temp config.yaml"""
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(cli, ["--config", str(config_file), *args], obj={})

    return invoke


class TestTracksCommands:
    """Test listing and showing tracks"""

    def test_tracks(self, run):
        result = run("tracks")
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "Autumn Voyage", "Harmony", "Newbie Melody", "adventure"
        ]

    def test_missing_config(self, temp_dir):
        result = CliRunner().invoke(
            cli, ["--config", str(temp_dir / "missing.yaml"), "tracks"], obj={}
        )
        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_storage_directory_is_a_file(self, config_file, temp_dir):
        storage_file = temp_dir / "storage"
        storage_file.write_text("not a directory", encoding="utf-8")

        result = CliRunner().invoke(cli, ["--config", str(config_file), "tracks"], obj={})

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Can't write logs to" in result.output

    def test_store_error_exits_cleanly(self, run, temp_dir):
        (temp_dir / "storage").write_text("not a directory", encoding="utf-8")

        with patch("music_replacer.cli.setup_logging"):
            result = run("tracks")

        assert result.exit_code == 1
        assert "Failed to open storage directory" in result.output

    def test_show_without_override(self, run):
        result = run("show", "Harmony")
        assert result.exit_code == 1
        assert "No override for 'Harmony'" in result.output


class TestSetCommand:
    """Test creating overrides"""

    def test_set_file_then_show(self, run, sample_wav):
        result = run("set", "Harmony", "--file", str(sample_wav))
        assert result.exit_code == 0, result.output
        assert "Overrode 'Harmony'" in result.output

        result = run("show", "Harmony")
        assert result.exit_code == 0
        assert "Source: local file" in result.output
        assert "Duration: 0:02" in result.output

        result = run("tracks", "--overridden")
        assert result.output.splitlines() == ["Harmony"]

    def test_set_file_failed_copy_of_same_source(self, run, sample_wav):
        assert run("set", "Harmony", "--file", str(sample_wav)).exit_code == 0

        with patch("music_replacer.download.transfer.shutil.copyfile", side_effect=OSError("disk full")):
            result = run("set", "Harmony", "--file", str(sample_wav))

        assert result.exit_code == 1
        assert "Failed to override 'Harmony'" in result.output

    def test_set_unknown_track(self, run, sample_wav):
        result = run("set", "harmony", "--file", str(sample_wav))
        assert result.exit_code == 1
        assert "Did you mean: 'Harmony'" in result.output

    def test_set_not_wav(self, run, temp_dir):
        source = temp_dir / "song.mp3"
        source.write_bytes(b"ID3")

        result = run("set", "Harmony", "--file", str(source))
        assert result.exit_code == 1
        assert "only .wav files" in result.output

    def test_set_needs_exactly_one_source(self, run, sample_wav):
        assert run("set", "Harmony").exit_code == 2
        assert run("set", "Harmony", "--file", str(sample_wav), "--youtube", WATCH_URL).exit_code == 2

    def test_set_youtube(self, run):
        item = StreamItem(WATCH_URL, "Harmony (Orchestral)", 213, "Some Channel", "")
        stream = AudioStream("https://rr1.googlevideo.com/videoplayback", "140", "m4a", 129.5)

        with patch("music_replacer.cli.lookup_stream_item", return_value=item), \
                patch("music_replacer.tracks.tracks.resolve_audio_stream", return_value=stream), \
                patch("music_replacer.cli.WavConverter") as converter_cls:
            converter = converter_cls.return_value
            converter.convert.return_value = "https://bucket.example.com/abc.wav"
            converter.fetch.side_effect = lambda url, path: write_wav(path)

            result = run("set", "Harmony", "--youtube", WATCH_URL)

        assert result.exit_code == 0, result.output
        converter.convert.assert_called_once_with(WATCH_URL, stream.url)
        converter.close.assert_called_once()

        result = run("show", "Harmony")
        assert "Source: YouTube" in result.output
        assert "Name: Harmony (Orchestral)" in result.output
        assert "Duration: 3:33" in result.output

    def test_set_youtube_failure(self, run):
        item = StreamItem(WATCH_URL, "Harmony (Orchestral)", 213)

        with patch("music_replacer.cli.lookup_stream_item", return_value=item), \
                patch("music_replacer.tracks.tracks.resolve_audio_stream", return_value=None):
            result = run("set", "Harmony", "--youtube", WATCH_URL)

        assert result.exit_code == 1
        assert "Failed to override 'Harmony'" in result.output


class TestBulkAndRemove:
    """Test bulk import and removal"""

    def test_bulk_then_remove(self, run, temp_dir):
        remixes = temp_dir / "remixes"
        remixes.mkdir()
        write_wav(remixes / "Harmony.wav")
        write_wav(remixes / "Autumn Voyage.wav")
        write_wav(remixes / "Not A Track.wav")

        result = run("bulk", str(remixes))
        assert result.exit_code == 0, result.output
        assert "Overrode 2 tracks" in result.output

        result = run("remove", "Harmony")
        assert result.exit_code == 0
        assert "Removed 1 override(s)" in result.output

        result = run("remove", "Harmony")
        assert result.exit_code == 1

        result = run("remove", "--all")
        assert "Removed 1 override(s)" in result.output
        assert run("tracks", "--overridden").output == ""

    def test_remove_needs_name_or_all(self, run):
        assert run("remove").exit_code == 2
        assert run("remove", "Harmony", "--all").exit_code == 2


class TestSearchCommand:
    """Test YouTube search output"""

    def test_search(self, run):
        results = [StreamItem(WATCH_URL, "Harmony (Orchestral)", 213, "Some Channel")]

        with patch("music_replacer.cli.youtube_search", return_value=results) as search:
            result = run("search", "osrs harmony")

        assert result.exit_code == 0
        search.assert_called_once_with("osrs harmony", limit=10, cookie_file=None)
        assert "1. Harmony (Orchestral) (3:33) - Some Channel" in result.output
        assert WATCH_URL in result.output

    def test_search_no_results(self, run):
        with patch("music_replacer.cli.youtube_search", return_value=[]):
            result = run("search", "nothing")
        assert "No results" in result.output
