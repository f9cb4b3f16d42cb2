"""Test configuration loading"""

import pytest
import yaml

from music_replacer.core.config import (
    DEFAULT_CONVERSION_ENDPOINT,
    DEFAULT_READ_TIMEOUT,
    load_config,
)
from music_replacer.core.exceptions import ConfigError


def _write_config(path, data):
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f)
    return path


class TestLoadConfig:
    """Test config.yaml parsing and validation"""

    def test_defaults(self, config_file, temp_dir):
        config = load_config(config_file)

        storage_dir = (temp_dir / "storage").resolve()
        assert config.storage.directory == storage_dir
        assert config.storage.overrides_directory == storage_dir / "music-replacer"
        assert config.storage.store_path == storage_dir / "music-replacer.db"
        assert config.tracks.file == (temp_dir / "tracks.txt").resolve()
        assert config.conversion.endpoint == DEFAULT_CONVERSION_ENDPOINT
        assert config.conversion.read_timeout == DEFAULT_READ_TIMEOUT
        assert config.executor.threads == 2
        assert config.youtube.cookie_file is None
        assert config.youtube.search_limit == 10

    def test_all_sections(self, temp_dir):
        tracks_file = temp_dir / "tracks.txt"
        tracks_file.write_text("Harmony\n", encoding="utf-8")
        cookies = temp_dir / "cookies.txt"
        cookies.write_text("# Netscape HTTP Cookie File\n", encoding="utf-8")

        config = load_config(_write_config(temp_dir / "config.yaml", {
            "storage": {"directory": str(temp_dir)},
            "tracks": {"file": str(tracks_file)},
            "conversion": {"endpoint": "http://localhost:8080/convert", "read_timeout": 5},
            "youtube": {"cookie_file": str(cookies), "search_limit": 3},
        }))

        assert config.conversion.endpoint == "http://localhost:8080/convert"
        assert config.conversion.read_timeout == 5.0
        assert config.youtube.cookie_file == cookies.resolve()
        assert config.youtube.search_limit == 3

    def test_file_not_found(self, temp_dir):
        with pytest.raises(ConfigError, match="not found"):
            load_config(temp_dir / "missing.yaml")

    def test_invalid_yaml(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("storage: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_missing_section(self, temp_dir):
        path = _write_config(temp_dir / "config.yaml", {"storage": {"directory": str(temp_dir)}})
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.details == {"missing_section": "tracks"}

    def test_missing_tracks_file(self, temp_dir):
        path = _write_config(temp_dir / "config.yaml", {
            "storage": {"directory": str(temp_dir)},
            "tracks": {"file": str(temp_dir / "nope.txt")},
        })
        with pytest.raises(ConfigError, match="Track list file not found"):
            load_config(path)

    @pytest.mark.parametrize("section, value", [
        ({"executor": {"threads": 0}}, "threads"),
        ({"executor": {"threads": True}}, "threads"),
        ({"conversion": {"read_timeout": -1}}, "read_timeout"),
        ({"conversion": {"endpoint": "ftp://example.com"}}, "conversion.endpoint"),
        ({"youtube": {"cookie_file": "/does/not/exist.txt"}}, "Cookie file"),
        ({"youtube": "yes"}, "youtube"),
    ])
    def test_invalid_values(self, config_file, section, value):
        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        data.update(section)
        _write_config(config_file, data)

        with pytest.raises(ConfigError, match=value):
            load_config(config_file)
