"""
Data model for track overrides.

A TrackOverride is stored as a JSON object in one configuration value:

    {
        "name": "Harmony",
        "original_path": "https://rr3---sn-xxx.googlevideo.com/videoplayback?...",
        "from_local": false,
        "additional_info": {
            "Url": "https://www.youtube.com/watch?v=xxx",
            "Name": "Harmony (Orchestral)",
            "Duration": "3:33",
            "Uploader": "Some Channel",
            "Uploader url": "https://www.youtube.com/@somechannel"
        }
    }

Duration is stored as "M:SS" (or "H:MM:SS"), see utils.format_duration.
Records written by other clients may carry ISO-8601 durations such as
"PT3M33S" instead; both are kept as opaque display strings.
"""

import json
from dataclasses import asdict, dataclass, field
from typing import Any


# Keys of additional_info
INFO_URL = "Url"
INFO_NAME = "Name"
INFO_DURATION = "Duration"
INFO_UPLOADER = "Uploader"
INFO_UPLOADER_URL = "Uploader url"
INFO_FILE = "File"


@dataclass(frozen=True)
class TrackOverride:
    """
    A replacement for one game track.

    Attributes:
        name: Track being replaced, exactly as the host names it.
        original_path: Where the audio came from: a local file path when
                       from_local, otherwise the direct download URL of the
                       converted stream.
        from_local: True for a user-supplied file, False for a stream
                    converted by the conversion endpoint.
        additional_info: Descriptive metadata shown to the user.

    Invariant:
        Only valid while its file in the overrides directory exists;
        Tracks.get_override() deletes records whose file is gone.
    """

    name: str
    original_path: str
    from_local: bool
    additional_info: dict[str, str] = field(default_factory=dict)

    @property
    def origin_url(self) -> str:
        """Watch URL of the source video, or original_path when unknown."""
        return self.additional_info.get(INFO_URL, self.original_path)

    def to_json(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "TrackOverride":
        """
        Deserialize a stored override.

        Raises:
            ValueError: If text isn't a JSON object with a name and
                        original_path (json.JSONDecodeError is a ValueError).
        """
        data: Any = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

        name = data.get("name")
        original_path = data.get("original_path")
        if not isinstance(name, str) or not isinstance(original_path, str):
            raise ValueError("Override record lacks name or original_path")

        info = data.get("additional_info") or {}
        if not isinstance(info, dict):
            raise ValueError("additional_info must be a JSON object")
        return cls(
            name=name,
            original_path=original_path,
            from_local=bool(data.get("from_local", False)),
            additional_info={str(k): str(v) for k, v in info.items()},
        )
