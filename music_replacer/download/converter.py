"""
Client for the remote WAV conversion endpoint.

The host client only plays WAV, YouTube only serves m4a/webm. The
conversion endpoint bridges the two: it takes the direct download URL of
an m4a stream (plus the video's watch URL, used as cache key on the
server) and answers with a plain-text URL of the converted WAV file.

    GET <endpoint>?originUrl=<watch url>&dlUrl=<direct download url>
    200 OK
    https://bucket.example.com/converted/abc123.wav

Usage:
    converter = WavConverter(endpoint, read_timeout=60)
    wav_url = converter.convert(origin_url, download_url)
    converter.fetch(wav_url, destination)
"""

import threading
from pathlib import Path

import requests

from music_replacer.core.exceptions import ConversionError, TransferError
from music_replacer.core.logger import get_logger

logger = get_logger(__name__)


# Chunk size for streaming converted files to disk
CHUNK_SIZE = 64 * 1024


class WavConverter:
    """
    Wraps a requests.Session talking to the conversion endpoint.

    Attributes:
        endpoint: Conversion endpoint URL.
        read_timeout: Seconds to wait for the response. Conversion happens
                      while the request is open, so this is generous.
        connect_timeout: Seconds to wait for the TCP connection.

    Thread Safety:
        requests.Session isn't guaranteed thread-safe, so each pool thread
        gets its own session on first use. A session passed to __init__
        is used by every thread as is.
    """

    def __init__(
        self,
        endpoint: str,
        read_timeout: float = 60.0,
        connect_timeout: float = 10.0,
        session: requests.Session | None = None
    ) -> None:
        self.endpoint = endpoint
        self.read_timeout = read_timeout
        self.connect_timeout = connect_timeout
        self._shared_session = session
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._sessions_lock = threading.Lock()

    @property
    def _session(self) -> requests.Session:
        if self._shared_session is not None:
            return self._shared_session

        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    @property
    def _timeout(self) -> tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)

    def convert(self, origin_url: str, download_url: str) -> str:
        """
        Ask the endpoint to convert a stream to WAV.

        Args:
            origin_url: Watch URL of the video.
            download_url: Direct download URL of the audio stream.

        Returns:
            URL of the converted WAV file.

        Raises:
            ConversionError: On connection failures, non-2xx responses
                             or an empty response body.
        """
        try:
            response = self._session.get(
                self.endpoint,
                params={"originUrl": origin_url, "dlUrl": download_url},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise ConversionError(
                f"Conversion request failed: {e}",
                details={"url": origin_url, "original_error": str(e)}
            ) from e

        with response:
            if not response.ok:
                raise ConversionError(
                    f"Conversion endpoint returned {response.status_code}: "
                    f"{response.reason} {response.text}".rstrip(),
                    details={"url": origin_url, "status_code": response.status_code},
                    status_code=response.status_code
                )

            wav_url = response.text.strip()

        if not wav_url:
            raise ConversionError(
                "Conversion endpoint returned an empty body",
                details={"url": origin_url}
            )

        logger.debug(f"Converted {origin_url} -> {wav_url}")
        return wav_url

    def fetch(self, url: str, destination: Path) -> None:
        """
        Stream url into destination, overwriting it.

        Raises:
            TransferError: On HTTP or I/O failures. destination may be
                           partially written; callers write to a temp file.
        """
        try:
            with self._session.get(url, stream=True, timeout=self._timeout) as response:
                response.raise_for_status()
                with open(destination, "wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except (requests.RequestException, OSError) as e:
            raise TransferError(
                f"Failed to download converted file: {e}",
                details={"url": url, "original_error": str(e)}
            ) from e

    def close(self) -> None:
        """Close every session this converter opened, or the one it was given."""
        if self._shared_session is not None:
            self._shared_session.close()
            return

        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
