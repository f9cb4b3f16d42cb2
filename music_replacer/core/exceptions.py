"""
Exception classes for music-replacer.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message and an optional dictionary
of details for logging.

Exception Hierarchy:
    MusicReplacerError (base)
        ConfigError - Configuration file issues
        StoreError - Configuration store / overrides directory issues
        YouTubeError - Stream lookup and search issues
        ConversionError - Remote WAV conversion issues
        TransferError - Copying audio into the overrides directory
"""


class MusicReplacerError(Exception):
    """
    Base exception for all music-replacer errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., track name, URLs).

    Example:
        try:
            # some operation
        except MusicReplacerError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'track_name': Track the operation was about
                     - 'url': URL that caused the error
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(MusicReplacerError):
    """
    Raised when there's an issue with the configuration file.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - config.yaml not found
        - config.yaml has invalid YAML syntax
        - Required sections missing (storage, tracks)
        - Invalid field values (e.g., negative thread count)
    """
    pass


class StoreError(MusicReplacerError):
    """
    Raised when the configuration store or the overrides directory
    cannot be used.

    This is a CRITICAL error: without the store no override can be
    read or committed.

    Common causes:
        - Store file is not a valid SQLite database
        - Permission denied when creating the overrides directory
        - Disk full
    """
    pass


class YouTubeError(MusicReplacerError):
    """
    Raised when yt-dlp cannot look up, search or extract a video.

    This is a NON-CRITICAL error: the override being created is dropped,
    everything else continues.

    Example:
        raise YouTubeError(
            "Failed to extract video info",
            details={'url': 'https://www.youtube.com/watch?v=xxx'}
        )
    """
    pass


class ConversionError(MusicReplacerError):
    """
    Raised when the conversion endpoint does not hand back a WAV URL.

    Attributes:
        status_code: HTTP status code of the failed response, if any.
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        status_code: int | None = None
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class TransferError(MusicReplacerError):
    """
    Raised when audio cannot be copied or streamed into the overrides
    directory.

    The destination file is left as it was before the transfer started.
    """
    pass
