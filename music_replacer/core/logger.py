"""
Logging configuration for music-replacer.

This module sets up the logging system with multiple outputs:
    - Console: colored, written through tqdm so progress bars stay intact
    - log_full_<timestamp>.log: Complete log of all events (DEBUG and above)
    - log_errors_<timestamp>.log: Only ERROR and CRITICAL level messages
    - override_failures_<timestamp>.log: Overrides that could not be created

Usage:
    from music_replacer.core.logger import setup_logging, get_logger

    setup_logging(log_dir)  # Call once at startup
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Creating override")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that adds colors to console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        return f"{color}{record.levelname}{Colors.RESET}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to the console without breaking tqdm
    progress bars.

    Uses tqdm.write() which coordinates with any active progress bar,
    so messages appear above it.
    """

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class OverrideFailureHandler(logging.Handler):
    """
    Handler that captures failed overrides for the failures report.

    Records are written in a simple, human-readable format:

        Harmony
        https://www.youtube.com/watch?v=xxxxx
        Conversion endpoint returned 502: Bad Gateway

    Only records carrying the 'override_failed_track_name' extra field are
    written; everything else is ignored. Use log_override_failure() to
    emit such records.

    Attributes:
        report_path: Path to the override_failures.log file.
        report_file: Open file handle (opened by open()).
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """
        Open the report file for writing.

        File is opened in write mode (overwrites existing content).
        """
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        """
        Write failed override info to the report if present in the record.

        Thread Safety:
            Called with the handler lock held by logging.Handler.handle(),
            so writes from pool threads don't interleave.
        """
        if not hasattr(record, "override_failed_track_name"):
            return

        if self.report_file is None:
            return

        try:
            track_name = getattr(record, "override_failed_track_name", "Unknown")
            source = getattr(record, "override_failed_source", "")
            reason = getattr(record, "override_failed_reason", "")

            self.report_file.write(f"{track_name}\n")
            self.report_file.write(f"{source}\n")
            self.report_file.write(f"{reason}\n\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """
        Close the report file handle.

        Safe to call multiple times.
        """
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """
    Filter that only allows ERROR and CRITICAL level records.

    Used by the error log file handler to exclude DEBUG, INFO, and WARNING.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Path, verbose: bool = False) -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before any other operations.

    Args:
        log_dir: Directory where log files will be created.
                 Created if it doesn't exist.
        verbose: Show DEBUG messages on the console too.

    Behavior:
        1. Create log_dir if it doesn't exist
        2. Configure root logger level to DEBUG
        3. Console handler (TqdmLoggingHandler), INFO or DEBUG
        4. Full log file handler, DEBUG
        5. Error-only log file handler
        6. Override failures report handler

    Thread Safety:
        This function is NOT thread-safe. Call it once from the main
        thread before starting the task pool.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    full_handler = logging.FileHandler(
        log_dir / f"log_full_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(
        log_dir / f"log_errors_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    failures_handler = OverrideFailureHandler(log_dir / f"override_failures_{timestamp}.log")
    failures_handler.open()
    root_logger.addHandler(failures_handler)

    # yt-dlp and urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Note:
        Loggers obtained before setup_logging() is called have no handlers
        of their own and rely on whatever the root logger has.
    """
    return logging.getLogger(name)


def log_override_failure(
    logger: logging.Logger,
    track_name: str,
    source: str,
    error_message: str,
    exc_info: BaseException | None = None
) -> None:
    """
    Log an override that could not be created.

    Logs a WARNING with the correct extra fields for the
    OverrideFailureHandler to pick up.

    Args:
        logger: The logger to use for the message.
        track_name: The track the override was for.
        source: Local path or URL the audio was supposed to come from.
        error_message: Description of why the override failed.
        exc_info: Optional exception, its traceback goes to the full log.

    Example:
        log_override_failure(
            logger,
            track_name="Harmony",
            source="https://www.youtube.com/watch?v=xxx",
            error_message="No m4a audio stream available"
        )
    """
    logger.warning(
        f"Override failed: {track_name} - {error_message}",
        exc_info=exc_info,
        extra={
            "override_failed_track_name": track_name,
            "override_failed_source": source,
            "override_failed_reason": error_message,
        }
    )


def shutdown_logging() -> None:
    """
    Properly shut down the logging system.

    Flushes and closes every root handler, then removes them.
    Typically called in a finally block.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except OSError:
            pass
        root_logger.removeHandler(handler)
