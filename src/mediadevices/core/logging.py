"""Logging configuration for applications using mediadevices.

The library only creates module loggers; nothing is configured on import.
Applications call setup_logging() once to get the standard format on stdout
and, optionally, in a log file.
"""

import logging
import sys
import time
from pathlib import Path
from typing import Optional

from mediadevices.core.settings.manager import SettingsManager

LOG_FORMAT = "%(asctime)s [%(threadName)-15s] %(levelname)-5s %(filename)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class MillisecondFormatter(logging.Formatter):
    """Custom formatter that includes milliseconds in timestamps.

    This formatter extends logging.Formatter to include milliseconds
    in the timestamp, even when a custom datefmt is specified.
    """

    def formatTime(self, record, datefmt=None):
        """Format the time with milliseconds.

        Args:
            record: LogRecord instance
            datefmt: Optional strftime format for the date part

        Returns:
            Formatted timestamp string with milliseconds
        """
        ct = self.converter(record.created)
        s = time.strftime(datefmt or DATE_FORMAT, ct)
        return f"{s}.{int(record.msecs):03d}"


def setup_logging(log_level: Optional[str] = None, log_file: Optional[Path] = None) -> None:
    """Configure application-wide logging.

    Log format: YYYY-MM-DD HH:MM:SS.mmm [ThreadName     ] LEVEL  filename.py:line - message

    Args:
        log_level: Logging level for stdout (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            If None, the log_level of the saved settings is used.
        log_file: Optional path to a log file receiving every record at DEBUG
    """
    if log_level is None:
        log_level = SettingsManager().load_settings().log_level
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = MillisecondFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = []

    if log_file is not None:
        try:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
        except (OSError, PermissionError) as e:
            print(f"Warning: Could not create log file {log_file}: {e}", file=sys.stderr)
            log_file = None

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(numeric_level)
    stream_handler.setFormatter(formatter)
    handlers.append(stream_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.DEBUG)
    for handler in handlers:
        root_logger.addHandler(handler)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized at level {log_level}")
    if log_file:
        logger.info(f"Log file: {log_file.absolute()}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
