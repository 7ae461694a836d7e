"""Logging setup for the hostel API server.

Records from every module go to stdout and to a log file. The level comes from
the LOG_LEVEL environment variable, then from settings.log_level; unknown names
fall back to INFO.
"""

import logging
import os
import sys
from pathlib import Path

from hostel.services.config import settings

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# SQL statements are only logged when database_echo is on
SQL_LOGGER = "sqlalchemy.engine"


def get_log_level() -> int:
    """Resolve the configured level name to a logging constant."""
    level_name = os.getenv("LOG_LEVEL") or settings.log_level
    return LOG_LEVEL_MAP.get(level_name.upper(), logging.INFO)


def setup_server_logging(log_file: str | None = None) -> None:
    """
    Configure the root logger for the API server.

    Args:
        log_file: Path to the log file (default: settings.log_file); parent
            directories are created as needed

    Calling it again replaces the previous handlers instead of stacking them.
    """
    log_path = Path(log_file or settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    level = get_log_level()
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    for handler in (logging.StreamHandler(sys.stdout), logging.FileHandler(log_path)):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.getLogger(SQL_LOGGER).setLevel(logging.INFO if settings.database_echo else logging.WARNING)
    logging.getLogger(__name__).debug(f"Logging to stdout and {log_path} at {logging.getLevelName(level)}")
