# listing_search/config/logging_config.py

"""Per-session timestamped logging for listing_search.

Every CLI invocation writes to its own file in ``logs/`` named after the
start time (e.g. ``logs/search_20261018_101500.log``).  The cascade
stages of each reconciliation, catalog requests, cache hits and
discarded stale responses all land in that file at DEBUG level, while
only warnings and errors reach the terminal.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from listing_search.config.settings import Settings

ROOT_LOGGER_NAME = "listing_search"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(console_level: int = logging.WARNING) -> Path:
    """Attach the file and console handlers to the project logger.

    Args:
        console_level: Minimum level echoed to stderr (``--verbose``
            lowers it to INFO).

    Returns:
        The :class:`~pathlib.Path` of this session's log file.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"search_{stamp}.log"

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, embedding) keep the first configuration
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging to %s", log_file)
    return log_file
