# src/config/logging_config.py

"""Logging set-up for perfume_compare.

Every launch writes to its own ``logs/run_<timestamp>.log`` file.  The
``perfume_compare`` logger owns two handlers: a DEBUG file handler that
records each aggregation cycle in full (degraded rates, failed sources,
skipped items) and a stderr handler that only surfaces warnings, so the
CLI's JSON output on stdout stays clean.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

ROOT_LOGGER_NAME = "perfume_compare"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_level() -> int:
    """Console threshold, overridable through ``PERFUME_COMPARE_LOG_LEVEL``."""
    name = os.getenv("PERFUME_COMPARE_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Attach the file and console handlers to the project logger.

    Args:
        logs_dir: Directory for the run log; defaults to
            ``Settings.LOGS_DIR``.

    Returns:
        Path of the log file for this run.  Repeated calls reuse the
        handlers that are already attached.
    """
    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / (
        f"run_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    )

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_console_level())
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
    root_logger.info("Logging to %s", log_file)
    return log_file
