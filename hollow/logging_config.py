"""Logging setup.

The editor owns the whole terminal while it runs, so records go to a
rotating file in the user's log directory and never to the console.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
import tempfile
from pathlib import Path
from typing import Optional

import platformdirs

LOG_FILENAME = "hollow.log"

logger = logging.getLogger("hollow")


def default_log_dir() -> Path:
    return Path(platformdirs.user_log_dir("hollow"))


def setup_logging(level: str = "INFO", log_dir: Optional[Path] = None) -> Path:
    """Attach a rotating file handler to the ``hollow`` logger.

    Existing handlers are replaced, so calling this again (e.g. in tests)
    does not duplicate records. Falls back to the system temp directory
    when the log directory cannot be created. Returns the log file path.
    """
    log_dir = log_dir or default_log_dir()
    try:
        os.makedirs(log_dir, exist_ok=True)
        log_path = Path(log_dir) / LOG_FILENAME
    except OSError as e:
        print(f"Error creating log directory '{log_dir}': {e}", file=sys.stderr)
        log_path = Path(tempfile.gettempdir()) / LOG_FILENAME

    handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=1024 * 1024, backupCount=3, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-20s - %(message)s"
    ))

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False
    return log_path
