"""Logging setup for the transcript refiner.

One named logger, stderr output, and an optional rotating log file.
"""

import logging
import sys
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

logger = logging.getLogger("transcript_refiner")

_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def new_run_id() -> str:
    """Short id used to correlate the log lines of one pipeline run."""
    return uuid.uuid4().hex[:8]


def preview(text: str, limit: int = 60) -> str:
    flat = " ".join(text.split())
    if len(flat) <= limit:
        return repr(flat)
    return repr(flat[:limit] + "...")


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Configures the application logger once; later calls only adjust the level."""
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if logger.handlers:
        return logger

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(logging.Formatter(_FORMAT, "%H:%M:%S"))
    logger.addHandler(stderr_handler)

    if log_file:
        path = Path(log_file).expanduser()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                path, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
            )
        except OSError as e:
            # Logging must not block the server from starting
            logger.warning(f"Log file {path} not writable: {e}")
        else:
            file_handler.setFormatter(logging.Formatter(_FORMAT))
            logger.addHandler(file_handler)

    return logger
