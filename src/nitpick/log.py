"""Logging setup.

The terminal belongs to the UI while it runs, so records go to a file.
"""

import logging
from pathlib import Path
from typing import Optional

from nitpick.config import NitpickConfig


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_log_path() -> Path:
    return NitpickConfig.get_config_dir() / "nitpick.log"


def configure_logging(level: str = "WARNING", path: Optional[Path] = None) -> Path:
    """Send ``nitpick`` log records at ``level`` and above to a file.

    Returns:
        Path of the log file
    """
    path = path or get_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("nitpick")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    logger.propagate = False
    return path
