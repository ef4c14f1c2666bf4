"""Central logging configuration."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
import sys
from pathlib import Path

LOG_DIR = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "pastechat" / "logs"
LOG_FILE = LOG_DIR / "pastechat.log"


def configure_logging(level: int = logging.INFO) -> None:
    """Configure console logging and, when the log directory is writable, a rotating file."""

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if root_logger.handlers:
        return

    root_logger.addHandler(console_handler)
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(LOG_FILE, maxBytes=512_000, backupCount=5)
    except OSError:
        root_logger.warning("Log directory %s is not writable; logging to console only", LOG_DIR)
        return
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Return a module-level logger with standard configuration."""

    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        configure_logging()
    return logger
