"""
Configures logging for the fnorm package.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under ``fnorm``."""
    return logging.getLogger(f"fnorm.{name}")


def setup_logging(level: int = logging.WARNING, log_file: Optional[Path] = None) -> logging.Logger:
    """
    Attach a stderr handler (and optionally a rotating file handler) to the
    ``fnorm`` logger. Handlers already in place are not added twice.
    """
    root_logger = logging.getLogger("fnorm")
    root_logger.setLevel(level)

    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if not any(type(h) is logging.StreamHandler for h in root_logger.handlers):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file is not None and not any(isinstance(h, RotatingFileHandler) for h in root_logger.handlers):
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger
