#!/usr/bin/env python3
# log_config.py – rev-g2  (2026-10-18)
"""Configure loguru: stderr at *level*, rotating debug log in the config folder."""

from __future__ import annotations
import sys
from pathlib import Path

from loguru import logger

import storage

LOG_FILE = storage.CFG_DIR / "playdeck.log"

FILE_FORMAT    = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"
CONSOLE_FORMAT = "<level>{level}</level>: {message}"


def setup_logging(level: str = "INFO", log_file: Path | None = LOG_FILE,
                  rotation: str = "10 MB", retention: int = 5) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=CONSOLE_FORMAT)
    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            logger.add(log_file, level="DEBUG", format=FILE_FORMAT,
                       rotation=rotation, retention=retention, encoding="utf-8")
        except OSError as e:
            logger.warning("file logging disabled ({}): {}", log_file, e)
            log_file = None
    logger.info("logging started; file: {}", log_file or "(none)")
