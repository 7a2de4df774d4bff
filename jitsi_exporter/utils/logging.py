# =============================================
# File: jitsi_exporter/utils/logging.py
# Purpose: Logging configuration (loguru sinks for operator-facing messages)
# =============================================
from __future__ import annotations
import sys
from typing import Optional

from loguru import logger

from . import slog


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    level = (level or "INFO").upper()
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(log_file, level=level, rotation="10 MB")
    slog.set_level(level)
