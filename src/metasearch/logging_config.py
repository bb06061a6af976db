"""Logging configuration for the application."""

import logging
import os
import sys
from typing import Optional


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for CLI and server entry points.

    Args:
        level: Level name; defaults to ``$LOG_LEVEL`` or INFO
    """
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_level_int = getattr(logging, log_level, logging.INFO)

    logging.basicConfig(
        level=log_level_int,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
