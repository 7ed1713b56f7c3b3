"""Logging configuration helpers for the quiz application."""

from __future__ import annotations

import logging
import os
from logging import Logger

LOG_LEVEL_ENV = "KHOJNEY_LOG_LEVEL"


def configure_logging(level: str | None = None) -> Logger:
    """Configure basic logging for the application and return its logger.

    The level defaults to ``KHOJNEY_LOG_LEVEL`` from the environment, then INFO.
    """
    level_name = (level or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("khojney")
