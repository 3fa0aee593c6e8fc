"""
Logging configuration helpers.
"""

from __future__ import annotations

import logging

from rental_pricing.common.settings import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_LOGGING_CONFIGURED = False


def configure_logging(level_name: str | None = None) -> None:
    """Configure process-wide logging once; the level defaults to LOG_LEVEL from settings."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    if level_name is None:
        level_name = get_settings().LOG_LEVEL
    level = getattr(logging, level_name.upper(), logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT)
    _LOGGING_CONFIGURED = True
