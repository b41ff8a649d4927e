"""
Logging setup shared by the stores.

Modules log through ``logging.getLogger(__name__)``; applications call
``configure_logging`` once at startup.
"""

from __future__ import annotations

import logging

from .config import get_settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(funcName)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> None:
    """Install the root handler using LOG_LEVEL unless a level is given."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        force=True,
    )
