"""Root logger setup for the webcam browser.

Environment overrides, in order of precedence:
  - ``CAMFINDER_LOG_LEVEL``: level name (``DEBUG``) or number (``10``)
  - ``CAMFINDER_DEBUG``: truthy value forces DEBUG
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"
LEVEL_ENV = "CAMFINDER_LOG_LEVEL"
DEBUG_ENV = "CAMFINDER_DEBUG"
# Per-request chatter from the HTTP client and the web server.
QUIET_LOGGERS = ("urllib3", "nicegui", "uvicorn.access")

_TRUTHY = {"1", "true", "yes", "on"}


def _parse_level(text: Union[str, int, None]) -> Optional[int]:
    if isinstance(text, int):
        return text
    value = (text or "").strip()
    if not value:
        return None
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else None


def _level_from_env() -> Optional[int]:
    explicit = _parse_level(os.getenv(LEVEL_ENV))
    if explicit is not None:
        return explicit
    if (os.getenv(DEBUG_ENV) or "").strip().lower() in _TRUTHY:
        return logging.DEBUG
    return None


def configure_root(default_level: Union[int, str] = logging.INFO) -> int:
    """Install the compact root handler once and return the effective level."""
    level = _level_from_env()
    if level is None:
        level = _parse_level(default_level) or logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    root.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
    return level


def apply_debug_preference(debug_enabled: bool) -> int:
    """Switch between DEBUG and INFO unless the environment pins a level."""
    level = _level_from_env()
    if level is None:
        level = logging.DEBUG if debug_enabled else logging.INFO
    logging.getLogger().setLevel(level)
    return level


def env_debug() -> bool:
    level = _level_from_env()
    return level is not None and level <= logging.DEBUG
