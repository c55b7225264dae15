"""Core utilities shared across :mod:`docnav` packages.

The core namespace provides configuration loading and logging setup so the
page engine and loaders stay free of process-level concerns.

Example:
    >>> from docnav.core import get_logger
    >>> logger = get_logger(__name__)
    >>> isinstance(logger, object)
    True
"""

from __future__ import annotations

from .config import AppConfig, HighlightSettings, RenderSettings, load_config
from .logging import configure_logging, get_logger

__all__ = [
    "AppConfig",
    "HighlightSettings",
    "RenderSettings",
    "configure_logging",
    "get_logger",
    "load_config",
]
