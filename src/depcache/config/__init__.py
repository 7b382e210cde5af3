"""depcache configuration.

Usage:
    from depcache.config import load_settings

    settings = load_settings("depcache.toml")
    cache = Cache(settings=settings.cache)
"""

from __future__ import annotations

from .loader import load_settings
from .settings import CacheSettings, LoggingSettings, Settings

__all__ = [
    "CacheSettings",
    "LoggingSettings",
    "Settings",
    "load_settings",
]
