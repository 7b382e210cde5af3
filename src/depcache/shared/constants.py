"""
Shared constants for depcache.

Grouped into small namespace classes; values here are defaults that the
configuration models and the cache fall back on.
"""

from __future__ import annotations


class Cache:
    """Cache defaults."""

    KEY_PREFIX = ""
    KEY_HASH_ALGORITHM = "sha256"
    SHORT_CIRCUIT_READS = False
    COALESCE_MISSES = False


class Logging:
    """Logging defaults."""

    ROOT_LOGGER = "depcache"
    DEFAULT_LEVEL = "INFO"
    VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    """Configuration file defaults."""

    ENV_PREFIX = "DEPCACHE_"
    ENV_NESTED_DELIMITER = "__"
    DEFAULT_FILENAME = "depcache.toml"


__all__ = ["Cache", "Config", "Logging"]
