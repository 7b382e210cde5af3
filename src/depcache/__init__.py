"""
depcache - file-dependency-aware memoization cache

Memoizes expensive computations keyed by their arguments and drops stored
results as soon as any file the computation read changes on disk.
"""

__version__ = "0.1.0"

from .config import CacheSettings, Settings, load_settings
from .core import Cache, ComputationResult, Dependency, Item, make_cache_key
from .shared.errors import (
    ApplicationError,
    DepCacheError,
    DomainError,
    ErrorCode,
    InfrastructureError,
)
from .shared.protocols import StorageProtocol
from .storage import MemoryStorage

__all__ = [
    "ApplicationError",
    "Cache",
    "CacheSettings",
    "ComputationResult",
    "DepCacheError",
    "Dependency",
    "DomainError",
    "ErrorCode",
    "InfrastructureError",
    "Item",
    "MemoryStorage",
    "Settings",
    "StorageProtocol",
    "load_settings",
    "make_cache_key",
]
