"""Storage tiers for depcache.

Any object satisfying :class:`depcache.shared.protocols.StorageProtocol`
can be used as a tier; ``MemoryStorage`` is the built-in one.
"""

from .base import storage_has_valid
from .memory import MemoryStorage

__all__ = ["MemoryStorage", "storage_has_valid"]
