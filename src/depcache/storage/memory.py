"""In-process storage tier.

``MemoryStorage`` keeps items in a plain dict. There is no persistence,
eviction or size limit; it is the default tier of a ``Cache`` and the
reference behavior for other backends.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from depcache.storage.base import storage_has_valid
from depcache.utils.files import mtime

if TYPE_CHECKING:
    from depcache.core.models import Item
    from depcache.shared.protocols import MtimeLookup

logger = logging.getLogger(__name__)


class MemoryStorage:
    """Storage tier backed by a process-local dictionary.

    The coroutine methods never suspend on I/O; they are coroutines so the
    class satisfies the same protocol as backends that do.

    Args:
        mtime_lookup: Timestamp lookup used by :meth:`has_valid` when the
            caller does not pass one.
    """

    def __init__(self, mtime_lookup: MtimeLookup = mtime) -> None:
        self._items: dict[str, Item] = {}
        self.mtime_lookup = mtime_lookup

    async def get(self, key: str) -> Item | None:
        """Return the item under ``key`` or None."""
        return self._items.get(key)

    async def set(self, key: str, item: Item) -> MemoryStorage:
        """Store ``item`` under ``key``, replacing any previous item."""
        self._items[key] = item
        logger.debug("Stored item under key %s", key)
        return self

    async def has_valid(self, key: str, mtime_lookup: MtimeLookup | None = None) -> bool:
        """Return True if an item exists under ``key`` and is still valid."""
        if mtime_lookup is None:
            mtime_lookup = self.mtime_lookup
        return await storage_has_valid(self, key, mtime_lookup)

    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if it was present."""
        return self._items.pop(key, None) is not None

    def clear(self) -> None:
        self._items.clear()

    def keys(self) -> Iterator[str]:
        return iter(list(self._items))

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"MemoryStorage(items={len(self._items)})"
