"""Storage and timestamp-lookup protocols.

The cache depends only on these structural interfaces. Any backend with
matching coroutine methods (memory, disk, remote) can be used as a tier
without inheriting from anything in this package.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from os import PathLike

    from depcache.core.models import Item


@runtime_checkable
class StorageProtocol(Protocol):
    """Protocol for a cache storage tier.

    Example:
        >>> from depcache.storage import MemoryStorage
        >>> storage: StorageProtocol = MemoryStorage()
        >>> await storage.set("key", item)
        >>> await storage.get("key")
    """

    async def get(self, key: str) -> Item | None:
        """Return the Item stored under ``key``, or None when absent.

        A missing key is never an error.
        """

    async def set(self, key: str, item: Item) -> Any:
        """Store ``item`` under ``key``, replacing any previous Item.

        Returns:
            The storage itself, so calls can be chained
        """

    async def has_valid(self, key: str, mtime_lookup: MtimeLookup | None = None) -> bool:
        """Return True if an Item exists under ``key`` and is currently valid.

        Dependencies are checked with ``mtime_lookup`` when given, otherwise
        with the tier's own lookup.
        """


class MtimeLookup(Protocol):
    """Coroutine returning a file's current modification timestamp.

    Must signal a missing path with an error that
    :func:`depcache.shared.errors.is_file_not_found` recognizes. Every other
    failure is propagated by the cache unchanged.
    """

    async def __call__(self, path: str | PathLike[str]) -> Any: ...
