"""Generic helpers shared by storage backends."""

from __future__ import annotations

from typing import TYPE_CHECKING

from depcache.utils.files import mtime

if TYPE_CHECKING:
    from depcache.shared.protocols import MtimeLookup, StorageProtocol


async def storage_has_valid(
    storage: StorageProtocol,
    key: str,
    mtime_lookup: MtimeLookup = mtime,
) -> bool:
    """Default ``has_valid``: fetch the item, then check its dependencies.

    Dependencies are checked with ``mtime_lookup`` so a tier agrees with a
    ``Cache`` built around the same lookup. Backends with a cheaper way to
    answer (e.g. a metadata probe before a full fetch) implement
    ``has_valid`` themselves instead.
    """
    item = await storage.get(key)
    return item is not None and await item.is_valid(mtime_lookup)
