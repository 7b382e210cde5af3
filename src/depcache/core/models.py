"""Cached result domain models.

This module defines the entities stored by cache tiers:

- ``Dependency``: one input file of a computation together with the
  modification time it had when the result was produced.
- ``Item``: a cached result, its opaque content plus the dependencies
  whose validity decides whether the content can still be used.
- ``ComputationResult``: what a memoized function returns to the cache.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from depcache.shared.errors import is_file_not_found
from depcache.utils.files import mtime

if TYPE_CHECKING:
    from os import PathLike

    from depcache.shared.protocols import MtimeLookup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dependency:
    """A file a computation read, with the timestamp it had at that moment.

    Attributes:
        path: Path of the file.
        snapshot_time: Modification timestamp captured when the dependency
            was recorded. Compared for exact equality, so any change
            (including a rollback to an older time) invalidates it.
    """

    path: str
    snapshot_time: Any

    @classmethod
    async def snapshot(
        cls,
        path: str | PathLike[str],
        mtime_lookup: MtimeLookup = mtime,
    ) -> Dependency:
        """Record ``path`` with its current modification timestamp.

        Raises:
            Whatever ``mtime_lookup`` raises, including a missing file.
        """
        file_path = os.fspath(path)
        return cls(file_path, await mtime_lookup(file_path))

    async def is_valid(self, mtime_lookup: MtimeLookup = mtime) -> bool:
        """Return True if the file still has its snapshot timestamp.

        A file that no longer exists makes the dependency invalid. Any
        other lookup failure propagates.
        """
        try:
            current = await mtime_lookup(self.path)
        except Exception as e:
            if is_file_not_found(e):
                logger.debug("Dependency missing: %s", self.path)
                return False
            raise
        valid = current == self.snapshot_time
        if not valid:
            logger.debug("Dependency changed: %s", self.path)
        return valid


@dataclass(frozen=True)
class Item:
    """A cached computation result.

    Attributes:
        content: Opaque value produced by the memoized computation.
        dependencies: Ordered dependencies of the computation.
    """

    content: Any
    dependencies: tuple[Dependency, ...] = ()

    def __post_init__(self) -> None:
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    async def is_valid(self, mtime_lookup: MtimeLookup = mtime) -> bool:
        """Return True if every dependency is valid.

        All checks run concurrently and every check completes before the
        result is combined. An item without dependencies is always valid.
        """
        results = await asyncio.gather(
            *(dependency.is_valid(mtime_lookup) for dependency in self.dependencies)
        )
        return all(results)


@runtime_checkable
class ComputationOutput(Protocol):
    """Shape of the value a memoized function must return."""

    @property
    def content(self) -> Any: ...

    @property
    def dependencies(self) -> Sequence[str | PathLike[str]]: ...


@dataclass(frozen=True)
class ComputationResult:
    """Return value of a memoized function.

    Attributes:
        content: The computed value to cache.
        dependencies: Paths of the files the computation read.

    Example:
        >>> async def uppercase(path):
        ...     text = Path(path).read_text()
        ...     return ComputationResult(text.upper(), [path])
    """

    content: Any
    dependencies: Sequence[str | PathLike[str]] = field(default_factory=tuple)


__all__ = ["ComputationOutput", "ComputationResult", "Dependency", "Item"]
