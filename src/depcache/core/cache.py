"""Tiered memoization cache.

``Cache`` memoizes calls to a (usually expensive, file-reading) function.
Each result is stored as an :class:`~depcache.core.models.Item` together
with the modification times of the files the function declared as inputs.
A later call with the same arguments reuses the stored content only while
all of those files are unchanged.

Storage is an ordered list of tiers. Reads walk the tiers in order and use
the first item found; writes go to every tier concurrently.

Known limitations:
    - Concurrent writers to the same key are not serialized; the last write
      wins.
    - Concurrent misses on the same key each run the function unless
      ``CacheSettings.coalesce_misses`` is enabled.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from depcache.config.settings import CacheSettings
from depcache.core.keys import make_cache_key
from depcache.core.models import ComputationOutput, Dependency, Item
from depcache.core.statistics import CacheStatistics
from depcache.shared.errors import (
    DepCacheError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    create_validation_error,
)
from depcache.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)
from depcache.shared.protocols import MtimeLookup, StorageProtocol
from depcache.storage.memory import MemoryStorage
from depcache.utils.files import mtime

logger = logging.getLogger(__name__)

# Returns a ComputationOutput, or an awaitable resolving to one
Computation = Callable[..., Any]


class Cache:
    """Memoization cache over an ordered list of storage tiers.

    Args:
        storages: Storage tiers in lookup order. Defaults to a single new
            MemoryStorage owned by this instance.
        settings: Cache behavior settings. Defaults to ``CacheSettings()``.
        mtime_lookup: Coroutine returning a file's modification timestamp,
            used both to snapshot and to re-check dependencies.

    Raises:
        DomainError: VALIDATION_ERROR if ``storages`` is empty.

    Example:
        >>> async def uppercase(path):
        ...     text = await asyncio.to_thread(Path(path).read_text)
        ...     return ComputationResult(text.upper(), [path])
        >>> cache = Cache()
        >>> await cache.cached(uppercase, "a.txt")
        'HI'
    """

    def __init__(
        self,
        storages: Sequence[StorageProtocol] | None = None,
        settings: CacheSettings | None = None,
        mtime_lookup: MtimeLookup = mtime,
    ) -> None:
        if storages is None:
            storages = [MemoryStorage(mtime_lookup)]
        if len(storages) == 0:
            raise create_validation_error(
                "Cache requires at least one storage tier",
                field="storages",
                operation="cache_init",
            )

        self.storages: list[StorageProtocol] = list(storages)
        self.settings = settings or CacheSettings()
        self.mtime_lookup = mtime_lookup
        self.statistics = CacheStatistics()
        self._in_flight: dict[str, asyncio.Future[Any]] = {}

        logger.debug(
            "Initialized Cache with %d storage tier(s): %s",
            len(self.storages),
            ", ".join(type(storage).__name__ for storage in self.storages),
        )

    async def get(self, key: str) -> Item | None:
        """Return the first item found for ``key`` walking the tiers in order.

        Every tier is queried, in order, even after an earlier tier returned
        an item; only the first item found is kept. With
        ``settings.short_circuit_reads`` the walk stops at the first hit.
        Storage errors propagate; only an absent result moves on to the
        next tier.
        """
        found: Item | None = None
        for index, storage in enumerate(self.storages):
            if found is not None and self.settings.short_circuit_reads:
                break
            item = await storage.get(key)
            if found is None and item is not None:
                logger.debug("Key %s found in storage tier %d", key, index)
                found = item
        return found

    async def set(self, key: str, item: Item) -> Cache:
        """Write ``item`` to every tier concurrently.

        Returns only after every write has finished. If any tier failed,
        the first failure (in tier order) is raised; tiers that succeeded
        keep the new item.
        """
        results = await asyncio.gather(
            *(storage.set(key, item) for storage in self.storages),
            return_exceptions=True,
        )
        failures = [
            (index, result)
            for index, result in enumerate(results)
            if isinstance(result, BaseException)
        ]
        if failures:
            failed_tiers = ", ".join(str(index) for index, _ in failures)
            first_failure = failures[0][1]
            log_operation_error(
                logger,
                InfrastructureError(
                    ErrorCode.CACHE_WRITE_FAILED,
                    f"Write to {len(failures)} of {len(self.storages)} storage tier(s) "
                    f"failed for key {key} (tiers: {failed_tiers})",
                    ErrorContext(
                        operation="set",
                        additional_data={"key": key, "failed_tiers": failed_tiers},
                    ),
                    first_failure,
                ),
            )
            raise first_failure

        self.statistics.writes += 1
        return self

    async def has_valid(self, key: str) -> bool:
        """Return True if an item exists for ``key`` and all its dependencies are unchanged."""
        item = await self.get(key)
        return item is not None and await item.is_valid(self.mtime_lookup)

    async def cached(self, fn: Computation, *args: Any, **kwargs: Any) -> Any:
        """Return ``fn(*args, **kwargs).content``, reusing a stored result when valid.

        The key covers every positional and keyword argument. On a miss
        ``fn`` is called (and awaited if it returns an awaitable); the
        result must expose ``content`` and ``dependencies``. Each dependency
        path is snapshotted with its current timestamp, the new item is
        written to every tier, then read back through :meth:`get`.

        Raises:
            DomainError: CACHE_KEY_ERROR if the arguments cannot be hashed,
                VALIDATION_ERROR if ``fn`` returns something without
                ``content`` and ``dependencies``.
            InfrastructureError: CACHE_READ_FAILED if no tier returns the
                item after it was written.
            Exception: Anything raised by ``fn``, the storage tiers or the
                timestamp lookup (other than a missing dependency file
                during validation) propagates unchanged. A failing ``fn``
                leaves the stored items untouched.
        """
        key = make_cache_key(args, kwargs, prefix=self.settings.key_prefix)

        if not self.settings.coalesce_misses:
            return await self._cached(key, fn, args, kwargs)

        pending = self._in_flight.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._cached(key, fn, args, kwargs))
            self._in_flight[key] = pending
            pending.add_done_callback(functools.partial(self._forget_in_flight, key))
        else:
            logger.debug("Joining in-flight computation for key %s", key)
        return await asyncio.shield(pending)

    async def _cached(
        self,
        key: str,
        fn: Computation,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        if await self.has_valid(key):
            self.statistics.hits += 1
            logger.debug("Cache hit for key %s", key)
        else:
            self.statistics.misses += 1
            logger.debug("Cache miss for key %s", key)
            await self._compute(key, fn, args, kwargs)

        item = await self.get(key)
        if item is None:
            error = InfrastructureError(
                ErrorCode.CACHE_READ_FAILED,
                f"No storage tier returned the item for key {key} after it was written",
                ErrorContext(
                    operation="cached",
                    additional_data={"key": key, "tiers": len(self.storages)},
                ),
            )
            log_operation_error(logger, error)
            raise error
        return item.content

    async def _compute(
        self,
        key: str,
        fn: Computation,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Item:
        name = getattr(fn, "__qualname__", type(fn).__name__)
        context = {"key": key, "function": name}
        log_operation_start(logger, "compute", context)
        start = time.perf_counter()

        try:
            result = fn(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            self._check_result(result, name)
            self.statistics.computations += 1

            dependencies = await asyncio.gather(
                *(Dependency.snapshot(path, self.mtime_lookup) for path in result.dependencies)
            )
        except Exception as e:
            self._log_compute_failure(e, context)
            raise

        item = Item(result.content, tuple(dependencies))
        await self.set(key, item)

        log_operation_success(
            logger,
            "compute",
            duration_ms=(time.perf_counter() - start) * 1000,
            result_info={"dependencies": len(item.dependencies)},
            context=context,
        )
        return item

    @staticmethod
    def _log_compute_failure(error: Exception, context: dict[str, str]) -> None:
        if isinstance(error, DepCacheError):
            log_operation_error(logger, error, "compute", context)
            return
        log_operation_error(
            logger,
            DepCacheError(
                ErrorCode.CACHE_ERROR,
                f"Computation {context['function']} failed: {error}",
                ErrorContext(operation="compute", additional_data=context),
                error,
            ),
        )

    @staticmethod
    def _check_result(result: Any, name: str) -> None:
        if not isinstance(result, ComputationOutput):
            raise create_validation_error(
                f"{name} must return an object with 'content' and 'dependencies', "
                f"got {type(result).__name__}",
                field="result",
                operation="cached",
            )
        if isinstance(result.dependencies, (str, bytes)):
            raise create_validation_error(
                f"{name} returned a single string as dependencies; expected a sequence of paths",
                field="dependencies",
                operation="cached",
            )

    def _forget_in_flight(self, key: str, future: asyncio.Future[Any]) -> None:
        if self._in_flight.get(key) is future:
            del self._in_flight[key]
        # Mark the exception as retrieved; waiters that are still attached get it themselves
        if not future.cancelled():
            future.exception()

    def __repr__(self) -> str:
        tiers = ", ".join(type(storage).__name__ for storage in self.storages)
        return f"Cache(storages=[{tiers}])"


__all__ = ["Cache", "Computation"]
