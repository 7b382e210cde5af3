"""Cache key generation for memoized calls.

A key identifies one computation input: every positional and keyword
argument of the call contributes to it. Arguments are serialized to a
canonical JSON document with orjson (sorted keys) and hashed with SHA-256,
so keys are stable across processes and independent of keyword order.

Example:
    >>> make_cache_key(("src/a.txt",), {"minify": True}) == make_cache_key(
    ...     ("src/a.txt",), {"minify": True}
    ... )
    True
    >>> make_cache_key(("src/a.txt", "x")) == make_cache_key(("src/a.txt", "y"))
    False
"""

from __future__ import annotations

import hashlib
from pathlib import PurePath
from typing import Any

import orjson

from depcache.shared.constants import Cache
from depcache.shared.errors import DomainError, ErrorCode, ErrorContext

_ORJSON_OPTIONS = orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS

_BYTES_TAG = "__bytes__"
_PATH_TAG = "__path__"
_SET_TAG = "__set__"


def _sort_key(value: Any) -> bytes:
    return orjson.dumps(value, default=_default, option=_ORJSON_OPTIONS)


def _default(value: Any) -> Any:
    """Serialize types orjson does not handle natively.

    Each converted value is wrapped in a single-key object naming its type,
    so ``b"ab"`` and ``"6162"``, ``Path("a")`` and ``"a"``, or ``{1, 2}`` and
    ``[1, 2]`` never produce the same document. The marker keys
    ``__bytes__``, ``__path__`` and ``__set__`` are reserved.

    Raises:
        TypeError: For any other type, which orjson reports as an encode error.
    """
    if isinstance(value, PurePath):
        return {_PATH_TAG: value.as_posix()}
    if isinstance(value, (set, frozenset)):
        return {_SET_TAG: sorted(value, key=_sort_key)}
    if isinstance(value, (bytes, bytearray, memoryview)):
        return {_BYTES_TAG: bytes(value).hex()}
    raise TypeError(f"Type is not serializable: {type(value).__name__}")


def canonical_arguments(args: tuple[Any, ...], kwargs: dict[str, Any]) -> bytes:
    """Serialize call arguments to canonical JSON bytes.

    Args:
        args: Positional arguments of the call.
        kwargs: Keyword arguments of the call.

    Returns:
        UTF-8 JSON bytes with sorted object keys.

    Raises:
        DomainError: CACHE_KEY_ERROR if an argument cannot be serialized.
    """
    try:
        return orjson.dumps(
            {"args": list(args), "kwargs": kwargs},
            default=_default,
            option=_ORJSON_OPTIONS,
        )
    except orjson.JSONEncodeError as e:
        context = ErrorContext(
            operation="canonical_arguments",
            additional_data={"arg_count": len(args), "kwarg_count": len(kwargs)},
        )
        raise DomainError(
            ErrorCode.CACHE_KEY_ERROR,
            f"Cannot derive cache key from arguments: {e}",
            context,
            e,
        ) from e


def make_cache_key(
    args: tuple[Any, ...],
    kwargs: dict[str, Any] | None = None,
    prefix: str = Cache.KEY_PREFIX,
) -> str:
    """Generate the cache key for a call with ``args`` and ``kwargs``.

    Args:
        args: Positional arguments of the memoized call.
        kwargs: Keyword arguments of the memoized call.
        prefix: String prepended to the hash, e.g. to namespace keys.

    Returns:
        ``prefix`` followed by 64 hex characters.

    Raises:
        DomainError: CACHE_KEY_ERROR if an argument cannot be serialized.
    """
    payload = canonical_arguments(tuple(args), dict(kwargs or {}))
    digest = hashlib.new(Cache.KEY_HASH_ALGORITHM, payload)
    return f"{prefix}{digest.hexdigest()}"


__all__ = ["canonical_arguments", "make_cache_key"]
