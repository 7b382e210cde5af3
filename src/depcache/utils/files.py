"""File system helpers.

Provides the default modification-time lookup used to snapshot and
re-check cache dependencies.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import TYPE_CHECKING

from depcache.shared.errors import (
    create_file_access_error,
    create_file_not_found_error,
    create_permission_denied_error,
)

if TYPE_CHECKING:
    from os import PathLike


async def mtime(path: str | PathLike[str]) -> int:
    """Return the modification time of ``path`` in nanoseconds.

    The ``stat`` call runs in a worker thread so the event loop is not
    blocked.

    Args:
        path: File to inspect.

    Returns:
        ``st_mtime_ns`` of the file.

    Raises:
        InfrastructureError: FILE_NOT_FOUND when the path does not exist,
            PERMISSION_DENIED when it cannot be inspected, FILE_ACCESS_ERROR
            for any other OS error. The OS error is chained.
    """
    file_path = os.fspath(path)
    try:
        stat_result = await asyncio.to_thread(Path(file_path).stat)
    except FileNotFoundError as e:
        raise create_file_not_found_error(file_path, "mtime", e) from e
    except PermissionError as e:
        raise create_permission_denied_error(file_path, "mtime", e) from e
    except OSError as e:
        raise create_file_access_error(file_path, "mtime", e) from e
    return stat_result.st_mtime_ns


__all__ = ["mtime"]
