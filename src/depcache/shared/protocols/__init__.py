"""Protocol definitions for dependency inversion.

Core modules use these protocols instead of importing concrete storage
backends.
"""

from __future__ import annotations

from .storage import MtimeLookup, StorageProtocol

__all__ = ["MtimeLookup", "StorageProtocol"]
