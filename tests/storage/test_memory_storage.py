"""Tests for the in-memory storage tier."""

from __future__ import annotations

from pathlib import Path

import pytest

from depcache.core.cache import Cache
from depcache.core.models import Dependency, Item
from depcache.shared.protocols import StorageProtocol
from depcache.storage import MemoryStorage, storage_has_valid
from tests.test_helpers import FakeMtime, write_file


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


class TestMemoryStorageContract:
    """Test the storage protocol operations."""

    def test_satisfies_protocol(self, storage: MemoryStorage) -> None:
        """Test MemoryStorage is a StorageProtocol."""
        assert isinstance(storage, StorageProtocol)

    @pytest.mark.asyncio
    async def test_get_missing_key(self, storage: MemoryStorage) -> None:
        """Test a missing key returns None instead of raising."""
        assert await storage.get("missing") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, storage: MemoryStorage) -> None:
        """Test the stored item is returned as-is."""
        item = Item("content")

        await storage.set("k", item)

        assert await storage.get("k") is item

    @pytest.mark.asyncio
    async def test_set_returns_storage(self, storage: MemoryStorage) -> None:
        """Test set can be chained."""
        result = await storage.set("a", Item(1))
        await (await result.set("b", Item(2))).set("c", Item(3))

        assert result is storage
        assert len(storage) == 3

    @pytest.mark.asyncio
    async def test_set_overwrites(self, storage: MemoryStorage) -> None:
        """Test a later item replaces an earlier one."""
        newer = Item("new")
        await storage.set("k", Item("old"))
        await storage.set("k", newer)

        assert await storage.get("k") is newer
        assert len(storage) == 1

    @pytest.mark.asyncio
    async def test_has_valid_missing(self, storage: MemoryStorage) -> None:
        """Test has_valid is False for a missing key."""
        assert await storage.has_valid("missing") is False

    @pytest.mark.asyncio
    async def test_has_valid_without_dependencies(self, storage: MemoryStorage) -> None:
        """Test an item without dependencies is valid."""
        await storage.set("k", Item("content"))

        assert await storage.has_valid("k") is True

    @pytest.mark.asyncio
    async def test_has_valid_tracks_file(self, storage: MemoryStorage, temp_dir: Path) -> None:
        """Test has_valid follows the dependency file on disk."""
        path = write_file(temp_dir / "in.txt", "a", 1_000_000_000)
        dependency = await Dependency.snapshot(path)
        await storage.set("k", Item("content", [dependency]))

        assert await storage.has_valid("k") is True

        write_file(path, "b", 3_000_000_000)
        assert await storage.has_valid("k") is False

        path.unlink()
        assert await storage.has_valid("k") is False

    @pytest.mark.asyncio
    async def test_has_valid_uses_configured_lookup(self) -> None:
        """Test has_valid checks dependencies with the storage's lookup."""
        fake_mtime = FakeMtime({"a": 1})
        storage = MemoryStorage(fake_mtime)
        await storage.set("k", Item("c", [Dependency("a", 1)]))

        assert await storage.has_valid("k") is True
        assert fake_mtime.calls == ["a"]

    @pytest.mark.asyncio
    async def test_has_valid_with_explicit_lookup(self, storage: MemoryStorage) -> None:
        """Test a lookup passed to has_valid overrides the storage's own."""
        await storage.set("k", Item("c", [Dependency("a", 1)]))

        assert await storage.has_valid("k", FakeMtime({"a": 1})) is True
        assert await storage.has_valid("k", FakeMtime({"a": 2})) is False

    @pytest.mark.asyncio
    async def test_agrees_with_cache(self) -> None:
        """Test a tier and the cache built on it give the same answer."""
        fake_mtime = FakeMtime({"a": 1})
        cache = Cache(mtime_lookup=fake_mtime)
        storage = cache.storages[0]
        await cache.set("k", Item("c", [Dependency("a", 1)]))

        assert await cache.has_valid("k") is True
        assert await storage.has_valid("k") is True
        assert await storage.has_valid("k", cache.mtime_lookup) is True

        fake_mtime.times["a"] = 2
        assert await cache.has_valid("k") is False
        assert await storage.has_valid("k") is False


class TestMemoryStorageExtras:
    """Test dict-like helpers."""

    @pytest.mark.asyncio
    async def test_contains_and_keys(self, storage: MemoryStorage) -> None:
        """Test membership and key listing."""
        await storage.set("a", Item(1))
        await storage.set("b", Item(2))

        assert "a" in storage
        assert "z" not in storage
        assert sorted(storage.keys()) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_delete(self, storage: MemoryStorage) -> None:
        """Test delete reports whether the key existed."""
        await storage.set("a", Item(1))

        assert storage.delete("a") is True
        assert storage.delete("a") is False
        assert await storage.get("a") is None

    @pytest.mark.asyncio
    async def test_clear(self, storage: MemoryStorage) -> None:
        """Test clear removes every item."""
        await storage.set("a", Item(1))
        await storage.set("b", Item(2))

        storage.clear()

        assert len(storage) == 0
        assert repr(storage) == "MemoryStorage(items=0)"


class TestStorageHasValid:
    """Test the generic has_valid helper against other backends."""

    @pytest.mark.asyncio
    async def test_uses_backend_get(self, mocker) -> None:
        """Test the helper fetches through the backend's get."""
        backend = mocker.AsyncMock()
        backend.get.return_value = Item("content")

        assert await storage_has_valid(backend, "k") is True
        backend.get.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    async def test_absent_item(self, mocker) -> None:
        """Test the helper is False when the backend has nothing."""
        backend = mocker.AsyncMock()
        backend.get.return_value = None

        assert await storage_has_valid(backend, "k") is False

    @pytest.mark.asyncio
    async def test_passes_lookup_to_item(self, mocker) -> None:
        """Test the helper validates with the given lookup."""
        backend = mocker.AsyncMock()
        backend.get.return_value = Item("c", [Dependency("a", 1)])
        fake_mtime = FakeMtime({"a": 1})

        assert await storage_has_valid(backend, "k", fake_mtime) is True
        assert fake_mtime.calls == ["a"]
