"""Tests for Dependency and Item validity."""

from __future__ import annotations

from pathlib import Path

import pytest

from depcache.core.models import ComputationOutput, ComputationResult, Dependency, Item
from depcache.shared.errors import (
    ErrorCode,
    InfrastructureError,
    create_permission_denied_error,
)
from tests.test_helpers import FakeMtime, write_file


class TestDependency:
    """Test Dependency snapshot and validity checks."""

    @pytest.mark.asyncio
    async def test_snapshot_records_current_mtime(self) -> None:
        """Test snapshot stores the lookup's timestamp for the path."""
        lookup = FakeMtime({"a.txt": 100})

        dependency = await Dependency.snapshot("a.txt", lookup)

        assert dependency == Dependency("a.txt", 100)

    @pytest.mark.asyncio
    async def test_snapshot_accepts_path_objects(self, temp_dir: Path) -> None:
        """Test snapshot of a real file stores its path as a string."""
        path = write_file(temp_dir / "a.txt", "hi", 1_000_000_000)

        dependency = await Dependency.snapshot(path)

        assert dependency.path == str(path)
        assert dependency.snapshot_time == 1_000_000_000

    @pytest.mark.asyncio
    async def test_snapshot_of_missing_file_raises(self) -> None:
        """Test a dependency cannot be recorded for a missing file."""
        with pytest.raises(InfrastructureError) as exc_info:
            await Dependency.snapshot("missing.txt", FakeMtime())

        assert exc_info.value.code == ErrorCode.FILE_NOT_FOUND

    @pytest.mark.asyncio
    async def test_unchanged_file_is_valid(self) -> None:
        """Test equal timestamps mean valid."""
        lookup = FakeMtime({"a.txt": 100})

        assert await Dependency("a.txt", 100).is_valid(lookup) is True

    @pytest.mark.asyncio
    async def test_newer_timestamp_is_invalid(self) -> None:
        """Test a modified file invalidates the dependency."""
        lookup = FakeMtime({"a.txt": 200})

        assert await Dependency("a.txt", 100).is_valid(lookup) is False

    @pytest.mark.asyncio
    async def test_older_timestamp_is_invalid(self) -> None:
        """Test a timestamp rolled back in time also invalidates."""
        lookup = FakeMtime({"a.txt": 50})

        assert await Dependency("a.txt", 100).is_valid(lookup) is False

    @pytest.mark.asyncio
    async def test_missing_file_is_invalid_not_error(self) -> None:
        """Test a deleted file reports invalid instead of raising."""
        assert await Dependency("gone.txt", 100).is_valid(FakeMtime()) is False

    @pytest.mark.asyncio
    async def test_bare_file_not_found_is_invalid(self) -> None:
        """Test a custom lookup raising FileNotFoundError is treated as missing."""

        async def lookup(path: str) -> int:
            raise FileNotFoundError(path)

        assert await Dependency("gone.txt", 100).is_valid(lookup) is False

    @pytest.mark.asyncio
    async def test_permission_error_propagates(self) -> None:
        """Test lookup failures other than a missing file are raised."""
        lookup = FakeMtime({"a.txt": 100})
        error = create_permission_denied_error("a.txt", "mtime")
        lookup.errors["a.txt"] = error

        with pytest.raises(InfrastructureError) as exc_info:
            await Dependency("a.txt", 100).is_valid(lookup)

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_unexpected_exception_propagates(self) -> None:
        """Test arbitrary lookup exceptions are not swallowed."""
        lookup = FakeMtime({"a.txt": 100})
        lookup.errors["a.txt"] = OSError("disk on fire")

        with pytest.raises(OSError, match="disk on fire"):
            await Dependency("a.txt", 100).is_valid(lookup)

    @pytest.mark.asyncio
    async def test_real_file_modification(self, temp_dir: Path) -> None:
        """Test validity against the default lookup on a real file."""
        path = write_file(temp_dir / "a.txt", "hi", 1_000_000_000)
        dependency = await Dependency.snapshot(path)

        assert await dependency.is_valid() is True

        write_file(path, "bye", 2_000_000_000)
        assert await dependency.is_valid() is False

        path.unlink()
        assert await dependency.is_valid() is False

    def test_dependency_is_immutable(self) -> None:
        """Test snapshot_time cannot be reassigned."""
        dependency = Dependency("a.txt", 100)

        with pytest.raises(AttributeError):
            dependency.snapshot_time = 200  # type: ignore[misc]


class TestItem:
    """Test Item validity aggregation."""

    @pytest.mark.asyncio
    async def test_item_without_dependencies_is_valid(self) -> None:
        """Test vacuous validity of an empty dependency list."""
        lookup = FakeMtime()

        assert await Item("content").is_valid(lookup) is True
        assert lookup.calls == []

    @pytest.mark.asyncio
    async def test_all_valid_dependencies(self) -> None:
        """Test an item is valid when every dependency is."""
        lookup = FakeMtime({"a": 1, "b": 2})
        item = Item("content", [Dependency("a", 1), Dependency("b", 2)])

        assert await item.is_valid(lookup) is True

    @pytest.mark.asyncio
    async def test_one_invalid_dependency_invalidates_item(self) -> None:
        """Test a single changed dependency makes the item invalid."""
        lookup = FakeMtime({"a": 1, "b": 3})
        item = Item("content", [Dependency("a", 1), Dependency("b", 2)])

        assert await item.is_valid(lookup) is False

    @pytest.mark.asyncio
    async def test_every_dependency_is_checked(self) -> None:
        """Test checks do not stop at the first invalid dependency."""
        lookup = FakeMtime({"b": 2, "c": 3})
        item = Item(
            "content",
            [Dependency("a", 1), Dependency("b", 2), Dependency("c", 3)],
        )

        assert await item.is_valid(lookup) is False
        assert sorted(lookup.calls) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_dependency_error_propagates(self) -> None:
        """Test a failing dependency check fails the item check."""
        lookup = FakeMtime({"a": 1, "b": 2})
        lookup.errors["b"] = create_permission_denied_error("b")
        item = Item("content", [Dependency("a", 1), Dependency("b", 2)])

        with pytest.raises(InfrastructureError) as exc_info:
            await item.is_valid(lookup)

        assert exc_info.value.code == ErrorCode.PERMISSION_DENIED

    def test_dependencies_stored_as_tuple(self) -> None:
        """Test dependency lists are frozen into tuples."""
        item = Item("content", [Dependency("a", 1)])

        assert item.dependencies == (Dependency("a", 1),)

    def test_item_is_immutable(self) -> None:
        """Test content cannot be replaced after creation."""
        item = Item("content")

        with pytest.raises(AttributeError):
            item.content = "other"  # type: ignore[misc]


class TestComputationResult:
    """Test the ComputationResult container."""

    def test_defaults_to_no_dependencies(self) -> None:
        """Test dependencies default to an empty sequence."""
        result = ComputationResult("content")

        assert result.content == "content"
        assert list(result.dependencies) == []

    def test_satisfies_computation_output(self) -> None:
        """Test ComputationResult matches the output protocol."""
        assert isinstance(ComputationResult("content", ["a"]), ComputationOutput)

    def test_plain_objects_satisfy_protocol(self) -> None:
        """Test any object with both attributes is accepted."""

        class Output:
            content = "x"
            dependencies = ["a"]

        assert isinstance(Output(), ComputationOutput)
        assert not isinstance(object(), ComputationOutput)
