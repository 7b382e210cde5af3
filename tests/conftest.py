"""
Pytest configuration and shared fixtures for depcache tests.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from tests.test_helpers import CountingComputation, FakeMtime


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def fake_mtime() -> FakeMtime:
    """Timestamp lookup with no files registered."""
    return FakeMtime()


@pytest.fixture
def computation() -> CountingComputation:
    """Counting computation returning "result" with no dependencies."""
    return CountingComputation()


@pytest.fixture(autouse=True)
def reset_depcache_logger() -> Generator[None, None, None]:
    """Undo any handler configuration tests apply to the package logger."""
    yield
    logger = logging.getLogger("depcache")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
