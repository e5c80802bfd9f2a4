"""Fixtures for integration tests."""

from collections.abc import Generator
from pathlib import Path
from typing import Protocol

import pytest
from aioresponses import aioresponses as aioresponses_cls


class WriteTestFn(Protocol):
    """Protocol for test module creation function."""

    def __call__(self, name: str, source: str) -> Path:
        """Write a test module under E2E/ and return its path."""


@pytest.fixture
def aioresponses() -> Generator[aioresponses_cls, None, None]:
    """Intercept aiohttp requests."""
    with aioresponses_cls() as mocked:
        yield mocked


@pytest.fixture
def tests_root(tmp_path: Path) -> Path:
    """Directory standing in for both the local tests dir and the task root."""
    (tmp_path / "E2E").mkdir()
    return tmp_path


@pytest.fixture
def write_test(tests_root: Path) -> WriteTestFn:
    """Return a function to write test modules."""

    def _write(name: str, source: str) -> Path:
        path = tests_root / "E2E" / name
        path.write_text(source)
        return path

    return _write
