"""Pytest fixtures shared by the unit tests."""

from __future__ import annotations

import logging
from typing import Iterator

import pytest

from fakes import FakeArtifactProvider, FakeCacheProvider


@pytest.fixture
def fake_cache() -> FakeCacheProvider:
    return FakeCacheProvider()


@pytest.fixture
def fake_artifacts() -> FakeArtifactProvider:
    return FakeArtifactProvider()


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """Undo handler changes made by configure_logging in CLI tests."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
