"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so imports like
``import expiring_cache`` resolve correctly regardless of the working
directory pytest chooses, and provides a controllable clock plus a cache
factory that always closes what it builds.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import Callable, List

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = 1_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    """Poll ``predicate`` until it holds or ``timeout`` seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_cache(clock):
    """Build caches on the fake clock and stop their janitors afterwards."""
    from expiring_cache import new_cache

    built: List = []

    def _make(default_expiration_ms=1000, cleanup_interval_ms=3000, **kwargs):
        kwargs.setdefault("clock", clock)
        cache = new_cache(default_expiration_ms, cleanup_interval_ms, **kwargs)
        built.append(cache)
        return cache

    yield _make

    for cache in built:
        cache.janitor.cancel()
        cache.janitor.join(timeout=2.0)


@pytest.fixture
def wait_until():
    """Bounded polling helper for assertions on background threads."""
    return _wait_until
