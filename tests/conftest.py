"""Shared fixtures for navcache tests.

Every test gets fresh stores driven by a manual clock, so recency and
expiry are deterministic.
"""

import pytest

from navcache.config import CacheConfig
from navcache.data.store import GlobalDataCache
from navcache.pages.store import PageCacheStore


class ManualClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 1.0) -> float:
        self.now += seconds
        return self.now


class FakeCoordinator:
    """Prefetch coordinator that records starts and stays running until finished."""

    def __init__(self) -> None:
        self.starts = 0
        self._running = False

    @property
    def is_prefetching(self) -> bool:
        return self._running

    def start_background_prefetch(self) -> None:
        self.starts += 1
        self._running = True

    def finish(self) -> None:
        self._running = False


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def page_store(clock: ManualClock) -> PageCacheStore:
    return PageCacheStore(clock=clock)


@pytest.fixture
def manual_page_store(clock: ManualClock) -> PageCacheStore:
    """Page store with automatic eviction off, so cleanup() can be driven by hand."""
    return PageCacheStore(CacheConfig(auto_evict=False), clock=clock)


@pytest.fixture
def data_cache(clock: ManualClock) -> GlobalDataCache:
    return GlobalDataCache(clock=clock)


@pytest.fixture
def coordinator() -> FakeCoordinator:
    return FakeCoordinator()
