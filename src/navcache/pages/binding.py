"""Navigation binding — the per-page façade views talk to.

A view holds one binding for its page key while it is mounted. The
binding mirrors the page cache into two flags (``is_page_cached``,
``is_data_loaded``), forwards keyed-data calls to the data store, and
guards the background prefetch so it is started at most once.

Typical view flow::

    with bind("events", page_store, data_cache, prefetcher) as nav:
        nav.mark_visited()
        nav.ensure_prefetch()
        data = nav.get_cached_data()
        if data is None:
            data = nav.get_global_cache_data("events", "list", 1) or fetch_events()
            nav.cache_page(EVENTS_VIEW, data)
        render(data)

The ``with`` block releases the store subscription on every exit path.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from navcache._internal.types import Callback, ComponentRef
from navcache.contracts import KeyedDataStore, PrefetchCoordinator
from navcache.pages.store import PageCacheStore
from navcache.pages.types import PageChange
from navcache.subscribers import SubscriberRegistry, Unsubscribe


class NavigationBinding:
    """Per-page view of the page cache plus its two collaborators.

    Args:
        page_key: Page this binding serves.
        store: Shared page cache.
        data_store: Keyed data store (``get_data`` / ``set_data``).
        coordinator: Prefetch coordinator.
    """

    __slots__ = (
        "_coordinator",
        "_data_store",
        "_listeners",
        "_store",
        "_unsubscribe",
        "is_data_loaded",
        "is_page_cached",
        "page_key",
    )

    def __init__(
        self,
        page_key: str,
        store: PageCacheStore,
        data_store: KeyedDataStore,
        coordinator: PrefetchCoordinator,
    ) -> None:
        self.page_key = page_key
        self._store = store
        self._data_store = data_store
        self._coordinator = coordinator
        self._unsubscribe: Unsubscribe | None = None
        self._listeners = SubscriberRegistry()
        self.is_page_cached = False
        self.is_data_loaded = False

    # -- Lifecycle --

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    def mount(self) -> None:
        """Read the initial cache state and start listening to the store."""
        if self._unsubscribe is not None:
            return
        cached = self._store.get_page_data(self.page_key)
        self.is_page_cached = cached is not None
        self.is_data_loaded = cached is not None
        self._unsubscribe = self._store.listen(self._on_store_change)

    def unmount(self) -> None:
        """Stop listening. In-flight fetches and prefetches are not cancelled."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __enter__(self) -> NavigationBinding:
        self.mount()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unmount()

    def subscribe(self, callback: Callback) -> Unsubscribe:
        """Call *callback* whenever ``is_page_cached`` or ``is_data_loaded`` changes."""
        return self._listeners.subscribe(callback)

    # -- Page cache --

    def mark_visited(self) -> None:
        self._store.visit_page(self.page_key)

    def cache_page(self, component: ComponentRef | Any, data: Any) -> None:
        """Store the rendered page and mark it loaded right away."""
        self._store.register_page(self.page_key, component, data)
        self._set_flags(cached=True, loaded=True)

    def get_cached_data(self) -> Any | None:
        return self._store.get_page_data(self.page_key)

    # -- Keyed data store pass-through --

    def has_global_cache_data(self, namespace: str, kind: str, page: int | None = None) -> bool:
        return self._data_store.get_data(namespace, kind, page) is not None

    def get_global_cache_data(self, namespace: str, kind: str, page: int | None = None) -> Any | None:
        return self._data_store.get_data(namespace, kind, page)

    def store_in_global_cache(
        self, namespace: str, kind: str, payload: Any, page: int | None = None,
    ) -> None:
        self._data_store.set_data(namespace, kind, payload, page)

    # -- Prefetch --

    @property
    def is_prefetching(self) -> bool:
        return self._coordinator.is_prefetching

    @property
    def is_initial_prefetch_done(self) -> bool:
        return self._data_store.is_initial_prefetch_done()

    def ensure_prefetch(self) -> bool:
        """Start the background prefetch unless it is running or already done.

        Returns:
            True if a start was issued.
        """
        if self._coordinator.is_prefetching or self._data_store.is_initial_prefetch_done():
            return False
        self._coordinator.start_background_prefetch()
        return True

    def snapshot(self) -> dict[str, bool]:
        """Current reactive flags, as a view would render them."""
        return {
            "is_page_cached": self.is_page_cached,
            "is_data_loaded": self.is_data_loaded,
            "is_prefetching": self.is_prefetching,
            "is_initial_prefetch_done": self.is_initial_prefetch_done,
        }

    # -- Internals --

    def _on_store_change(self, change: PageChange | None) -> None:
        if change is not None and not change.concerns(self.page_key):
            return
        cached = self._store.get_page_data(self.page_key)
        self._set_flags(cached=cached is not None, loaded=self.is_data_loaded or cached is not None)

    def _set_flags(self, *, cached: bool, loaded: bool) -> None:
        if cached == self.is_page_cached and loaded == self.is_data_loaded:
            return
        self.is_page_cached = cached
        self.is_data_loaded = loaded
        self._listeners.notify()


@contextmanager
def bind(
    page_key: str,
    store: PageCacheStore,
    data_store: KeyedDataStore,
    coordinator: PrefetchCoordinator,
) -> Iterator[NavigationBinding]:
    """Mount a ``NavigationBinding`` for the duration of a view's scope.

    The binding is unmounted on every exit path, including exceptions.
    """
    binding = NavigationBinding(page_key, store, data_store, coordinator)
    binding.mount()
    try:
        yield binding
    finally:
        binding.unmount()
