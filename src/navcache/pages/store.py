"""Page cache store — keeps previously rendered pages for instant switching.

Maps a page key (``"events"``, ``"projects"``) to the component handle
and data the page was last rendered with. Two independent lifecycles:

- **Staleness** hides an entry's data from readers until it is visited
  or re-registered. The entry still exists and still counts toward the
  size ceiling.
- **Eviction** deletes entries beyond ``max_pages``, keeping the most
  recently touched ones.

Every mutation notifies subscribers synchronously, after the state
change is complete, in registration order.

Example::

    store = PageCacheStore()
    store.register_page("events", ComponentRef(EventsView), {"list": [1, 2, 3]})
    store.get_page_data("events")      # {"list": [1, 2, 3]}
    store.mark_page_stale("events")
    store.get_page_data("events")      # None
    store.visit_page("events")
    store.get_page_data("events")      # {"list": [1, 2, 3]}
"""

import dataclasses
import logging
import time
from typing import Any

from navcache._internal.types import Callback, Clock, ComponentRef, Listener
from navcache.config import CacheConfig
from navcache.errors import ConfigurationError
from navcache.pages.types import ChangeKind, PageCacheEntry, PageChange
from navcache.subscribers import SubscriberRegistry, Unsubscribe

logger = logging.getLogger("navcache.pages")


class PageCacheStore:
    """In-memory page cache with LRU eviction and stale marking.

    Construct one per application and pass it to every
    ``NavigationBinding``; tests build a fresh one per test.
    """

    __slots__ = ("_clock", "_config", "_current_page", "_entries", "_seq", "_subscribers")

    def __init__(self, config: CacheConfig | None = None, *, clock: Clock = time.time) -> None:
        self._config = config or CacheConfig()
        if self._config.max_pages < 1:
            msg = f"max_pages must be at least 1, got {self._config.max_pages}"
            raise ConfigurationError(msg)
        self._clock = clock
        self._entries: dict[str, PageCacheEntry] = {}
        self._current_page = ""
        self._seq = 0
        self._subscribers = SubscriberRegistry()

    @property
    def config(self) -> CacheConfig:
        return self._config

    # -- Mutations --

    def register_page(self, page_key: str, component: ComponentRef | Any, data: Any) -> None:
        """Insert or overwrite the entry for *page_key* as fresh.

        Always notifies, even when the write repeats the current state.
        With ``auto_evict`` on, an eviction sweep follows.
        """
        self._entries[page_key] = PageCacheEntry(
            page_key=page_key,
            component=component,
            data=data,
            last_visited=self._clock(),
            touch_seq=self._next_seq(),
        )
        self._subscribers.notify(PageChange(ChangeKind.REGISTERED, (page_key,)))
        if self._config.auto_evict:
            self.cleanup()

    def visit_page(self, page_key: str) -> None:
        """Record navigation to *page_key* and revalidate its entry."""
        self._current_page = page_key
        entry = self._entries.get(page_key)
        if entry is not None:
            entry.is_stale = False
            self._touch(entry)
        self._subscribers.notify(PageChange(ChangeKind.VISITED, (page_key,)))

    def mark_page_stale(self, page_key: str) -> None:
        """Hide the entry's data until the next visit or registration."""
        entry = self._entries.get(page_key)
        if entry is not None:
            entry.is_stale = True
        self._subscribers.notify(PageChange(ChangeKind.STALE, (page_key,)))

    def clear_page(self, page_key: str) -> None:
        self._entries.pop(page_key, None)
        self._subscribers.notify(PageChange(ChangeKind.CLEARED, (page_key,)))

    def clear(self) -> None:
        """Drop every entry and forget the current page."""
        self._entries.clear()
        self._current_page = ""
        self._subscribers.notify(PageChange(ChangeKind.CLEARED))

    def cleanup(self) -> list[str]:
        """Evict everything beyond the ``max_pages`` most recent entries.

        Notifies only if at least one entry was removed.

        Returns:
            The evicted page keys, least recent last.
        """
        ranked = sorted(self._entries.values(), key=lambda e: e.recency, reverse=True)
        evicted = [entry.page_key for entry in ranked[self._config.max_pages:]]
        if not evicted:
            return []

        for key in evicted:
            del self._entries[key]
        logger.debug("Evicted %d page(s): %s", len(evicted), ", ".join(evicted))
        self._subscribers.notify(PageChange(ChangeKind.EVICTED, tuple(evicted)))
        return evicted

    # -- Reads --

    def get_page_data(self, page_key: str) -> Any | None:
        """Return the page's data, or ``None`` if unknown or stale.

        With ``touch_on_read`` on, a successful read counts as a touch
        for eviction ordering.
        """
        entry = self._entries.get(page_key)
        if entry is None or entry.is_stale:
            return None
        if self._config.touch_on_read:
            self._touch(entry)
        return entry.data

    def get_component(self, page_key: str) -> ComponentRef | Any | None:
        entry = self._entries.get(page_key)
        return entry.component if entry is not None else None

    def get_entry(self, page_key: str) -> PageCacheEntry | None:
        """Return a copy of the entry without touching it."""
        entry = self._entries.get(page_key)
        return dataclasses.replace(entry) if entry is not None else None

    def is_cached(self, page_key: str) -> bool:
        """True if a fresh entry exists. Does not touch it."""
        entry = self._entries.get(page_key)
        return entry is not None and not entry.is_stale

    def get_current_page(self) -> str:
        return self._current_page

    def get_cached_pages(self) -> list[str]:
        return list(self._entries)

    def stats(self) -> dict[str, Any]:
        stale = sum(1 for entry in self._entries.values() if entry.is_stale)
        return {
            "size": len(self._entries),
            "stale": stale,
            "capacity": self._config.max_pages,
            "current_page": self._current_page,
            "subscribers": len(self._subscribers),
        }

    # -- Subscriptions --

    def subscribe(self, callback: Callback) -> Unsubscribe:
        """Register a zero-argument change callback."""
        return self._subscribers.subscribe(callback)

    def listen(self, callback: Listener) -> Unsubscribe:
        """Register a callback that receives a ``PageChange``."""
        return self._subscribers.listen(callback)

    # -- Internals --

    def _next_seq(self) -> int:
        self._seq += 1
        return self._seq

    def _touch(self, entry: PageCacheEntry) -> None:
        entry.last_visited = self._clock()
        entry.touch_seq = self._next_seq()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, page_key: object) -> bool:
        return page_key in self._entries
