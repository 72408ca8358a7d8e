"""Keyed data cache — namespaced API payloads with per-kind max ages.

Payloads are addressed by ``(namespace, kind, page)`` plus an optional
filters mapping, e.g. ``("events", "featured", 1)``. Entries are not
deleted on expiry; ``get()`` just stops returning them until ``cleanup()``
sweeps them out.

Also tracks which namespaces the background prefetcher has warmed, so
views can tell whether the one-time initial prefetch has completed.
"""

import json
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from navcache._internal.types import Callback, Clock
from navcache.config import CacheConfig
from navcache.subscribers import SubscriberRegistry, Unsubscribe

logger = logging.getLogger("navcache.data")

# (namespace, kind, page, filters)
DataKey: TypeAlias = tuple[str, str, int, str]


@dataclass(frozen=True, slots=True)
class DataEntry:
    """A stored payload and when it was written."""

    data: Any
    timestamp: float
    page: int | None = None
    filters: Mapping[str, Any] | None = None


def make_key(
    namespace: str,
    kind: str,
    page: int | None = None,
    filters: Mapping[str, Any] | None = None,
) -> DataKey:
    """Build the lookup key. A missing page means page 1."""
    filters_key = json.dumps(filters, sort_keys=True, default=str) if filters else ""
    return (namespace, kind, page or 1, filters_key)


class GlobalDataCache:
    """In-memory keyed data store shared by every view.

    Implements the ``KeyedDataStore`` contract (``get_data`` /
    ``set_data`` / ``is_initial_prefetch_done``) on top of a richer API
    that also accepts filters and an explicit ``max_age``.
    """

    __slots__ = ("_clock", "_config", "_entries", "_prefetch_status", "_subscribers")

    def __init__(self, config: CacheConfig | None = None, *, clock: Clock = time.time) -> None:
        self._config = config or CacheConfig()
        self._clock = clock
        self._entries: dict[DataKey, DataEntry] = {}
        self._prefetch_status: dict[str, bool] = {}
        self._subscribers = SubscriberRegistry()

    @property
    def config(self) -> CacheConfig:
        return self._config

    # -- Payloads --

    def set(
        self,
        namespace: str,
        kind: str,
        data: Any,
        page: int | None = None,
        filters: Mapping[str, Any] | None = None,
    ) -> None:
        key = make_key(namespace, kind, page, filters)
        self._entries[key] = DataEntry(data=data, timestamp=self._clock(), page=page, filters=filters)
        self._subscribers.notify()

    def get(
        self,
        namespace: str,
        kind: str,
        page: int | None = None,
        filters: Mapping[str, Any] | None = None,
        max_age: float | None = None,
    ) -> Any | None:
        """Return the payload if it is younger than *max_age*.

        A *max_age* of ``None`` or ``0`` uses the configured duration for *kind*.
        """
        entry = self._entries.get(make_key(namespace, kind, page, filters))
        if entry is None:
            return None
        limit = max_age or self._config.durations.for_kind(kind)
        if not self._is_fresh(entry, limit):
            return None
        return entry.data

    def get_data(self, namespace: str, kind: str, page: int | None = None) -> Any | None:
        return self.get(namespace, kind, page)

    def set_data(self, namespace: str, kind: str, payload: Any, page: int | None = None) -> None:
        self.set(namespace, kind, payload, page)

    # -- Prefetch status --

    def mark_prefetch_done(self, namespace: str) -> None:
        self._prefetch_status[namespace] = True
        self._subscribers.notify()

    def is_prefetch_done(self, namespace: str) -> bool:
        return self._prefetch_status.get(namespace, False)

    def is_initial_prefetch_done(self) -> bool:
        """True once every initial-prefetch namespace has been warmed."""
        return all(self.is_prefetch_done(ns) for ns in self._config.initial_prefetch_namespaces)

    # -- Invalidation --

    def clear_namespace(self, namespace: str) -> None:
        """Drop every payload under *namespace* and reset its prefetch status."""
        for key in [key for key in self._entries if key[0] == namespace]:
            del self._entries[key]
        self._prefetch_status[namespace] = False
        self._subscribers.notify()

    def clear_all(self) -> None:
        self._entries.clear()
        self._prefetch_status.clear()
        self._subscribers.notify()

    def cleanup(self) -> int:
        """Remove expired payloads. Notifies only if something was removed.

        Returns:
            Number of entries removed.
        """
        durations = self._config.durations
        expired = [
            key
            for key, entry in self._entries.items()
            if not self._is_fresh(entry, durations.for_kind(key[1]))
        ]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Expired %d keyed data entr(ies)", len(expired))
            self._subscribers.notify()
        return len(expired)

    # -- Introspection --

    def stats(self) -> dict[str, Any]:
        namespaces = list(dict.fromkeys(key[0] for key in self._entries))
        return {
            "size": len(self._entries),
            "namespaces": namespaces,
            "prefetch_status": dict(self._prefetch_status),
        }

    def subscribe(self, callback: Callback) -> Unsubscribe:
        return self._subscribers.subscribe(callback)

    def _is_fresh(self, entry: DataEntry, max_age: float) -> bool:
        return (self._clock() - entry.timestamp) < max_age

    def __len__(self) -> int:
        return len(self._entries)
