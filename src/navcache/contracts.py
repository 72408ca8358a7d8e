"""Collaborator contracts consumed by ``NavigationBinding``.

The binding talks to a keyed data store and a prefetch coordinator only
through these protocols, so views never depend on either concrete class.
``GlobalDataCache`` and ``BackgroundPrefetcher`` are the in-tree
implementations; tests substitute small fakes.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KeyedDataStore(Protocol):
    """Namespaced payload cache addressed by (namespace, kind, page)."""

    def get_data(self, namespace: str, kind: str, page: int | None = None) -> Any | None: ...

    def set_data(self, namespace: str, kind: str, payload: Any, page: int | None = None) -> None: ...

    def is_initial_prefetch_done(self) -> bool: ...


@runtime_checkable
class PrefetchCoordinator(Protocol):
    """Runs at most one speculative warm-up at a time."""

    @property
    def is_prefetching(self) -> bool: ...

    def start_background_prefetch(self) -> None: ...
