"""Background prefetcher — warms the keyed data cache ahead of navigation.

Fetches each namespace's endpoints from the REST API and stores the
payloads as page 1 of ``(namespace, kind)``. Namespaces run one after
another with a short pause between them; the endpoints of a single
namespace are fetched concurrently in an anyio task group.

Pipeline::

    async with prefetcher.serve():          # owns the task group
        prefetcher.start_background_prefetch()   # returns immediately
        prefetcher.start_background_prefetch()   # no-op while running
        ...

    1. Flip ``is_prefetching`` synchronously (later calls become no-ops)
    2. Pick every namespace whose prefetch is not done yet
    3. For each namespace: fetch endpoints concurrently, skip cached ones
    4. Success marks the namespace done; a failure marks it ``error``
       and is logged, the remaining namespaces still run
    5. Clear ``is_prefetching`` and notify subscribers

There is no retry. A failed namespace stays ``error`` until the next
run picks it up again.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any

import anyio
import httpx
from anyio.abc import TaskGroup

from navcache._internal.types import Callback
from navcache.config import CacheConfig
from navcache.data.store import GlobalDataCache
from navcache.errors import ConfigurationError, CoordinatorNotStartedError, PrefetchError
from navcache.prefetch.plan import DEFAULT_PREFETCH_PLAN, PrefetchEndpoint, PrefetchPlan
from navcache.subscribers import SubscriberRegistry, Unsubscribe

logger = logging.getLogger("navcache.prefetch")


class PrefetchStatus(Enum):
    """Per-namespace prefetch progress."""

    PENDING = "pending"
    LOADING = "loading"
    DONE = "done"
    ERROR = "error"


class BackgroundPrefetcher:
    """Runs at most one speculative warm-up of the keyed data cache.

    Implements the ``PrefetchCoordinator`` contract. Background runs are
    spawned into the task group opened by ``serve()``; ``manual_prefetch``
    can also be awaited directly.

    Args:
        data_store: Cache the payloads are written into.
        config: Base URL, timeout and delays. Which namespaces make up the
            initial prefetch is decided by ``data_store.config``, not here.
        plan: Namespace -> endpoints. Defaults to ``DEFAULT_PREFETCH_PLAN``.
            Must cover every initial-prefetch namespace of the data store.
        transport: Optional httpx transport (``httpx.MockTransport`` in tests).

    Raises:
        ConfigurationError: *plan* misses an initial-prefetch namespace.
    """

    __slots__ = (
        "_autostarted",
        "_cancel_scope",
        "_config",
        "_data_store",
        "_plan",
        "_progress",
        "_running",
        "_subscribers",
        "_task_group",
        "_transport",
    )

    def __init__(
        self,
        data_store: GlobalDataCache,
        config: CacheConfig | None = None,
        *,
        plan: PrefetchPlan | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._data_store = data_store
        self._config = config or CacheConfig()
        self._plan = dict(DEFAULT_PREFETCH_PLAN if plan is None else plan)
        missing = [ns for ns in data_store.config.initial_prefetch_namespaces if ns not in self._plan]
        if missing:
            msg = f"prefetch plan has no endpoints for initial namespace(s): {', '.join(missing)}"
            raise ConfigurationError(msg)
        self._transport = transport
        self._progress: dict[str, PrefetchStatus] = {
            namespace: PrefetchStatus.DONE if data_store.is_prefetch_done(namespace) else PrefetchStatus.PENDING
            for namespace in self._plan
        }
        self._running = False
        self._cancel_scope: anyio.CancelScope | None = None
        self._task_group: TaskGroup | None = None
        self._autostarted = False
        self._subscribers = SubscriberRegistry()

    @property
    def is_prefetching(self) -> bool:
        return self._running

    # -- Lifecycle --

    @asynccontextmanager
    async def serve(self, *, autostart: bool = False) -> AsyncIterator[BackgroundPrefetcher]:
        """Open the task group background prefetches run in.

        Leaving the block waits for an in-flight prefetch to finish.
        With *autostart*, a delayed first prefetch is scheduled.
        """
        try:
            # Stays attached while the group drains, so pending tasks can still start a run
            async with anyio.create_task_group() as tg:
                self._task_group = tg
                if autostart:
                    tg.start_soon(self.autostart)
                yield self
        finally:
            self._task_group = None

    def start_background_prefetch(self) -> None:
        """Start prefetching pending namespaces without waiting.

        No-op while a prefetch is running.

        Raises:
            CoordinatorNotStartedError: Called outside ``serve()``.
        """
        if self._running:
            return
        tg = self._task_group
        if tg is None:
            msg = "start_background_prefetch() requires an active serve() block"
            raise CoordinatorNotStartedError(msg)
        scope = self._begin()
        tg.start_soon(self._run_in_background, scope)

    async def autostart(self, delay: float | None = None) -> bool:
        """Start the first background prefetch after *delay* seconds.

        Only the first call schedules anything.
        """
        if self._autostarted:
            return False
        self._autostarted = True
        await anyio.sleep(self._config.autostart_delay if delay is None else delay)
        self.start_background_prefetch()
        return True

    async def manual_prefetch(self, namespaces: Iterable[str]) -> None:
        """Prefetch the given namespaces now, replacing any running prefetch.

        Namespaces missing from the plan are ignored.
        """
        if self._running:
            self.stop_prefetch()
        selected = [namespace for namespace in namespaces if namespace in self._plan]
        await self._prefetch(selected, self._begin())

    def stop_prefetch(self) -> None:
        """Cancel the running prefetch, if any."""
        if self._cancel_scope is not None:
            self._cancel_scope.cancel()
            self._cancel_scope = None
        self._running = False
        self._notify()

    # -- Introspection --

    def progress(self) -> dict[str, PrefetchStatus]:
        return dict(self._progress)

    def stats(self) -> dict[str, int]:
        counts = {"total": 0, "done": 0, "pending": 0, "loading": 0, "error": 0}
        for status in self._progress.values():
            counts["total"] += 1
            counts[status.value] += 1
        return counts

    def subscribe(self, callback: Callback) -> Unsubscribe:
        return self._subscribers.subscribe(callback)

    # -- Internals --

    def _begin(self) -> anyio.CancelScope:
        scope = anyio.CancelScope()
        self._cancel_scope = scope
        self._running = True
        self._notify()
        return scope

    async def _run_in_background(self, scope: anyio.CancelScope) -> None:
        pending = [ns for ns in self._plan if not self._data_store.is_prefetch_done(ns)]
        try:
            await self._prefetch(pending, scope)
        except Exception:
            logger.exception("Background prefetch failed")

    async def _prefetch(self, namespaces: list[str], scope: anyio.CancelScope) -> None:
        try:
            with scope:
                if not namespaces:
                    return
                async with self._client() as client:
                    for index, namespace in enumerate(namespaces):
                        if index and self._config.prefetch_delay > 0:
                            await anyio.sleep(self._config.prefetch_delay)
                        await self._prefetch_namespace(client, namespace)
        finally:
            # A replaced run must not reset the state of its successor
            if self._cancel_scope is scope:
                self._cancel_scope = None
                self._running = False
                self._notify()

    async def _prefetch_namespace(self, client: httpx.AsyncClient, namespace: str) -> None:
        self._progress[namespace] = PrefetchStatus.LOADING
        self._notify()

        failures: list[PrefetchError] = []

        async def fetch(endpoint: PrefetchEndpoint) -> None:
            try:
                await self._fetch_endpoint(client, namespace, endpoint)
            except PrefetchError as exc:
                failures.append(exc)

        async with anyio.create_task_group() as tg:
            for endpoint in self._plan[namespace]:
                tg.start_soon(fetch, endpoint)

        if failures:
            for exc in failures:
                logger.warning("Failed to prefetch %s: %s", namespace, exc)
            self._progress[namespace] = PrefetchStatus.ERROR
        else:
            self._progress[namespace] = PrefetchStatus.DONE
            self._data_store.mark_prefetch_done(namespace)
        self._notify()

    async def _fetch_endpoint(
        self, client: httpx.AsyncClient, namespace: str, endpoint: PrefetchEndpoint,
    ) -> None:
        if self._data_store.get(namespace, endpoint.kind, 1) is not None:
            return
        try:
            response = await client.get(endpoint.url)
        except httpx.HTTPError as exc:
            raise PrefetchError(namespace, 0, f"{endpoint.kind}: {exc}") from exc
        if response.is_error:
            raise PrefetchError(namespace, response.status_code, f"{endpoint.kind}: {response.reason_phrase}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise PrefetchError(namespace, response.status_code, f"{endpoint.kind}: invalid JSON") from exc
        self._data_store.set(namespace, endpoint.kind, payload, 1)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._config.api_base_url,
            timeout=self._config.request_timeout,
            transport=self._transport,
        )

    def _notify(self) -> None:
        self._subscribers.notify()


def prefetch_stats(prefetcher: BackgroundPrefetcher, data_store: GlobalDataCache) -> dict[str, Any]:
    """Combined prefetch and cache statistics for debugging."""
    return {
        "service": prefetcher.stats(),
        "cache": data_store.stats(),
    }
