"""Subscriber registry — the reactive primitive behind every cache.

A registry holds unique callbacks and fires them synchronously, in
registration order, whenever its owner calls ``notify()``.

Two callback shapes share one ordering:

- ``subscribe(cb)``: ``cb()`` takes no arguments and re-reads whatever
  state it cares about.
- ``listen(cb)``: ``cb(change)`` receives the descriptor passed to
  ``notify()`` so it can skip changes that do not concern it.

Example::

    registry = SubscriberRegistry()
    unsubscribe = registry.subscribe(lambda: print("changed"))
    registry.notify()
    unsubscribe()
    unsubscribe()  # safe
"""

from __future__ import annotations

import logging
from typing import Any

from navcache._internal.types import Callback, Listener

logger = logging.getLogger("navcache.subscribers")


class Unsubscribe:
    """Handle returned by ``subscribe()`` / ``listen()``.

    Calling it removes the callback. Calling it again is a no-op, and a
    handle from an earlier registration never removes a later one.
    Also usable as a context manager to scope a subscription::

        with store.subscribe(on_change):
            ...
    """

    __slots__ = ("_callback", "_registry", "_token")

    def __init__(self, registry: SubscriberRegistry, callback: Callback | Listener, token: object) -> None:
        self._registry: SubscriberRegistry | None = registry
        self._callback = callback
        self._token = token

    @property
    def active(self) -> bool:
        return self._registry is not None

    def __call__(self) -> None:
        registry = self._registry
        if registry is None:
            return
        self._registry = None
        registry._remove(self._callback, self._token)

    def __enter__(self) -> Unsubscribe:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self()


class SubscriberRegistry:
    """Ordered set of change callbacks.

    Not thread-safe: the owning caches run on a single event loop and
    every mutation completes before ``notify()`` is called.
    """

    __slots__ = ("_callbacks",)

    def __init__(self) -> None:
        # callback -> (wants the change descriptor, registration token)
        self._callbacks: dict[Callback | Listener, tuple[bool, object]] = {}

    def subscribe(self, callback: Callback) -> Unsubscribe:
        """Register a zero-argument callback."""
        return self._add(callback, wants_change=False)

    def listen(self, callback: Listener) -> Unsubscribe:
        """Register a callback that receives each change descriptor."""
        return self._add(callback, wants_change=True)

    def notify(self, change: Any = None) -> None:
        """Fire every registered callback in registration order.

        Works on a snapshot, so callbacks may subscribe or unsubscribe
        while being notified. A failing callback is logged and the rest
        still run.
        """
        for callback, (wants_change, _) in list(self._callbacks.items()):
            try:
                if wants_change:
                    callback(change)
                else:
                    callback()
            except Exception:
                logger.exception("Subscriber %r failed handling %r", callback, change)

    def clear(self) -> None:
        self._callbacks.clear()

    def _add(self, callback: Callback | Listener, *, wants_change: bool) -> Unsubscribe:
        _, token = self._callbacks.setdefault(callback, (wants_change, object()))
        return Unsubscribe(self, callback, token)

    def _remove(self, callback: Callback | Listener, token: object) -> None:
        registered = self._callbacks.get(callback)
        if registered is not None and registered[1] is token:
            del self._callbacks[callback]

    def __len__(self) -> int:
        return len(self._callbacks)

    def __contains__(self, callback: object) -> bool:
        return callback in self._callbacks
