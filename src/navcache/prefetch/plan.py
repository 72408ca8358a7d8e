"""Which endpoints the background prefetcher warms, per namespace."""

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PrefetchEndpoint:
    """One REST endpoint, stored under ``(namespace, kind, page=1)``.

    ``url`` is relative to ``CacheConfig.api_base_url``.
    """

    kind: str
    url: str


PrefetchPlan = Mapping[str, tuple[PrefetchEndpoint, ...]]

DEFAULT_PREFETCH_PLAN: PrefetchPlan = {
    "events": (
        PrefetchEndpoint("featured", "/events/featured/"),
        PrefetchEndpoint("list", "/events/?page=1&page_size=12"),
        PrefetchEndpoint("upcoming", "/events/upcoming/"),
    ),
    "projects": (
        PrefetchEndpoint("featured", "/projects/featured/"),
        PrefetchEndpoint("list", "/projects/?page=1&page_size=12"),
    ),
    "gallery": (
        PrefetchEndpoint("featured", "/gallery/featured/"),
        PrefetchEndpoint("recent", "/gallery/?page=1&page_size=12"),
    ),
    "academics": (
        PrefetchEndpoint("overview", "/academics/overview/"),
        PrefetchEndpoint("schemes", "/academics/schemes/"),
    ),
    "alumni": (
        PrefetchEndpoint("featured", "/alumni/featured/"),
        PrefetchEndpoint("recent", "/alumni/?page=1&page_size=12"),
    ),
    "careers": (
        PrefetchEndpoint("featured", "/placements/featured/"),
        PrefetchEndpoint("recent", "/placements/?page=1&page_size=12"),
    ),
}
