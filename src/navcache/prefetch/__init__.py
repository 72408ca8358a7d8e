"""Background prefetch of the keyed data cache.

Basic usage::

    from navcache.prefetch import BackgroundPrefetcher

    prefetcher = BackgroundPrefetcher(data_cache)
    async with prefetcher.serve():
        prefetcher.start_background_prefetch()
"""

from navcache.prefetch.coordinator import BackgroundPrefetcher, PrefetchStatus, prefetch_stats
from navcache.prefetch.plan import DEFAULT_PREFETCH_PLAN, PrefetchEndpoint, PrefetchPlan

__all__ = [
    "DEFAULT_PREFETCH_PLAN",
    "BackgroundPrefetcher",
    "PrefetchEndpoint",
    "PrefetchPlan",
    "PrefetchStatus",
    "prefetch_stats",
]
