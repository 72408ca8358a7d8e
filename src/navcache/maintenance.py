"""Periodic cache maintenance.

Neither cache sweeps itself on a timer. Run this loop in the
application's task group to expire keyed data and enforce the page
ceiling::

    async with anyio.create_task_group() as tg:
        tg.start_soon(sweep_periodically, data_cache, page_store)
"""

import logging

import anyio

from navcache.data.store import GlobalDataCache
from navcache.pages.store import PageCacheStore

logger = logging.getLogger("navcache.maintenance")


def sweep_once(data_store: GlobalDataCache, page_store: PageCacheStore | None = None) -> tuple[int, list[str]]:
    """Run one sweep. Returns (expired data entries, evicted page keys)."""
    expired = data_store.cleanup()
    evicted = page_store.cleanup() if page_store is not None else []
    if expired or evicted:
        logger.debug("Sweep expired %d data entr(ies), evicted %d page(s)", expired, len(evicted))
    return expired, evicted


async def sweep_periodically(
    data_store: GlobalDataCache,
    page_store: PageCacheStore | None = None,
    *,
    interval: float | None = None,
) -> None:
    """Sweep every *interval* seconds until cancelled.

    *interval* defaults to the data store's ``CacheConfig.sweep_interval``.
    """
    delay = interval if interval is not None else data_store.config.sweep_interval
    while True:
        await anyio.sleep(delay)
        sweep_once(data_store, page_store)
