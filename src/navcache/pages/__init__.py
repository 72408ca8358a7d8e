"""Page-level caching and navigation continuity.

Keeps previously visited pages (component handle + data) so switching
back to them needs no refetch, and gives each view a binding that
mirrors the cache into reactive flags.

Usage::

    store = PageCacheStore()

    with bind("projects", store, data_cache, prefetcher) as nav:
        data = nav.get_cached_data()
        if data is None:
            data = load_projects()
            nav.cache_page(PROJECTS_VIEW, data)
"""

from navcache.pages.binding import NavigationBinding, bind
from navcache.pages.progressive import ProgressiveLoader
from navcache.pages.store import PageCacheStore
from navcache.pages.switch import InstantPageSwitch
from navcache.pages.types import ChangeKind, PageCacheEntry, PageChange

__all__ = [
    "ChangeKind",
    "InstantPageSwitch",
    "NavigationBinding",
    "PageCacheEntry",
    "PageCacheStore",
    "PageChange",
    "ProgressiveLoader",
    "bind",
]
