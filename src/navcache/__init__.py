"""navcache — page-level caching and navigation continuity.

Lets a page-based application switch back to previously visited views
without refetching, while coordinating a keyed data cache and a
background prefetch.

Basic usage::

    from navcache import BackgroundPrefetcher, GlobalDataCache, PageCacheStore, bind

    pages = PageCacheStore()
    data = GlobalDataCache()
    prefetcher = BackgroundPrefetcher(data)

    async with prefetcher.serve():
        with bind("events", pages, data, prefetcher) as nav:
            nav.ensure_prefetch()
            events = nav.get_cached_data()
"""

__version__ = "0.1.0-dev"
__all__ = [
    "BackgroundPrefetcher",
    "CacheConfig",
    "CacheDurations",
    "ChangeKind",
    "ComponentRef",
    "ConfigurationError",
    "GlobalDataCache",
    "InstantPageSwitch",
    "KeyedDataStore",
    "NavCacheError",
    "NavigationBinding",
    "PageCacheStore",
    "PageChange",
    "PrefetchCoordinator",
    "PrefetchError",
    "ProgressiveLoader",
    "SubscriberRegistry",
    "bind",
    "sweep_periodically",
]

# name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "BackgroundPrefetcher": "navcache.prefetch.coordinator",
    "CacheConfig": "navcache.config",
    "CacheDurations": "navcache.config",
    "ChangeKind": "navcache.pages.types",
    "ComponentRef": "navcache._internal.types",
    "ConfigurationError": "navcache.errors",
    "GlobalDataCache": "navcache.data.store",
    "InstantPageSwitch": "navcache.pages.switch",
    "KeyedDataStore": "navcache.contracts",
    "NavCacheError": "navcache.errors",
    "NavigationBinding": "navcache.pages.binding",
    "PageCacheStore": "navcache.pages.store",
    "PageChange": "navcache.pages.types",
    "PrefetchCoordinator": "navcache.contracts",
    "PrefetchError": "navcache.errors",
    "ProgressiveLoader": "navcache.pages.progressive",
    "SubscriberRegistry": "navcache.subscribers",
    "bind": "navcache.pages.binding",
    "sweep_periodically": "navcache.maintenance",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import navcache`` fast and avoids importing httpx until the
    prefetcher is actually used.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
