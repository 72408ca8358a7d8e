"""Keyed data cache for API payloads.

Basic usage::

    from navcache.data import GlobalDataCache

    cache = GlobalDataCache()
    cache.set("events", "featured", payload)
    cache.get("events", "featured")        # payload, until it expires
"""

from navcache.data.store import DataEntry, GlobalDataCache, make_key

__all__ = [
    "DataEntry",
    "GlobalDataCache",
    "make_key",
]
