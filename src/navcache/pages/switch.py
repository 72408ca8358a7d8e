"""Instant page switching between cached pages."""

from collections.abc import Callable

from navcache.pages.store import PageCacheStore


class InstantPageSwitch:
    """Navigate to a page and record the visit in the page cache.

    ``is_transitioning`` is True only while ``navigate`` runs.
    """

    __slots__ = ("_store", "is_transitioning")

    def __init__(self, store: PageCacheStore) -> None:
        self._store = store
        self.is_transitioning = False

    def switch_to_page(self, page_key: str, navigate: Callable[[], object]) -> bool:
        """Run *navigate*, then mark *page_key* visited.

        Returns:
            True if the page had fresh cached data, i.e. the switch
            rendered from cache instead of fetching.
        """
        self.is_transitioning = True
        try:
            instant = self._store.is_cached(page_key)
            navigate()
            self._store.visit_page(page_key)
            return instant
        finally:
            self.is_transitioning = False
