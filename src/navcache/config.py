"""Cache configuration.

CacheConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class CacheDurations:
    """Default max age, in seconds, per keyed-data kind."""

    featured: float = 10 * 60
    paginated: float = 5 * 60
    detail: float = 15 * 60
    academic_data: float = 30 * 60
    overview: float = 10 * 60

    def for_kind(self, kind: str) -> float:
        """Return the max age for *kind*; unknown kinds count as paginated."""
        if kind == "featured":
            return self.featured
        if kind == "detail":
            return self.detail
        if kind == "academic_data":
            return self.academic_data
        if kind == "overview":
            return self.overview
        return self.paginated


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Cache configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = CacheConfig(max_pages=10, prefetch_delay=0.0)
    """

    # Page cache
    max_pages: int = 5
    auto_evict: bool = True  # Run the eviction sweep after every registration
    touch_on_read: bool = True  # get_page_data() counts as a visit for eviction order

    # Keyed data cache
    durations: CacheDurations = field(default_factory=CacheDurations)
    initial_prefetch_namespaces: tuple[str, ...] = ("events", "projects", "gallery")

    # Background prefetch
    api_base_url: str = "http://localhost:8000/api"
    request_timeout: float = 10.0
    prefetch_delay: float = 0.5  # Pause between namespaces
    autostart_delay: float = 2.0

    # Maintenance
    sweep_interval: float = 60.0
