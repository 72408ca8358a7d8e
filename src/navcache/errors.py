"""navcache exception hierarchy.

The cache APIs themselves never raise for unknown keys. These types cover
invalid configuration and the prefetch coordinator's own failures.
"""


class NavCacheError(Exception):
    """Base for all navcache-specific errors."""


class ConfigurationError(NavCacheError):
    """Raised when cache configuration is invalid.

    Typically raised while constructing a store at startup.
    """


class PrefetchError(NavCacheError):
    """Raised when a prefetch endpoint cannot be warmed.

    Caught by ``BackgroundPrefetcher`` and recorded as the namespace's
    ``error`` status; it never escapes a background run.
    """

    def __init__(self, namespace: str, status: int, detail: str) -> None:
        self.namespace = namespace
        self.status = status
        self.detail = detail
        super().__init__(f"{namespace} prefetch failed ({status}): {detail}")


class CoordinatorNotStartedError(NavCacheError):
    """Raised when a background prefetch is requested outside ``serve()``."""
