"""Page cache data types."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from navcache._internal.types import ComponentRef


class ChangeKind(Enum):
    """Which page cache operation produced a notification."""

    REGISTERED = "registered"
    VISITED = "visited"
    STALE = "stale"
    CLEARED = "cleared"
    EVICTED = "evicted"


@dataclass(frozen=True, slots=True)
class PageChange:
    """Descriptor passed to ``listen()`` callbacks after a mutation.

    Attributes:
        kind: The operation that ran.
        keys: Page keys the operation touched. Empty when a whole-cache
            ``clear()`` ran.
    """

    kind: ChangeKind
    keys: tuple[str, ...] = ()

    def concerns(self, page_key: str) -> bool:
        """True if a binding for *page_key* needs to re-read its state."""
        return not self.keys or page_key in self.keys


@dataclass(slots=True)
class PageCacheEntry:
    """One cached page. At most one per ``page_key``."""

    page_key: str
    component: ComponentRef | Any
    data: Any
    last_visited: float
    is_stale: bool = False
    touch_seq: int = 0

    @property
    def recency(self) -> tuple[float, int]:
        """Eviction sort key; the sequence breaks timestamp ties."""
        return (self.last_visited, self.touch_seq)
