"""Progressive loading — render cards first, let images arrive later.

Tracks which item images have finished loading so a view can show
placeholders until the last one is in.
"""

from collections.abc import Iterable, Mapping
from typing import Any

# Item fields that carry an image, in the shapes the API returns
IMAGE_FIELDS = ("image", "flyer", "photo")


def has_image(item: Mapping[str, Any]) -> bool:
    return any(item.get(name) for name in IMAGE_FIELDS)


class ProgressiveLoader:
    """Image load tracker for a list of items."""

    __slots__ = ("_items", "_loaded")

    def __init__(self, items: Iterable[Mapping[str, Any]] = ()) -> None:
        self._items: list[Mapping[str, Any]] = list(items)
        self._loaded: set[str] = set()

    def set_items(self, items: Iterable[Mapping[str, Any]]) -> None:
        """Replace the tracked items. Already-loaded image ids are kept."""
        self._items = list(items)

    def mark_image_loaded(self, image_id: str) -> None:
        self._loaded.add(image_id)

    def is_image_loaded(self, image_id: str) -> bool:
        return image_id in self._loaded

    @property
    def loaded_images_count(self) -> int:
        return len(self._loaded)

    @property
    def total_images(self) -> int:
        return sum(1 for item in self._items if has_image(item))

    @property
    def is_images_loading(self) -> bool:
        """True until as many images have loaded as items carry one."""
        return self.loaded_images_count < self.total_images
