"""View controller, events and rendering collaborators."""

from .controller import ViewController
from .events import (
    EventDispatcher,
    FavoriteToggled,
    FavoritesOnlyToggled,
    FilterToggled,
    ModeChanged,
    PageChanged,
    PageSizeChanged,
    SortChanged,
)

__all__ = [
    "EventDispatcher",
    "FavoriteToggled",
    "FavoritesOnlyToggled",
    "FilterToggled",
    "ModeChanged",
    "PageChanged",
    "PageSizeChanged",
    "SortChanged",
    "ViewController",
]
