"""Record store, favorites and the projection pipeline."""

from .favorites import FavoritesSet
from .normalizer import normalize_batch, normalize_record
from .pipeline import project
from .record_store import RecordStore

__all__ = ["FavoritesSet", "RecordStore", "normalize_batch", "normalize_record", "project"]
