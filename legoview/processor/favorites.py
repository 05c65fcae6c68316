"""Session favorites keyed by record uuid."""

from typing import Iterator, Set


class FavoritesSet:
    """
    Mutable set of favorited record uuids.
    
    Lives for the whole session and survives batch replacement and mode
    switches. Nothing is persisted and nothing is evicted.
    """
    
    def __init__(self):
        self._uuids: Set[str] = set()
    
    def toggle(self, uuid: str) -> bool:
        """Flip membership of uuid and return the new membership."""
        if uuid in self._uuids:
            self._uuids.discard(uuid)
            return False
        self._uuids.add(uuid)
        return True
    
    def has(self, uuid: str) -> bool:
        return uuid in self._uuids
    
    def __contains__(self, uuid: object) -> bool:
        return uuid in self._uuids
    
    def __len__(self) -> int:
        return len(self._uuids)
    
    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._uuids))
