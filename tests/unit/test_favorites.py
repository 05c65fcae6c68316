"""Unit tests for FavoritesSet."""

import pytest

from legoview.processor.favorites import FavoritesSet


class TestFavoritesSet:
    
    def test_initially_empty(self):
        favorites = FavoritesSet()
        assert len(favorites) == 0
        assert not favorites.has("x")
    
    def test_toggle_returns_new_membership(self):
        favorites = FavoritesSet()
        
        assert favorites.toggle("x") is True
        assert favorites.has("x")
        assert "x" in favorites
        
        assert favorites.toggle("x") is False
        assert not favorites.has("x")
    
    @pytest.mark.parametrize("uuid", ["a", "deal-1", "https://www.vinted.fr/items/1"])
    def test_double_toggle_restores_original_state(self, uuid):
        favorites = FavoritesSet()
        favorites.toggle("other")
        
        for _ in range(2):
            before = favorites.has(uuid)
            favorites.toggle(uuid)
            favorites.toggle(uuid)
            assert favorites.has(uuid) == before
            favorites.toggle(uuid)
        
        assert favorites.has("other")
    
    def test_iteration_is_sorted(self):
        favorites = FavoritesSet()
        for uuid in ["c", "a", "b"]:
            favorites.toggle(uuid)
        
        assert list(favorites) == ["a", "b", "c"]
