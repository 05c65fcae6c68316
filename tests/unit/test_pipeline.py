"""Unit tests for the filter/sort projection pipeline."""

import random
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from legoview.models.data_models import (
    UNKNOWN_DATE,
    AcquisitionResult,
    FilterCriterion,
    Mode,
    Record,
    SortCriterion,
)
from legoview.processor.favorites import FavoritesSet
from legoview.processor.pipeline import apply_sort, project
from legoview.processor.record_store import parse_batch
from tests.fixtures.sample_data import get_sample_deals


def record(uuid, price="10", discount=None, comments=None, temperature=None, published=UNKNOWN_DATE):
    return Record(
        kind=Mode.DEAL,
        id=uuid,
        uuid=uuid,
        title=f"Deal {uuid}",
        link=f"https://example.com/{uuid}",
        price=Decimal(price) if price is not None else None,
        discount=discount,
        comments=comments,
        temperature=temperature,
        published=published,
    )


def uuids(records):
    return [r.uuid for r in records]


class TestFilterStage:
    
    def test_best_discount_scenario(self):
        raw = AcquisitionResult(
            data=[
                {"id": 1, "uuid": "1", "price": "10", "discount": 60},
                {"id": 2, "uuid": "2", "price": "5", "discount": 30},
            ],
            meta={},
        )
        records, _ = parse_batch(raw, Mode.DEAL)
        
        projection = project(
            records, FilterCriterion.BEST_DISCOUNT, SortCriterion.NONE, False, FavoritesSet()
        )
        
        assert [r.id for r in projection] == ["1"]
    
    def test_thresholds_are_inclusive(self):
        records = [
            record("a", discount=50, comments=15, temperature=100),
            record("b", discount=49, comments=14, temperature=99),
        ]
        
        for criterion in (
            FilterCriterion.BEST_DISCOUNT,
            FilterCriterion.MOST_COMMENTED,
            FilterCriterion.HOT_DEALS,
        ):
            assert uuids(project(records, criterion, SortCriterion.NONE, False, set())) == ["a"]
    
    def test_missing_values_never_match(self):
        records = [record("a")]
        
        projection = project(records, FilterCriterion.HOT_DEALS, SortCriterion.NONE, False, set())
        
        assert projection == []
    
    def test_no_filter_keeps_everything(self):
        records = [record("a"), record("b")]
        assert uuids(project(records, FilterCriterion.NONE, SortCriterion.NONE, False, set())) == ["a", "b"]


class TestFavoritesStage:
    
    def test_favorites_only_scenario(self):
        favorites = FavoritesSet()
        favorites.toggle("x")
        records = [record("x"), record("y")]
        
        projection = project(records, FilterCriterion.NONE, SortCriterion.NONE, True, favorites)
        
        assert uuids(projection) == ["x"]
    
    def test_favorites_only_combines_with_filter(self):
        favorites = {"a", "b"}
        records = [record("a", discount=60), record("b", discount=10), record("c", discount=80)]
        
        projection = project(records, FilterCriterion.BEST_DISCOUNT, SortCriterion.NONE, True, favorites)
        
        assert uuids(projection) == ["a"]


class TestSortStage:
    
    def test_price_sorts(self):
        records = [record("a", "20"), record("b", "5.5"), record("c", "100")]
        
        assert uuids(apply_sort(records, SortCriterion.PRICE_ASC, set())) == ["b", "a", "c"]
        assert uuids(apply_sort(records, SortCriterion.PRICE_DESC, set())) == ["c", "a", "b"]
    
    def test_unparseable_price_sorts_as_zero(self):
        records = [record("a", "3"), record("b", None), record("c", "0")]
        
        assert uuids(apply_sort(records, SortCriterion.PRICE_ASC, set())) == ["b", "c", "a"]
        assert uuids(apply_sort(records, SortCriterion.PRICE_DESC, set())) == ["a", "b", "c"]
    
    def test_date_sorts_with_unknown_as_earliest(self):
        records = [
            record("new", published=datetime(2025, 3, 1, tzinfo=timezone.utc)),
            record("unknown"),
            record("old", published=datetime(1999, 1, 1, tzinfo=timezone.utc)),
        ]
        
        assert uuids(apply_sort(records, SortCriterion.DATE_ASC, set())) == ["unknown", "old", "new"]
        assert uuids(apply_sort(records, SortCriterion.DATE_DESC, set())) == ["new", "old", "unknown"]
    
    def test_none_preserves_input_order(self):
        records = [record("c"), record("a"), record("b")]
        assert uuids(apply_sort(records, SortCriterion.NONE, set())) == ["c", "a", "b"]
    
    def test_favorites_first_partitions(self):
        records = [record("a"), record("b"), record("c"), record("d")]
        
        projection = apply_sort(records, SortCriterion.FAVORITES_FIRST, {"c", "b"})
        
        assert uuids(projection) == ["b", "c", "a", "d"]
    
    @pytest.mark.parametrize("seed", range(10))
    def test_favorites_first_is_stable(self, seed):
        rng = random.Random(seed)
        records = [record(f"r{i}") for i in range(rng.randint(1, 30))]
        rng.shuffle(records)
        favorites = {r.uuid for r in records if rng.random() < 0.4}
        
        projection = apply_sort(records, SortCriterion.FAVORITES_FIRST, favorites)
        
        expected_favorites = [r.uuid for r in records if r.uuid in favorites]
        expected_rest = [r.uuid for r in records if r.uuid not in favorites]
        assert uuids(projection) == expected_favorites + expected_rest
    
    def test_descending_sorts_are_stable(self):
        records = [record("a", "5"), record("b", "5"), record("c", "7")]
        
        assert uuids(apply_sort(records, SortCriterion.PRICE_DESC, set())) == ["c", "a", "b"]


class TestProject:
    
    @pytest.mark.parametrize("sort", list(SortCriterion))
    @pytest.mark.parametrize("criterion", list(FilterCriterion))
    def test_deterministic(self, deals_batch, criterion, sort):
        records, _ = parse_batch(deals_batch, Mode.DEAL)
        favorites = {"deal-2", "deal-5"}
        
        first = project(records, criterion, sort, False, favorites)
        second = project(records, criterion, sort, False, favorites)
        
        assert first == second
    
    def test_input_is_not_mutated(self):
        records, _ = parse_batch(AcquisitionResult(data=get_sample_deals(8), meta={}), Mode.DEAL)
        snapshot = list(records)
        
        project(records, FilterCriterion.HOT_DEALS, SortCriterion.PRICE_DESC, True, {"deal-1"})
        
        assert records == snapshot
    
    def test_sort_runs_after_filter(self):
        records = [
            record("a", "30", temperature=150),
            record("b", "10", temperature=20),
            record("c", "20", temperature=300),
        ]
        
        projection = project(records, FilterCriterion.HOT_DEALS, SortCriterion.PRICE_ASC, False, set())
        
        assert uuids(projection) == ["c", "a"]
