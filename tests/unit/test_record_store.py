"""Unit tests for RecordStore batch validation."""

from unittest.mock import Mock

import pytest

from legoview.models.data_models import (
    EMPTY_PAGINATION,
    AcquisitionResult,
    ErrorKind,
    Mode,
    Pagination,
)
from legoview.models.errors import MalformedBatch
from legoview.processor.record_store import RecordStore, parse_batch, parse_pagination
from tests.fixtures.sample_data import make_deal


class TestParsePagination:
    
    def test_full_meta(self):
        pagination = parse_pagination(
            {"currentPage": 2, "pageCount": 5, "pageSize": 6, "count": 28}, record_count=6
        )
        assert pagination == Pagination(current_page=2, page_count=5, count=28, page_size=6)
    
    def test_missing_fields_default_to_single_page(self):
        pagination = parse_pagination({}, record_count=4)
        assert pagination == Pagination(current_page=1, page_count=1, count=4)
    
    def test_numeric_strings_are_accepted(self):
        pagination = parse_pagination({"currentPage": "3", "pageCount": "4"}, record_count=0)
        assert pagination.current_page == 3
        assert pagination.page_count == 4
    
    def test_current_page_is_clamped(self):
        pagination = parse_pagination({"currentPage": 9, "pageCount": 3}, record_count=0)
        assert pagination.current_page == 3
        
        pagination = parse_pagination({"currentPage": 0, "pageCount": 0}, record_count=0)
        assert pagination.current_page == 1
        assert pagination.page_count == 1
    
    @pytest.mark.parametrize("meta", [
        {"currentPage": "two"},
        {"count": [1]},
        {"pageCount": True},
        {"currentPage": float("inf")},
        {"pageCount": float("nan")},
    ])
    def test_non_numeric_fields_are_malformed(self, meta):
        with pytest.raises(MalformedBatch):
            parse_pagination(meta, record_count=0)


class TestParseBatch:
    
    def test_missing_data(self):
        with pytest.raises(MalformedBatch):
            parse_batch(AcquisitionResult(data=None, meta={}), Mode.DEAL)
    
    def test_data_not_a_list(self):
        with pytest.raises(MalformedBatch):
            parse_batch(AcquisitionResult(data={"result": []}, meta={}), Mode.DEAL)
    
    def test_meta_not_an_object(self):
        with pytest.raises(MalformedBatch):
            parse_batch(AcquisitionResult(data=[], meta=[1, 2]), Mode.DEAL)
    
    def test_non_object_record(self):
        with pytest.raises(MalformedBatch):
            parse_batch(AcquisitionResult(data=[make_deal(), "oops"], meta={}), Mode.DEAL)


class TestRecordStore:
    
    def test_initial_state_is_empty(self):
        store = RecordStore()
        assert store.records == []
        assert store.pagination == EMPTY_PAGINATION
    
    def test_set_batch_accepts_valid_batch(self, deals_batch):
        store = RecordStore()
        
        records, pagination = store.set_batch(deals_batch, Mode.DEAL)
        
        assert len(records) == 6
        assert all(r.kind is Mode.DEAL for r in records)
        assert pagination == Pagination(current_page=1, page_count=3, count=18, page_size=6)
    
    def test_malformed_batch_fails_soft(self, deals_batch):
        logger = Mock()
        store = RecordStore(logger=logger)
        store.set_batch(deals_batch, Mode.DEAL)
        
        records, pagination = store.set_batch(AcquisitionResult(data=None, meta=None), Mode.DEAL)
        
        assert records == []
        assert pagination == Pagination(current_page=1, page_count=1, count=0)
        assert len(store.errors) == 1
        assert store.errors[0].kind is ErrorKind.MALFORMED_BATCH
        logger.malformed_batch.assert_called_once()
    
    def test_no_partial_acceptance(self, deals_batch):
        store = RecordStore()
        store.set_batch(deals_batch, Mode.DEAL)
        
        bad = AcquisitionResult(data=[make_deal(uuid="ok"), 42], meta={"count": 2})
        records, _ = store.set_batch(bad, Mode.DEAL)
        
        assert records == []
    
    def test_available_set_ids_in_first_seen_order(self):
        store = RecordStore()
        raw = AcquisitionResult(
            data=[make_deal(id="75370"), make_deal(id="42151"), make_deal(id="75370")],
            meta={},
        )
        store.set_batch(raw, Mode.DEAL)
        
        assert store.available_set_ids() == ["75370", "42151"]
    
    def test_available_set_ids_empty_for_sales(self, sales_batch):
        store = RecordStore()
        store.set_batch(sales_batch, Mode.SALE)
        
        assert store.available_set_ids() == []
    
    def test_infinite_meta_fails_soft(self, deals_batch):
        store = RecordStore()
        store.set_batch(deals_batch, Mode.DEAL)
        
        records, pagination = store.set_batch(
            AcquisitionResult(data=[], meta={"currentPage": float("inf")}), Mode.DEAL
        )
        
        assert records == []
        assert pagination == EMPTY_PAGINATION
        assert store.errors[-1].kind is ErrorKind.MALFORMED_BATCH
    
    def test_unparseable_published_is_kept_as_unknown_date(self):
        store = RecordStore()
        raw = AcquisitionResult(data=[make_deal(uuid="a", published="²")], meta={})
        
        records, _ = store.set_batch(raw, Mode.DEAL)
        
        assert [r.uuid for r in records] == ["a"]
        assert not records[0].has_known_date
        assert store.errors == []
