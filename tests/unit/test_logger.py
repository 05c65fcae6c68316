"""Unit tests for StructuredLogger."""

import json
import logging

from legoview.monitoring.logger import StructuredLogger


def test_structured_events_are_json(caplog):
    logger = StructuredLogger(name="legoview.test.json", level="DEBUG")
    
    with caplog.at_level(logging.DEBUG, logger="legoview.test.json"):
        logger.acquisition_start(mode="deal", set_id=None, page=2, size=6, request_id=7)
        logger.stale_response(request_id=6, latest_request_id=7)
    
    first, second = [json.loads(r.getMessage()) for r in caplog.records]
    assert first == {
        "event": "acquisition_start",
        "mode": "deal",
        "set_id": None,
        "page": 2,
        "size": 6,
        "request_id": 7,
    }
    assert second["event"] == "stale_response"
    assert caplog.records[1].levelno == logging.DEBUG


def test_failures_use_error_level(caplog):
    logger = StructuredLogger(name="legoview.test.levels", level="INFO")
    
    with caplog.at_level(logging.INFO, logger="legoview.test.levels"):
        logger.malformed_batch(mode="sale", error="missing data")
        logger.invalid_event(event_type="PageChanged", error="bad page")
    
    assert [r.levelno for r in caplog.records] == [logging.ERROR, logging.WARNING]


def test_plain_text_mode(caplog):
    logger = StructuredLogger(name="legoview.test.plain", level="INFO", structured=False)
    
    with caplog.at_level(logging.INFO, logger="legoview.test.plain"):
        logger.projection_ready(records=3, current_page=1, page_count=2)
    
    assert caplog.records[0].getMessage() == "projection_ready records=3 current_page=1 page_count=2"
