"""Structured logging for the view-state engine."""

import json
import logging
from typing import Optional


class StructuredLogger:
    """Structured logger with uniform schema."""
    
    def __init__(self, name: str = "legoview", level: str = "INFO", structured: bool = True):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.structured = structured
        
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter('%(message)s'))
            self.logger.addHandler(handler)
    
    def log(self, event: str, level: int = logging.INFO, **kwargs) -> None:
        """
        Log structured event.
        
        Standard keys: event, mode, set_id, page, size, request_id, status,
                      attempt, elapsed_ms, error, records
        """
        log_data = {"event": event, **kwargs}
        if self.structured:
            self.logger.log(level, json.dumps(log_data, default=str))
        else:
            details = " ".join(f"{k}={v}" for k, v in kwargs.items())
            self.logger.log(level, f"{event} {details}".rstrip())
    
    def acquisition_start(self, mode: str, set_id: Optional[str], page: int, size: int, request_id: int) -> None:
        self.log("acquisition_start", mode=mode, set_id=set_id, page=page, size=size, request_id=request_id)
    
    def acquisition_success(self, mode: str, page: int, records: int, elapsed_ms: float) -> None:
        self.log("acquisition_success", mode=mode, page=page, records=records, elapsed_ms=elapsed_ms)
    
    def acquisition_retry(self, url: str, status: Optional[int], attempt: int, delay: float) -> None:
        self.log("acquisition_retry", level=logging.WARNING, url=url, status=status, attempt=attempt, delay=delay)
    
    def acquisition_failure(self, url: str, status: Optional[int], error: str) -> None:
        self.log("acquisition_failure", level=logging.ERROR, url=url, status=status, error=error)
    
    def malformed_batch(self, mode: str, error: str) -> None:
        self.log("malformed_batch", level=logging.ERROR, mode=mode, error=error)
    
    def stale_response(self, request_id: int, latest_request_id: int) -> None:
        self.log("stale_response", level=logging.DEBUG, request_id=request_id, latest_request_id=latest_request_id)
    
    def invalid_event(self, event_type: str, error: str) -> None:
        self.log("invalid_event", level=logging.WARNING, event_type=event_type, error=error)
    
    def favorite_toggled(self, uuid: str, favorite: bool) -> None:
        self.log("favorite_toggled", level=logging.DEBUG, uuid=uuid, favorite=favorite)
    
    def projection_ready(self, records: int, current_page: int, page_count: int) -> None:
        self.log("projection_ready", records=records, current_page=current_page, page_count=page_count)
