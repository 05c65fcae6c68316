"""Record store holding the current batch and its pagination metadata."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from legoview.models.data_models import (
    EMPTY_PAGINATION,
    AcquisitionResult,
    ErrorRecord,
    Mode,
    Pagination,
    Record,
)
from legoview.models.errors import MalformedBatch
from legoview.monitoring.logger import StructuredLogger
from legoview.processor.normalizer import normalize_batch


def _meta_int(meta: Dict[str, Any], key: str, default: Optional[int]) -> Optional[int]:
    value = meta.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        raise MalformedBatch(f"meta.{key} is not numeric: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise MalformedBatch(f"meta.{key} is not numeric: {value!r}") from None


def parse_pagination(meta: Dict[str, Any], record_count: int) -> Pagination:
    """
    Build Pagination from API metadata.
    
    Missing fields fall back to a single page holding the batch; the current
    page is clamped into [1, pageCount].
    
    Raises:
        MalformedBatch: If a present field is not numeric
    """
    current_page = max(1, _meta_int(meta, "currentPage", 1))
    page_count = max(1, _meta_int(meta, "pageCount", current_page))
    count = max(0, _meta_int(meta, "count", record_count))
    page_size = _meta_int(meta, "pageSize", None)
    
    return Pagination(
        current_page=min(current_page, page_count),
        page_count=page_count,
        count=count,
        page_size=page_size if page_size and page_size > 0 else None,
    )


def parse_batch(raw: AcquisitionResult, mode: Mode) -> Tuple[List[Record], Pagination]:
    """
    Validate and normalize a whole batch.
    
    Raises:
        MalformedBatch: If data is not a list of objects or meta is not an object
    """
    if not isinstance(raw.data, list):
        raise MalformedBatch(f"expected a list of records, got {type(raw.data).__name__}")
    if not isinstance(raw.meta, dict):
        raise MalformedBatch(f"expected a metadata object, got {type(raw.meta).__name__}")
    
    for position, item in enumerate(raw.data):
        if not isinstance(item, dict):
            raise MalformedBatch(
                f"record {position} is {type(item).__name__}, expected an object"
            )
    
    try:
        records = normalize_batch(raw.data, mode)
    except (TypeError, ValueError, OverflowError) as e:
        raise MalformedBatch(f"record normalization failed: {e}") from e
    return records, parse_pagination(raw.meta, len(records))


class RecordStore:
    """
    Holds the current record batch.
    
    Batches are accepted whole or not at all: a malformed response replaces
    the store with the empty state and is reported, never raised.
    """
    
    def __init__(self, logger: Optional[StructuredLogger] = None):
        self.logger = logger
        self.records: List[Record] = []
        self.pagination: Pagination = EMPTY_PAGINATION
        self.mode: Mode = Mode.DEAL
        self.errors: List[ErrorRecord] = []
    
    def set_batch(self, raw: AcquisitionResult, mode: Mode) -> Tuple[List[Record], Pagination]:
        """
        Replace the current batch.
        
        Args:
            raw: Acquisition result with data and meta
            mode: Mode the batch was acquired for
            
        Returns:
            Tuple of (records, pagination) now held by the store
        """
        self.mode = mode
        try:
            self.records, self.pagination = parse_batch(raw, mode)
        except MalformedBatch as e:
            if self.logger:
                self.logger.malformed_batch(mode=mode.value, error=str(e))
            self.errors.append(ErrorRecord(
                kind=e.kind,
                detail=str(e),
                timestamp=datetime.now(timezone.utc).isoformat()
            ))
            self.reset()
        
        return self.records, self.pagination
    
    def reset(self) -> None:
        """Return to the empty state."""
        self.records = []
        self.pagination = EMPTY_PAGINATION
    
    def available_set_ids(self) -> List[str]:
        """Distinct deal set ids of the current batch in first-seen order."""
        if self.mode is not Mode.DEAL:
            return []
        return list(dict.fromkeys(record.id for record in self.records))
