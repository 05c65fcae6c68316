"""Core data models for the deals/sales view-state engine."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional


# Sorts before every real timestamp
UNKNOWN_DATE = datetime.min.replace(tzinfo=timezone.utc)


class Mode(Enum):
    """Which record stream a batch came from."""
    DEAL = "deal"
    SALE = "sale"


class FilterCriterion(Enum):
    """Mutually exclusive record filters."""
    NONE = "none"
    BEST_DISCOUNT = "best-discount"
    MOST_COMMENTED = "most-commented"
    HOT_DEALS = "hot-deals"


class SortCriterion(Enum):
    """Projection orderings."""
    NONE = "none"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    DATE_ASC = "date-asc"
    DATE_DESC = "date-desc"
    FAVORITES_FIRST = "favorites"


class ErrorKind(Enum):
    """Diagnostic error categories."""
    ACQUISITION_FAILURE = "acquisition_failure"
    MALFORMED_BATCH = "malformed_batch"
    INVALID_EVENT_PAYLOAD = "invalid_event_payload"


@dataclass(frozen=True)
class Record:
    """Unified deal/sale record."""
    kind: Mode
    id: str
    uuid: str
    title: str
    link: str
    price: Optional[Decimal]  # None when the source value is unparseable
    discount: Optional[int] = None
    temperature: Optional[int] = None
    comments: Optional[int] = None
    published: datetime = UNKNOWN_DATE
    photo: Optional[str] = None
    retail: Optional[Decimal] = None
    community: Optional[str] = None

    @property
    def has_known_date(self) -> bool:
        return self.published != UNKNOWN_DATE


@dataclass(frozen=True)
class Pagination:
    """Pagination metadata for the current batch."""
    current_page: int = 1
    page_count: int = 1
    count: int = 0
    page_size: Optional[int] = None

    def __post_init__(self):
        if self.page_count < 1:
            raise ValueError(f"page_count must be >= 1, got: {self.page_count}")
        if not 1 <= self.current_page <= self.page_count:
            raise ValueError(
                f"current_page must be in [1, {self.page_count}], got: {self.current_page}"
            )
        if self.count < 0:
            raise ValueError(f"count must be >= 0, got: {self.count}")


EMPTY_PAGINATION = Pagination(current_page=1, page_count=1, count=0)


@dataclass
class AcquisitionResult:
    """Raw acquisition response as handed to the record store."""
    data: Optional[List[Any]]
    meta: Optional[Dict[str, Any]]
    request_id: int = 0
    error: Optional[str] = None  # set when acquisition itself failed

    @classmethod
    def failed(cls, error: str) -> "AcquisitionResult":
        return cls(data=None, meta=None, error=error)


@dataclass
class ErrorRecord:
    """Error information kept on the diagnostic channel."""
    kind: ErrorKind
    detail: str
    timestamp: str  # ISO-8601 UTC


@dataclass
class ViewState:
    """Everything the controller needs to derive a projection."""
    records: List[Record] = field(default_factory=list)
    pagination: Pagination = EMPTY_PAGINATION
    active_filter: FilterCriterion = FilterCriterion.NONE
    active_sort: SortCriterion = SortCriterion.NONE
    favorites_only: bool = False
    mode: Mode = Mode.DEAL
    page_size: int = 6
    set_id: Optional[str] = None
    projection: List[Record] = field(default_factory=list)
