"""View controller driving acquisition, the record store and the pipeline."""

from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, List, Optional, Protocol

from legoview.models.data_models import (
    AcquisitionResult,
    ErrorKind,
    ErrorRecord,
    FilterCriterion,
    Mode,
    Pagination,
    Record,
    SortCriterion,
    ViewState,
)
from legoview.models.errors import InvalidEventPayload
from legoview.monitoring.logger import StructuredLogger
from legoview.processor.favorites import FavoritesSet
from legoview.processor.pipeline import project
from legoview.processor.record_store import RecordStore
from legoview.view.events import (
    EventDispatcher,
    FavoriteToggled,
    FavoritesOnlyToggled,
    FilterToggled,
    ModeChanged,
    PageChanged,
    PageSizeChanged,
    SortChanged,
)


class RecordSource(Protocol):
    """Acquisition collaborator (LegoApiClient or a test double)."""
    
    def fetch_records(
        self,
        mode: Mode,
        set_id: Optional[str],
        page: int,
        size: int
    ) -> Awaitable[AcquisitionResult]:
        ...


ProjectionCallback = Callable[[List[Record], Pagination], None]


def _positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise InvalidEventPayload(f"{name} must be a positive integer, got: {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidEventPayload(f"{name} must be a positive integer, got: {value!r}") from None
    if isinstance(value, float) and number != value:
        raise InvalidEventPayload(f"{name} must be a positive integer, got: {value!r}")
    if number < 1:
        raise InvalidEventPayload(f"{name} must be a positive integer, got: {value!r}")
    return number


def _criterion(enum_type, value: Any):
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError:
        raise InvalidEventPayload(f"unknown {enum_type.__name__}: {value!r}") from None


class ViewController:
    """
    State machine over the deals/sales view.
    
    Page, page-size and mode events go through the acquisition collaborator;
    filter, sort and favorite events only re-project the current batch.
    Acquisitions are tagged with increasing request ids and a result is
    applied only while its id is the latest issued, so a slow reply can never
    overwrite a newer one.
    """
    
    def __init__(
        self,
        source: RecordSource,
        on_projection_ready: Optional[ProjectionCallback] = None,
        page_size: int = 6,
        logger: Optional[StructuredLogger] = None
    ):
        """
        Initialize controller and register its event handlers.
        
        Args:
            source: Acquisition collaborator
            on_projection_ready: Rendering callback, called once per projection
            page_size: Initial page size
            logger: Optional structured logger
        """
        self.source = source
        self.on_projection_ready = on_projection_ready
        self.logger = logger
        self.state = ViewState(page_size=page_size)
        self.favorites = FavoritesSet()
        self.store = RecordStore(logger=logger)
        self.errors: List[ErrorRecord] = []
        self._requested_page = 1
        self._requested_mode = self.state.mode
        self._requested_set_id: Optional[str] = None
        self._latest_request_id = 0
        
        self.dispatcher = EventDispatcher(logger=logger)
        self.dispatcher.register(PageChanged, self._on_page_changed)
        self.dispatcher.register(PageSizeChanged, self._on_page_size_changed)
        self.dispatcher.register(ModeChanged, self._on_mode_changed)
        self.dispatcher.register(FilterToggled, self._on_filter_toggled)
        self.dispatcher.register(SortChanged, self._on_sort_changed)
        self.dispatcher.register(FavoriteToggled, self._on_favorite_toggled)
        self.dispatcher.register(FavoritesOnlyToggled, self._on_favorites_only_toggled)
    
    async def start(self) -> None:
        """Bootstrap with the first deals page."""
        await self.dispatch(PageChanged(1))
    
    async def dispatch(self, event: Any) -> None:
        """Handle one event; invalid payloads are logged and leave state untouched."""
        try:
            await self.dispatcher.dispatch(event)
        except InvalidEventPayload as e:
            if self.logger:
                self.logger.invalid_event(event_type=type(event).__name__, error=str(e))
            self._record_error(e.kind, str(e))
    
    @property
    def latest_request_id(self) -> int:
        return self._latest_request_id
    
    @property
    def all_errors(self) -> List[ErrorRecord]:
        """Controller and record store diagnostics in arrival order."""
        return sorted(self.errors + self.store.errors, key=lambda e: e.timestamp)
    
    def available_set_ids(self) -> List[str]:
        return self.store.available_set_ids()
    
    # Acquisition-triggering events
    
    async def _on_page_changed(self, event: PageChanged) -> None:
        page = _positive_int(event.page, "page")
        await self._acquire(page=page, size=self.state.page_size)
    
    async def _on_page_size_changed(self, event: PageSizeChanged) -> None:
        size = _positive_int(event.size, "size")
        self.state.page_size = size
        await self._acquire(page=self._requested_page, size=size)
    
    async def _on_mode_changed(self, event: ModeChanged) -> None:
        set_id = event.set_id
        if set_id is not None and not isinstance(set_id, (str, int)):
            raise InvalidEventPayload(f"set id must be a string, got: {set_id!r}")
        set_id = str(set_id).strip() if set_id is not None else ""
        
        self._requested_set_id = set_id or None
        self._requested_mode = Mode.SALE if set_id else Mode.DEAL
        await self._acquire(page=1, size=self.state.page_size)
    
    async def _acquire(self, page: int, size: int) -> None:
        self._latest_request_id += 1
        request_id = self._latest_request_id
        self._requested_page = page
        mode = self._requested_mode
        set_id = self._requested_set_id
        
        if self.logger:
            self.logger.acquisition_start(
                mode=mode.value, set_id=set_id, page=page, size=size, request_id=request_id
            )
        
        try:
            result = await self.source.fetch_records(mode, set_id, page, size)
        except Exception as e:
            # Sources are expected to return failed results instead of raising
            if self.logger:
                self.logger.acquisition_failure(url=mode.value, status=None, error=str(e))
            result = AcquisitionResult.failed(str(e))
        result.request_id = request_id
        
        if request_id != self._latest_request_id:
            if self.logger:
                self.logger.stale_response(
                    request_id=request_id, latest_request_id=self._latest_request_id
                )
            return
        
        self._apply_batch(result, mode, set_id)
    
    def _apply_batch(self, result: AcquisitionResult, mode: Mode, set_id: Optional[str]) -> None:
        # Mode and records change together, only once the batch is applied
        self.state.mode = mode
        self.state.set_id = set_id
        if result.error is not None:
            self._record_error(ErrorKind.ACQUISITION_FAILURE, result.error)
            self.store.mode = mode
            self.store.reset()
        else:
            self.store.set_batch(result, mode)
        
        self.state.records = list(self.store.records)
        self.state.pagination = self.store.pagination
        if self.state.pagination.page_size:
            self.state.page_size = self.state.pagination.page_size
        self._reproject()
    
    # Projection-only events
    
    async def _on_filter_toggled(self, event: FilterToggled) -> None:
        criterion = _criterion(FilterCriterion, event.criterion)
        if criterion is self.state.active_filter:
            self.state.active_filter = FilterCriterion.NONE
        else:
            self.state.active_filter = criterion
        self._reproject()
    
    async def _on_sort_changed(self, event: SortChanged) -> None:
        self.state.active_sort = _criterion(SortCriterion, event.criterion)
        self._reproject()
    
    async def _on_favorite_toggled(self, event: FavoriteToggled) -> None:
        if not isinstance(event.uuid, str) or not event.uuid:
            raise InvalidEventPayload(f"uuid must be a non-empty string, got: {event.uuid!r}")
        favorite = self.favorites.toggle(event.uuid)
        if self.logger:
            self.logger.favorite_toggled(uuid=event.uuid, favorite=favorite)
        self._reproject()
    
    async def _on_favorites_only_toggled(self, event: FavoritesOnlyToggled) -> None:
        self.state.favorites_only = not self.state.favorites_only
        self._reproject()
    
    def _reproject(self) -> None:
        self.state.projection = project(
            self.state.records,
            self.state.active_filter,
            self.state.active_sort,
            self.state.favorites_only,
            self.favorites,
        )
        pagination = self.state.pagination
        if self.logger:
            self.logger.projection_ready(
                records=len(self.state.projection),
                current_page=pagination.current_page,
                page_count=pagination.page_count,
            )
        if self.on_projection_ready:
            self.on_projection_ready(list(self.state.projection), pagination)
    
    def _record_error(self, kind: ErrorKind, detail: str) -> None:
        self.errors.append(ErrorRecord(
            kind=kind,
            detail=detail,
            timestamp=datetime.now(timezone.utc).isoformat()
        ))
