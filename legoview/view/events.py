"""View events and the dispatcher delivering them to the controller."""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Type, Union

from legoview.models.data_models import FilterCriterion, SortCriterion
from legoview.monitoring.logger import StructuredLogger


@dataclass(frozen=True)
class PageChanged:
    page: Any


@dataclass(frozen=True)
class PageSizeChanged:
    size: Any


@dataclass(frozen=True)
class FilterToggled:
    criterion: Union[FilterCriterion, str]


@dataclass(frozen=True)
class SortChanged:
    criterion: Union[SortCriterion, str]


@dataclass(frozen=True)
class FavoriteToggled:
    uuid: Any


@dataclass(frozen=True)
class FavoritesOnlyToggled:
    pass


@dataclass(frozen=True)
class ModeChanged:
    """Select a set id to browse its sales, or None to go back to deals."""
    set_id: Optional[Any] = None


Handler = Callable[[Any], Awaitable[None]]


class EventDispatcher:
    """
    Routes each event to the single handler registered for its type.
    
    Handlers are registered once, at startup. Events without a handler are
    logged and dropped.
    """
    
    def __init__(self, logger: Optional[StructuredLogger] = None):
        self.logger = logger
        self._handlers: Dict[Type, Handler] = {}
    
    def register(self, event_type: Type, handler: Handler) -> None:
        """
        Register the handler for an event type.
        
        Raises:
            ValueError: If the type already has a handler
        """
        if event_type in self._handlers:
            raise ValueError(f"handler already registered for {event_type.__name__}")
        self._handlers[event_type] = handler
    
    async def dispatch(self, event: Any) -> None:
        handler = self._handlers.get(type(event))
        if handler is None:
            if self.logger:
                self.logger.invalid_event(
                    event_type=type(event).__name__,
                    error="no handler registered"
                )
            return
        await handler(event)
