"""JSON formatter for view projections.

Produces a snapshot of what the renderer is showing:

{
    "mode": "deal",
    "set_id": null,
    "pagination": {"current_page": 1, "page_count": 12, "count": 70, "page_size": 6},
    "filter": "best-discount",
    "sort": "price-asc",
    "favorites_only": false,
    "records": [
        {"id": "42151", "uuid": "...", "price": "19.99", "published": "2025-01-18T16:19:10+00:00",
         "favorite": true, ...}
    ]
}
"""

import json
from pathlib import Path
from typing import Any, Container, Dict, List

from legoview.models.data_models import Pagination, Record, ViewState


class ProjectionFormatter:
    """Formats a view state's projection as JSON."""
    
    def format(self, state: ViewState, favorites: Container[str]) -> Dict[str, Any]:
        """
        Format the current projection as a JSON-serializable dictionary.
        
        Args:
            state: View state holding the projection
            favorites: Favorited uuids, used for the favorite flag
        """
        return {
            "mode": state.mode.value,
            "set_id": state.set_id,
            "pagination": self._format_pagination(state.pagination),
            "filter": state.active_filter.value,
            "sort": state.active_sort.value,
            "favorites_only": state.favorites_only,
            "records": self._format_records(state.projection, favorites),
        }
    
    def _format_pagination(self, pagination: Pagination) -> Dict[str, Any]:
        return {
            "current_page": pagination.current_page,
            "page_count": pagination.page_count,
            "count": pagination.count,
            "page_size": pagination.page_size,
        }
    
    def _format_records(self, records: List[Record], favorites: Container[str]) -> list:
        return [
            {
                "kind": record.kind.value,
                "id": record.id,
                "uuid": record.uuid,
                "title": record.title,
                "link": record.link,
                "price": str(record.price) if record.price is not None else None,
                "discount": record.discount,
                "temperature": record.temperature,
                "comments": record.comments,
                "published": record.published.isoformat() if record.has_known_date else None,
                "favorite": record.uuid in favorites,
            }
            for record in records
        ]
    
    def save(self, state: ViewState, favorites: Container[str], path: str = "out/projection.json") -> None:
        """
        Save the formatted projection, creating parent directories as needed.
        """
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(self.format(state, favorites), f, indent=2, ensure_ascii=False)
