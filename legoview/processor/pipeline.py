"""Filter/sort pipeline deriving the displayed projection.

The pipeline is a pure function of its inputs. Stages always run in the same
order (filter, favorites-only, sort) so the result does not depend on which
setting changed last.
"""

from decimal import Decimal
from typing import Callable, Container, Dict, Iterable, List, Optional

from legoview.models.data_models import FilterCriterion, Record, SortCriterion


BEST_DISCOUNT_MIN = 50
MOST_COMMENTED_MIN = 15
HOT_DEALS_MIN = 100

_ZERO = Decimal(0)


def _at_least(value: Optional[int], threshold: int) -> bool:
    return value is not None and value >= threshold


FILTER_PREDICATES: Dict[FilterCriterion, Callable[[Record], bool]] = {
    FilterCriterion.BEST_DISCOUNT: lambda r: _at_least(r.discount, BEST_DISCOUNT_MIN),
    FilterCriterion.MOST_COMMENTED: lambda r: _at_least(r.comments, MOST_COMMENTED_MIN),
    FilterCriterion.HOT_DEALS: lambda r: _at_least(r.temperature, HOT_DEALS_MIN),
}


def price_key(record: Record) -> Decimal:
    """Sort key for prices; unparseable prices count as zero."""
    return record.price if record.price is not None else _ZERO


def date_key(record: Record):
    # UNKNOWN_DATE is datetime.min, so unknown dates sort first
    return record.published


def apply_filter(records: Iterable[Record], criterion: FilterCriterion) -> List[Record]:
    predicate = FILTER_PREDICATES.get(criterion)
    if predicate is None:
        return list(records)
    return [record for record in records if predicate(record)]


def apply_favorites_only(records: Iterable[Record], favorites: Container[str]) -> List[Record]:
    return [record for record in records if record.uuid in favorites]


def apply_sort(
    records: List[Record],
    criterion: SortCriterion,
    favorites: Container[str],
) -> List[Record]:
    """
    Stable sort by the given criterion.
    
    Descending orders use reverse=True, which keeps equal keys in their
    original relative order.
    """
    if criterion is SortCriterion.PRICE_ASC:
        return sorted(records, key=price_key)
    if criterion is SortCriterion.PRICE_DESC:
        return sorted(records, key=price_key, reverse=True)
    if criterion is SortCriterion.DATE_ASC:
        return sorted(records, key=date_key)
    if criterion is SortCriterion.DATE_DESC:
        return sorted(records, key=date_key, reverse=True)
    if criterion is SortCriterion.FAVORITES_FIRST:
        return sorted(records, key=lambda r: 1 if r.uuid in favorites else 0, reverse=True)
    return list(records)


def project(
    records: Iterable[Record],
    active_filter: FilterCriterion,
    active_sort: SortCriterion,
    favorites_only: bool,
    favorites: Container[str],
) -> List[Record]:
    """
    Derive the ordered projection for display.
    
    Args:
        records: Current batch
        active_filter: Filter to apply (NONE keeps everything)
        active_sort: Ordering to apply last
        favorites_only: Keep only favorited records
        favorites: Favorited uuids
        
    Returns:
        New list; the input is never mutated
    """
    projection = apply_filter(records, active_filter)
    if favorites_only:
        projection = apply_favorites_only(projection, favorites)
    return apply_sort(projection, active_sort, favorites)
