"""Normalizer converting raw deal and sale payloads to the unified Record.

Deals and sales come from different upstream sites and disagree on types:
prices may be numbers or strings with a currency sign, deal timestamps are
epoch seconds while sale timestamps are RFC-1123 strings. Every extractor here
is lenient and never raises on bad field values.
"""

import math
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional

from legoview.models.data_models import UNKNOWN_DATE, Mode, Record


def parse_price(value: Any) -> Optional[Decimal]:
    """
    Parse a price from a number or a loosely formatted string.
    
    Handles "10", 10.5, "12,99 €", "$1,299.00". Negative or unparseable
    values yield None.
    
    Args:
        value: Raw price value
        
    Returns:
        Decimal price or None
    """
    if value is None or isinstance(value, bool):
        return None
    
    if isinstance(value, (int, float)):
        if not math.isfinite(value) or value < 0:
            return None
        return Decimal(str(value))
    
    if isinstance(value, str):
        cleaned = value.strip().replace("$", "").replace("€", "").replace("£", "")
        cleaned = cleaned.replace(" ", "").replace(" ", "")
        # Comma as decimal separator (European format)
        if "," in cleaned and "." not in cleaned:
            cleaned = cleaned.replace(",", ".")
        # Thousand separators
        cleaned = cleaned.replace(",", "")
        try:
            price = Decimal(cleaned)
        except InvalidOperation:
            return None
        if not price.is_finite() or price < 0:
            return None
        return price
    
    return None


def parse_published(value: Any) -> datetime:
    """
    Normalize a publication timestamp to an aware UTC datetime.
    
    Deals carry epoch seconds (int, or a digit string), sales carry
    RFC-1123 strings such as "Sat, 18 Jan 2025 16:19:10 GMT". ISO-8601
    strings are accepted as well. Anything else yields UNKNOWN_DATE.
    """
    if value is None or isinstance(value, bool):
        return UNKNOWN_DATE
    
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return UNKNOWN_DATE
    
    if not isinstance(value, str) or not value.strip():
        return UNKNOWN_DATE
    
    text = value.strip()
    if text.isdecimal() and text.isascii():
        return parse_published(int(text))
    
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        parsed = None
    
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return UNKNOWN_DATE
    
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _extract_int(raw: Dict, *fields: str) -> Optional[int]:
    """Extract an integer from the first present field ("-35%" -> -35)."""
    for name in fields:
        value = raw.get(name)
        if value is None or isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            if not math.isfinite(value):
                continue
            return int(value)
        if isinstance(value, str):
            cleaned = value.strip().rstrip("%°").strip()
            try:
                return int(float(cleaned))
            except (ValueError, OverflowError):
                continue
    return None


def _extract_text(raw: Dict, *fields: str, default: str = "") -> str:
    for name in fields:
        value = raw.get(name)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return default


def normalize_record(raw: Dict, kind: Mode) -> Record:
    """
    Normalize one raw deal or sale.
    
    The variant tag comes from the batch context, never from the payload
    shape. Discounts are stored as positive percentages (Dealabs publishes
    them as "-35%").
    
    Args:
        raw: Raw record object from the API
        kind: Mode of the batch the record belongs to
        
    Returns:
        Normalized Record
    """
    discount = _extract_int(raw, "discount")
    if discount is not None:
        discount = min(abs(discount), 100)
    
    return Record(
        kind=kind,
        id=_extract_text(raw, "id", "setId", default="unknown"),
        uuid=_extract_text(raw, "uuid", "_id", "link", default=""),
        title=_extract_text(raw, "title", "name", default="Unknown item"),
        link=_extract_text(raw, "link", "url"),
        price=parse_price(raw.get("price")),
        discount=discount,
        temperature=_extract_int(raw, "temperature"),
        comments=_extract_int(raw, "comments", "commentCount"),
        published=parse_published(raw.get("published", raw.get("date"))),
        photo=raw.get("photo") if isinstance(raw.get("photo"), str) else None,
        retail=parse_price(raw.get("retail")),
        community=raw.get("community") if isinstance(raw.get("community"), str) else None,
    )


def normalize_batch(raw_records: List[Dict], kind: Mode) -> List[Record]:
    """Normalize a batch, preserving order."""
    return [normalize_record(raw, kind) for raw in raw_records]
