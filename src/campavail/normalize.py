"""Map stored documents onto the canonical records.

Documents written by older clients use different field names for the same
data (``checkIn`` vs ``checkInDate``, ``reasonCategory`` vs ``category``,
timestamps as ISO strings or ``{"seconds": ...}`` mappings). This is the only
place that knows about those shapes; everything past it works on the ORM
records.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from campavail.dates import to_calendar_day
from campavail.models.blocked_date import BLOCK_CATEGORIES, BlockedDateRange
from campavail.models.booking import BOOKING_STATUSES, Booking
from campavail.models.camp import CAMP_STATUSES, Camp
from campavail.store import SQLRecordStore

logger = logging.getLogger(__name__)


def _first(doc: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = doc.get(key)
        if value not in (None, ""):
            return value
    return default


def _timestamp(value: Any) -> datetime:
    if value in (None, ""):
        return datetime.now(timezone.utc)
    if isinstance(value, datetime):
        return value
    if isinstance(value, dict) and "seconds" in value:
        return datetime.fromtimestamp(value["seconds"], tz=timezone.utc)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _required(doc: dict[str, Any], *keys: str) -> Any:
    value = _first(doc, *keys)
    if value is None:
        raise ValueError(f"Document {doc.get('id')!r} is missing {keys[0]!r}")
    return value


def booking_from_document(doc: dict[str, Any]) -> Booking:
    """Build a Booking from either the current or the legacy document shape."""
    check_in = to_calendar_day(_required(doc, "checkInDate", "checkIn", "check_in_date"))
    raw_check_out = _first(doc, "checkOut", "checkOutDate", "check_out_date")
    check_out = to_calendar_day(raw_check_out) if raw_check_out else check_in + timedelta(days=1)

    status = str(_first(doc, "status", default="pending")).lower()
    if status not in BOOKING_STATUSES:
        raise ValueError(f"Booking {doc.get('id')!r} has unknown status {status!r}")

    return Booking(
        id=str(_required(doc, "id")),
        camp_id=str(_required(doc, "campId", "camp_id")),
        user_id=_first(doc, "userId", "user_id"),
        guest_email=_first(doc, "userEmail", "guest_email"),
        host_id=_first(doc, "hostId", "host_id"),
        check_in_date=check_in,
        check_out_date=check_out,
        status=status,
        guests=int(_first(doc, "guests", "numGuests", default=1)),
        total_price=float(_first(doc, "totalPrice", "total_price", default=0.0)),
        payment_method=_first(doc, "paymentMethod", "payment_method"),
        created_at=_timestamp(doc.get("createdAt")),
    )


def blocked_range_from_document(doc: dict[str, Any]) -> BlockedDateRange:
    start = to_calendar_day(_required(doc, "startDate", "start_date"))
    end = to_calendar_day(_required(doc, "endDate", "end_date"))
    if end < start:
        raise ValueError(f"Blocked range {doc.get('id')!r} ends before it starts")

    category = _first(doc, "reasonCategory", "category", default="other")
    if category not in BLOCK_CATEGORIES:
        logger.warning("Unknown block category %r on %s, using 'other'", category, doc.get("id"))
        category = "other"

    host_id = str(_required(doc, "hostId", "host_id"))
    return BlockedDateRange(
        id=str(_required(doc, "id")),
        camp_id=str(_required(doc, "campId", "camp_id")),
        host_id=host_id,
        start_date=start,
        end_date=end,
        reason=_first(doc, "reason", default="Not specified"),
        category=category,
        created_by=_first(doc, "createdBy", "created_by", default=host_id),
        notes=_first(doc, "notes"),
        created_at=_timestamp(doc.get("createdAt")),
    )


def camp_from_document(doc: dict[str, Any]) -> Camp:
    # Legacy camps were written without a status and were all live
    status = _first(doc, "status", default="active")
    if status not in CAMP_STATUSES:
        raise ValueError(f"Camp {doc.get('id')!r} has unknown status {status!r}")
    return Camp(
        id=str(_required(doc, "id")),
        host_id=str(_required(doc, "hostId", "host_id")),
        title=_first(doc, "title", "name", default="Untitled camp"),
        host_email=_first(doc, "hostEmail", "host_email"),
        status=status,
        check_in_time=_first(doc, "checkInTime", "check_in_time", default="08:00"),
        check_out_time=_first(doc, "checkOutTime", "check_out_time", default="03:00"),
        created_at=_timestamp(doc.get("createdAt")),
    )


def load_export(path: Path) -> dict[str, list[dict[str, Any]]]:
    """Read a JSON export keyed by collection name."""
    with open(path) as f:
        return json.load(f)


def normalize_export(payload: dict[str, list[dict[str, Any]]]) -> list[Camp | Booking | BlockedDateRange]:
    """Normalize an export's collections, camps first so foreign keys resolve."""
    records: list[Camp | Booking | BlockedDateRange] = []
    records.extend(camp_from_document(doc) for doc in payload.get("camps", []))
    records.extend(booking_from_document(doc) for doc in payload.get("bookings", []))
    records.extend(blocked_range_from_document(doc) for doc in payload.get("blockedDates", []))
    return records


def import_documents(store: SQLRecordStore, payload: dict[str, list[dict[str, Any]]]) -> int:
    """Normalize and persist every record in an export. Returns the count."""
    records = normalize_export(payload)
    count = store.add_records(records)
    logger.info("Imported %d records", count)
    return count
