"""
Calendar event parsing from Google Calendar API payloads and JSON exports.

Fetching is done elsewhere; this module only turns raw event resources into
CalendarEvent values and applies the colour conventions:
- colour 11 (red): cancelled, not owed
- colour 8 (grey): cancelled, client pays at the next visit
"""

import json
from collections.abc import Iterable, Sequence
from datetime import datetime, time
from pathlib import Path

from loguru import logger

from core.config import (
    GREY_CANCELLED_COLOR,
    RED_CANCELLED_COLOR,
    SUPERVISION_KEYWORDS,
    UNTITLED_EVENT_TITLE,
)
from core.normalize import normalize
from models.events import CalendarEvent
from models.payroll import Client


def to_local_naive(value: datetime) -> datetime:
    """Aware timestamps become local naive time; naive ones are already local."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def parse_timestamp(value: dict | None, end_of_day: bool = False) -> datetime | None:
    """
    Parse a Google `start`/`end` object.

    Timed events carry `dateTime` (RFC 3339), all-day events only `date`.
    Aware timestamps are converted to local naive time so they compare with
    naive period boundaries.
    """
    if not value:
        return None
    if value.get("dateTime"):
        return to_local_naive(datetime.fromisoformat(value["dateTime"].replace("Z", "+00:00")))
    if value.get("date"):
        day = datetime.fromisoformat(value["date"]).date()
        return datetime.combine(day, time(23, 59, 59) if end_of_day else time.min)
    return None


def is_supervision_title(title: str, keywords: Iterable[str] = SUPERVISION_KEYWORDS) -> bool:
    title_normalized = normalize(title)
    return any(normalize(k) and normalize(k) in title_normalized for k in keywords)


def parse_calendar_event(
    raw: dict, supervision_keywords: Sequence[str] = tuple(SUPERVISION_KEYWORDS)
) -> CalendarEvent | None:
    """Parse one event resource; returns None when it has no usable start/end."""
    title = raw.get("summary") or UNTITLED_EVENT_TITLE
    try:
        start = parse_timestamp(raw.get("start"))
        end = parse_timestamp(raw.get("end"), end_of_day=True)
    except ValueError as e:
        logger.warning(f"Skipping event {raw.get('id', '?')}: bad timestamp ({e})")
        return None
    if start is None or end is None:
        logger.warning(f"Skipping event {raw.get('id', '?')}: missing start or end")
        return None

    color_id = raw.get("colorId")
    # Supervision slots are red by convention, which does not mean cancelled
    is_cancelled = raw.get("status") == "cancelled" or (
        color_id == RED_CANCELLED_COLOR and not is_supervision_title(title, supervision_keywords)
    )

    return CalendarEvent(
        id=raw.get("id") or "",
        title=title,
        start_time=start,
        end_time=end,
        color_id=color_id,
        is_cancelled=is_cancelled,
        is_pending_payment=color_id == GREY_CANCELLED_COLOR,
        attendees=tuple(a["email"] for a in raw.get("attendees", []) if a.get("email")),
    )


def parse_calendar_events(
    raw_items: Iterable[dict], supervision_keywords: Sequence[str] = tuple(SUPERVISION_KEYWORDS)
) -> list[CalendarEvent]:
    events = []
    for raw in raw_items:
        event = parse_calendar_event(raw, supervision_keywords)
        if event is not None:
            events.append(event)
    return events


def load_events_file(
    path: Path, supervision_keywords: Sequence[str] = tuple(SUPERVISION_KEYWORDS)
) -> list[CalendarEvent]:
    """
    Read events from a JSON export.

    Accepts either a bare list of event resources or the API list response
    shape `{"items": [...]}`.
    """
    if not path.exists():
        raise FileNotFoundError(f"Events file not found: {path}")
    data = json.loads(path.read_text(encoding="utf-8"))
    items = data.get("items", []) if isinstance(data, dict) else data
    return parse_calendar_events(items, supervision_keywords)


def load_clients_file(path: Path) -> list[Client]:
    """Read the client roster from a JSON list of objects."""
    if not path.exists():
        raise FileNotFoundError(f"Clients file not found: {path}")
    data = json.loads(path.read_text(encoding="utf-8"))
    return [
        Client(
            id=str(item.get("id", "")),
            name=item["name"],
            price=float(item["price"]),
            employee_price=float(item["employeePrice"]),
            company_price=float(item["companyPrice"]),
            employee_id=str(item["employeeId"]),
            pending_payment=bool(item.get("pendingPayment", False)),
        )
        for item in data
    ]
