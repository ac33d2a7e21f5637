"""Google Calendar event template links."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from urllib.parse import quote, urlencode

CALENDAR_TEMPLATE_URL = "https://calendar.google.com/calendar/render"
DEFAULT_EVENT_DURATION = timedelta(hours=1)


def format_calendar_date(value: datetime) -> str:
    """Format a datetime the way the calendar template expects.

    Aware datetimes are converted to UTC and suffixed with ``Z``; naive values
    are passed through as floating local times.
    """

    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return value.strftime("%Y%m%dT%H%M%S")


def build_calendar_url(
    *,
    title: str,
    start: datetime,
    end: datetime | None = None,
    description: str | None = None,
    location: str | None = None,
) -> str:
    """Return a link that opens a pre-filled "create event" page."""

    end = end or start + DEFAULT_EVENT_DURATION
    params: dict[str, str] = {
        "action": "TEMPLATE",
        "text": title,
        "dates": f"{format_calendar_date(start)}/{format_calendar_date(end)}",
    }
    if description:
        params["details"] = description
    if location:
        params["location"] = location
    return f"{CALENDAR_TEMPLATE_URL}?{urlencode(params, quote_via=quote, safe='/')}"
