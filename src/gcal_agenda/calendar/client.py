"""Google Calendar API event fetching."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httplib2
from google.auth import exceptions as google_auth_exceptions
from googleapiclient.errors import HttpError

from gcal_agenda.calendar.exceptions import FetchError

logger = logging.getLogger(__name__)

MAX_RESULTS = 10


@dataclass
class Event:
    """Represents a Google Calendar event."""

    summary: str
    start_text: str
    id: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> Event:
        """Parse event from API response."""
        start_data = data.get("start", {})
        start_text = start_data.get("dateTime") or start_data.get("date") or ""
        return cls(
            summary=data.get("summary", ""),
            start_text=start_text,
            id=data.get("id"),
        )


def format_time_min(now: datetime | None = None) -> str:
    """Format a moment as RFC3339 with an explicit UTC offset."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.isoformat(timespec="seconds")


def fetch_upcoming_events(service: Any, now: datetime | None = None) -> list[Event]:
    """Fetch the next upcoming events from the primary calendar.

    Deleted events are excluded and recurring events are expanded into
    single instances, ordered by start time.

    Args:
        service: Calendar v3 service object.
        now: Lower bound for event start. Defaults to the current moment.

    Returns:
        Up to ten events in the order returned by the API.

    Raises:
        FetchError: If the API request fails.
    """
    kwargs: dict[str, Any] = {
        "calendarId": "primary",
        "showDeleted": False,
        "singleEvents": True,
        "timeMin": format_time_min(now),
        "maxResults": MAX_RESULTS,
        "orderBy": "startTime",
    }
    logger.debug(f"Listing events: {kwargs}")

    try:
        results = service.events().list(**kwargs).execute()
    except HttpError as e:
        raise FetchError(
            f"Unable to retrieve next ten of the user's events: {e}",
            status_code=e.resp.status if e.resp is not None else None,
        ) from e
    except (httplib2.HttpLib2Error, google_auth_exceptions.GoogleAuthError, OSError) as e:
        raise FetchError(f"Unable to retrieve next ten of the user's events: {e}") from e

    items = results.get("items", [])
    logger.info(f"Fetched {len(items)} events")

    return [Event.from_api(item) for item in items]
