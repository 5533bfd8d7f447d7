"""Upcoming Google Calendar events rendered as a terminal box.

Usage:
    from gcal_agenda.calendar import Terminal, fetch_upcoming_events, render_events

    events = fetch_upcoming_events(service)
    print(render_events(events, Terminal.detect()))
"""

from __future__ import annotations

from gcal_agenda.calendar.client import Event, fetch_upcoming_events
from gcal_agenda.calendar.exceptions import (
    CalendarError,
    EventTimeError,
    FetchError,
    TerminalError,
)
from gcal_agenda.calendar.render import Terminal, render_events

__all__ = [
    "Event",
    "fetch_upcoming_events",
    "Terminal",
    "render_events",
    "CalendarError",
    "EventTimeError",
    "FetchError",
    "TerminalError",
]
