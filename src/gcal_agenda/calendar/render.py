"""Fixed-width terminal box rendering for calendar events.

Layout for a 24-column terminal:

    |----------------------|
    | Team Sync Meeting Ab |
    | out Q3 Planning      |
    |     Friday    09:05  |
    |----------------------|

Titles wrap at the character boundary; the box grows with the number of
events regardless of terminal height.
"""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TextIO

from gcal_agenda.calendar.client import Event
from gcal_agenda.calendar.exceptions import EventTimeError, TerminalError

MIN_WIDTH = 7
WEEKDAY_FIELD = 10
WEEKDAY_INDENT = "    "

WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_DATE_ONLY = re.compile(r"\d{4}-\d{2}-\d{2}")
_RFC3339 = re.compile(
    r"(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})"
)


@dataclass(frozen=True)
class Terminal:
    """Character-cell dimensions of the output terminal."""

    width: int
    height: int = 0

    def __post_init__(self):
        if self.width < MIN_WIDTH:
            raise TerminalError("Terminal too narrow")

    @classmethod
    def detect(cls, stream: TextIO | None = None) -> Terminal:
        """Query the size of the terminal attached to ``stream``.

        Raises:
            TerminalError: If the size cannot be determined or is too narrow.
        """
        stream = stream or sys.stdout
        try:
            size = os.get_terminal_size(stream.fileno())
        except (OSError, ValueError, AttributeError) as e:
            raise TerminalError("Error initializing terminal") from e
        return cls(width=size.columns, height=size.lines)

    @property
    def content_width(self) -> int:
        return self.width - 4

    def horizontal(self) -> str:
        return "|" + "-" * (self.width - 2) + "|"

    def line(self, text: str) -> list[str]:
        """Split ``text`` into bordered rows of exactly ``width`` characters."""
        w = self.content_width
        return [f"| {text[i:i + w]:<{w}} |" for i in range(0, len(text), w)]


def parse_start(text: str) -> datetime:
    """Parse an event start time.

    Accepts RFC3339 timestamps in extended form with an offset (``Z``
    included) and bare dates of all-day events, taken as midnight UTC.

    Raises:
        EventTimeError: If ``text`` is not a well-formed timestamp.
    """
    if _DATE_ONLY.fullmatch(text or ""):
        try:
            return datetime.fromisoformat(text).replace(tzinfo=timezone.utc)
        except ValueError as e:
            raise EventTimeError(text) from e

    match = _RFC3339.fullmatch(text or "")
    if not match:
        raise EventTimeError(text)

    # fromisoformat takes at most microseconds
    fraction = (match["fraction"] or "")[:6].ljust(6, "0")
    offset = "+00:00" if match["offset"] == "Z" else match["offset"]
    try:
        return datetime.fromisoformat(f"{match['base']}.{fraction}{offset}")
    except ValueError as e:
        raise EventTimeError(text) from e


def weekday_line(start: datetime) -> str:
    """Format the weekday and 24-hour start time of an event."""
    weekday = WEEKDAYS[start.weekday()]
    return f"{WEEKDAY_INDENT}{weekday:<{WEEKDAY_FIELD}.{WEEKDAY_FIELD}}{start:%H:%M}"


def render_events(events: Iterable[Event], terminal: Terminal) -> str:
    """Render events as a bordered box.

    The whole box is built before returning, so a malformed start time
    raises without any partial output.

    Raises:
        EventTimeError: If an event start time cannot be parsed.
    """
    rows = [terminal.horizontal()]
    for event in events:
        start = parse_start(event.start_text)
        rows.extend(terminal.line(event.summary))
        rows.extend(terminal.line(weekday_line(start)))
        rows.append(terminal.horizontal())
    return "\n".join(rows)
