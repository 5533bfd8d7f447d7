"""Tests for terminal box rendering."""

import io
import math
import os
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from gcal_agenda.calendar import Event, EventTimeError, Terminal, TerminalError, render_events
from gcal_agenda.calendar.render import parse_start, weekday_line

TITLE = "Team Sync Meeting About Q3 Planning And Budget Review"


def _tty():
    stream = MagicMock()
    stream.fileno.return_value = 1
    return stream


def _content(row: str) -> str:
    """Strip the border and the single space of padding on each side."""
    assert row.startswith("| ") and row.endswith(" |")
    return row[2:-2]


class TestTerminal:
    """Test terminal sizing and bordered lines."""

    def test_horizontal(self):
        """Should draw a border of exactly width characters."""
        assert Terminal(width=10).horizontal() == "|--------|"

    @pytest.mark.parametrize("width", [0, 1, 5, 6])
    def test_too_narrow(self, width):
        """Should refuse widths that leave no room for content."""
        with pytest.raises(TerminalError, match="too narrow"):
            Terminal(width=width)

    def test_minimum_width(self):
        """Should accept the narrowest usable width."""
        assert Terminal(width=7).line("abcd") == ["| abc |", "| d   |"]

    def test_detect(self):
        """Should read the size of the attached terminal."""
        with patch(
            "gcal_agenda.calendar.render.os.get_terminal_size",
            return_value=os.terminal_size((80, 24)),
        ):
            terminal = Terminal.detect(_tty())
        assert terminal.width == 80
        assert terminal.height == 24

    def test_detect_without_terminal(self):
        """Should fail when the stream is not a terminal."""
        with pytest.raises(TerminalError, match="Error initializing terminal"):
            Terminal.detect(io.StringIO())

    def test_detect_narrow(self):
        """Should fail when the attached terminal is too narrow."""
        with (
            patch(
                "gcal_agenda.calendar.render.os.get_terminal_size",
                return_value=os.terminal_size((6, 24)),
            ),
            pytest.raises(TerminalError),
        ):
            Terminal.detect(_tty())

    def test_wrapping_scenario(self):
        """Should wrap a 54-character title over two rows at width 40."""
        rows = Terminal(width=40).line(TITLE)
        assert len(rows) == 2
        assert _content(rows[0]) == TITLE[:36]
        assert _content(rows[1]) == TITLE[36:] + " " * 18

    @pytest.mark.parametrize("width", [7, 8, 13, 40, 57, 58, 120])
    @pytest.mark.parametrize("length", [1, 17, 36, 54, 200])
    def test_wrapping_properties(self, width, length):
        """Rows should reassemble the title and all be exactly width wide."""
        title = (TITLE * 4)[:length]
        terminal = Terminal(width=width)
        rows = terminal.line(title)

        assert len(rows) == math.ceil(length / (width - 4))
        assert all(len(row) == width for row in rows)
        assert "".join(_content(row) for row in rows).rstrip() == title.rstrip()

    def test_empty_title(self):
        """Should produce no rows for an empty title."""
        assert Terminal(width=40).line("") == []


class TestParseStart:
    """Test event start time parsing."""

    def test_offset(self):
        dt = parse_start("2024-03-15T09:05:00-04:00")
        assert dt.utcoffset() == timedelta(hours=-4)
        assert (dt.hour, dt.minute) == (9, 5)

    def test_zulu(self):
        assert parse_start("2024-03-15T13:05:00Z") == datetime(
            2024, 3, 15, 13, 5, tzinfo=timezone.utc
        )

    def test_fractional_seconds(self):
        assert parse_start("2024-03-15T13:05:00.123Z").minute == 5

    def test_nanoseconds(self):
        """Should accept more fractional digits than microseconds hold."""
        dt = parse_start("2024-03-15T13:05:00.123456789+01:00")
        assert dt.microsecond == 123456
        assert dt.utcoffset() == timedelta(hours=1)

    def test_all_day(self):
        """Should read an all-day date as midnight."""
        assert parse_start("2024-03-15") == datetime(2024, 3, 15, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "tomorrow",
            "2024-03-15T09:05:00",
            "2024-13-40T09:05:00Z",
            "2024-02-30",
            "20240315T090500+0000",
            "2024-03-15T09:05:00+0000",
            "2024-03-15 09:05:00Z",
            "2024-03-15T09:05Z",
            "2024-03-15T09:05:00+25:00",
            "2024-03-15T09:05:00Z\n",
        ],
    )
    def test_malformed(self, text):
        with pytest.raises(EventTimeError):
            parse_start(text)


class TestWeekdayLine:
    def test_scenario(self):
        """Should pad the weekday to ten characters before the time."""
        line = weekday_line(parse_start("2024-03-15T09:05:00-04:00"))
        assert line == "    Friday    09:05"

    def test_longest_weekday(self):
        line = weekday_line(parse_start("2024-03-13T23:59:00+00:00"))
        assert line == "    Wednesday 23:59"


class TestRenderEvents:
    """Test the full event box."""

    @pytest.fixture
    def events(self):
        return [
            Event(summary=TITLE, start_text="2024-03-15T09:05:00-04:00"),
            Event(summary="Lunch", start_text="2024-03-16T12:30:00Z"),
        ]

    def test_layout(self, events):
        """Should draw a leading separator and one separator per event."""
        terminal = Terminal(width=40)
        rows = render_events(events, terminal).split("\n")

        separator = terminal.horizontal()
        assert rows == [
            separator,
            "| " + TITLE[:36] + " |",
            "| " + TITLE[36:].ljust(36) + " |",
            "| " + "    Friday    09:05".ljust(36) + " |",
            separator,
            "| " + "Lunch".ljust(36) + " |",
            "| " + "    Saturday  12:30".ljust(36) + " |",
            separator,
        ]
        assert all(len(row) == 40 for row in rows)

    @pytest.mark.parametrize("count", [0, 1, 10])
    def test_block_count(self, count):
        """Should render N blocks with N + 1 separators."""
        events = [
            Event(summary=f"Event {i}", start_text="2024-03-15T09:05:00Z") for i in range(count)
        ]
        terminal = Terminal(width=30)
        rows = render_events(events, terminal).split("\n")

        assert rows.count(terminal.horizontal()) == count + 1
        assert rows[0] == terminal.horizontal()
        assert len(rows) == 1 + 3 * count

    def test_malformed_time_produces_nothing(self, events):
        """Should raise before any output when a start time is bad."""
        events.append(Event(summary="Broken", start_text="not-a-time"))
        with pytest.raises(EventTimeError):
            render_events(events, Terminal(width=40))
