"""Calendar fetching and rendering exceptions."""

from gcal_agenda.exceptions import AgendaError


class CalendarError(AgendaError):
    """Base exception for calendar errors."""

    pass


class FetchError(CalendarError):
    """Raised when the Calendar API request fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class TerminalError(CalendarError):
    """Raised when the terminal size is unknown or too small to draw the box."""

    pass


class EventTimeError(CalendarError):
    """Raised when an event carries a start time that is not a valid timestamp."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Error with datetime received from Google API: {text!r}")
