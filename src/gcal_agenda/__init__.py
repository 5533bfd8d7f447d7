"""Show the next ten Google Calendar events in a terminal box."""

__version__ = "0.1.0"
