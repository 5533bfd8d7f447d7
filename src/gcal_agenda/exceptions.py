"""Base exceptions for gcal-agenda."""


class AgendaError(Exception):
    """Base exception for all gcal-agenda errors."""

    pass


class ConfigError(AgendaError):
    """Raised when local configuration files are missing, malformed or unwritable."""

    pass


class CredentialsNotFoundError(ConfigError):
    """Raised when OAuth credentials file is not found."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Credentials file not found at {path}. "
            "Please download OAuth credentials from Google Cloud Console."
        )
