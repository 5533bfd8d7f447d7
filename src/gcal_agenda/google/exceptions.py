"""Google authentication exceptions."""

from gcal_agenda.exceptions import AgendaError


class GoogleAuthError(AgendaError):
    """Base exception for Google authentication errors."""

    pass


class TokenNotFoundError(GoogleAuthError):
    """Raised when no usable cached token exists.

    Callers treat this as a signal to run interactive authorization.
    """

    def __init__(self, path: str, reason: str = "not found"):
        self.path = path
        self.reason = reason
        super().__init__(f"No usable token at {path}: {reason}")


class AuthorizationError(GoogleAuthError):
    """Raised when the interactive authorization flow fails."""

    pass


class TokenError(GoogleAuthError):
    """Raised when there's an issue with the OAuth token."""

    pass


class ScopeMismatchError(GoogleAuthError):
    """Raised when token scopes don't match required scopes."""

    def __init__(self, missing_scopes: set[str]):
        self.missing_scopes = missing_scopes
        super().__init__(f"Token missing required scopes: {missing_scopes}")
