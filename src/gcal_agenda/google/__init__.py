"""Google OAuth authentication for the Calendar API."""

from gcal_agenda.google.exceptions import (
    AuthorizationError,
    GoogleAuthError,
    ScopeMismatchError,
    TokenError,
    TokenNotFoundError,
)
from gcal_agenda.google.oauth import GoogleOAuth
from gcal_agenda.google.store import ClientSecretConfig

__all__ = [
    "GoogleOAuth",
    "ClientSecretConfig",
    "GoogleAuthError",
    "AuthorizationError",
    "TokenError",
    "TokenNotFoundError",
    "ScopeMismatchError",
]
