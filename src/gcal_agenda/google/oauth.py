"""Google OAuth management using Authlib.

This module provides OAuth 2.0 authentication for the Calendar API with:
- Interactive authorization-code flow with an injectable input provider
- Automatic token refresh, persisted back to token.json on every refresh
- Calendar API service creation

Credentials are read from the configuration directory:
    credentials.json - OAuth client credentials
    token.json       - OAuth tokens
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import requests
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.requests_client import OAuth2Session
from google.oauth2.credentials import Credentials as GoogleCredentials
from googleapiclient.discovery import build

from gcal_agenda.config import AgendaConfig
from gcal_agenda.google.exceptions import (
    AuthorizationError,
    ScopeMismatchError,
    TokenError,
    TokenNotFoundError,
)
from gcal_agenda.google.store import (
    delete_token,
    load_cached_token,
    load_client_secret,
    save_token,
)

logger = logging.getLogger(__name__)


SCOPES = {
    "calendar": "https://www.googleapis.com/auth/calendar",
    "calendar_readonly": "https://www.googleapis.com/auth/calendar.readonly",
}

# Seconds before expiry at which tokens are refreshed; above google-auth's own threshold
EXPIRY_LEEWAY = 300

InputProvider = Callable[[str], str]
OutputSink = Callable[[str], None]


def resolve_scopes(scopes: list[str] | tuple[str, ...]) -> list[str]:
    """Resolve scope names to full URLs."""
    resolved = []
    for scope in scopes:
        if scope.startswith("https://"):
            resolved.append(scope)
        elif scope in SCOPES:
            resolved.append(SCOPES[scope])
        else:
            raise ValueError(
                f"Unknown scope: {scope}. Use full URL or one of: {list(SCOPES.keys())}"
            )
    return resolved


class GoogleOAuth:
    """Google OAuth management using Authlib.

    Handles the OAuth 2.0 authorization-code flow, token persistence and
    Calendar API service creation.

    Example:
        >>> auth = GoogleOAuth(AgendaConfig.from_env())
        >>> service = auth.ensure_authorized_client()
        >>> events = service.events().list(calendarId="primary").execute()

    The authorization code is read through ``input_provider`` (``input`` by
    default) so that callers and tests can supply it without a terminal.
    """

    REVOKE_URL = "https://oauth2.googleapis.com/revoke"

    def __init__(
        self,
        config: AgendaConfig,
        input_provider: InputProvider | None = None,
        output: OutputSink | None = None,
    ):
        """Initialize Google OAuth.

        Args:
            config: Paths to credentials and token files, and scope names.
            input_provider: Called with a prompt, returns one line of user input.
                Defaults to the built-in input().
            output: Called with messages meant for the user. Defaults to print().

        Raises:
            CredentialsNotFoundError: If credentials.json is missing.
            ConfigError: If credentials.json is malformed.
        """
        self.config = config
        self.token_path = config.token_path
        self.required_scopes = resolve_scopes(config.scopes)
        self.client = load_client_secret(config.credentials_path)
        self.input_provider = input_provider or input
        self.output = output or print

        self.session = OAuth2Session(
            client_id=self.client.client_id,
            client_secret=self.client.client_secret,
            scope=" ".join(self.required_scopes),
            redirect_uri=self.client.redirect_uri,
            token=self._load_token(),
            update_token=self._save_token,
            token_endpoint=self.client.token_uri,
            token_endpoint_auth_method="client_secret_post",
        )

        self._state: str | None = None
        self.last_refresh: datetime | None = None
        self.refresh_count = 0

    def _load_token(self) -> dict[str, Any] | None:
        """Load cached token, or None when interactive authorization is needed."""
        try:
            return load_cached_token(self.token_path, self.required_scopes)
        except TokenNotFoundError as e:
            logger.info(str(e))
            return None

    def _save_token(
        self,
        token: dict[str, Any],
        refresh_token: str | None = None,
        access_token: str | None = None,
    ):
        """Save token to storage (Authlib callback)."""
        if access_token:
            token["access_token"] = access_token
        if refresh_token and not token.get("refresh_token"):
            token["refresh_token"] = refresh_token
        if not token.get("scope"):
            token["scope"] = " ".join(self.required_scopes)

        # Validate scopes
        token_scopes = set(token.get("scope", "").split())
        required_scopes = set(self.required_scopes)

        if not required_scopes.issubset(token_scopes):
            missing = required_scopes - token_scopes
            raise ScopeMismatchError(missing)

        save_token(self.token_path, token, self.client)

        self.last_refresh = datetime.now()
        self.refresh_count += 1

        logger.info(f"Token saved with scopes: {token_scopes}")

    def is_authorized(self) -> bool:
        """Check if we have a token with required scopes.

        Returns:
            True if authorized with all required scopes, False otherwise.
        """
        if not self.session.token:
            return False

        token_scopes = set(self.session.token.get("scope", "").split())
        required_scopes = set(self.required_scopes)

        return required_scopes.issubset(token_scopes)

    def get_authorization_url(self) -> str:
        """Start OAuth authorization flow.

        Returns:
            Authorization URL for user to visit.
        """
        authorization_url, state = self.session.create_authorization_url(
            self.client.auth_uri,
            access_type="offline",
            prompt="consent",
        )

        self._state = state
        return authorization_url

    def fetch_token(self, authorization_response: str) -> dict[str, Any]:
        """Exchange an authorization code for a token and persist it.

        Args:
            authorization_response: Either the bare authorization code or the
                full redirect URL from the OAuth callback.

        Returns:
            The fetched OAuth token dict.

        Raises:
            AuthorizationError: If the provider rejects the code or is unreachable.
        """
        kwargs: dict[str, Any] = {}
        if authorization_response.startswith(("http://", "https://")):
            kwargs["authorization_response"] = authorization_response
            kwargs["state"] = self._state
        else:
            kwargs["code"] = authorization_response

        try:
            token = self.session.fetch_token(self.client.token_uri, **kwargs)
        except (AuthlibBaseError, requests.RequestException) as e:
            raise AuthorizationError(f"Unable to retrieve token from web: {e}") from e

        self.session.token = token
        self.output(f"Saving credential file to: {self.token_path}")
        self._save_token(self.session.token)
        return self.session.token

    def authorize(self) -> dict[str, Any]:
        """Run the interactive authorization flow once.

        Prints the authorization URL, reads a single line from the input
        provider and exchanges it for a token.

        Raises:
            AuthorizationError: If input cannot be read or the exchange fails.
        """
        url = self.get_authorization_url()
        self.output(
            "Go to the following link in your browser then type the "
            f"authorization code: \n{url}"
        )

        try:
            response = self.input_provider("Authorization code: ")
        except EOFError as e:
            raise AuthorizationError("Unable to read authorization code") from e

        response = (response or "").strip()
        if not response:
            raise AuthorizationError("No authorization code provided")

        return self.fetch_token(response)

    def get_credentials(self) -> GoogleCredentials:
        """Get Google Credentials object for API client libraries.

        Returns:
            Google Credentials object with current token.

        Raises:
            TokenError: If not authorized or token refresh fails.
        """
        if not self.is_authorized():
            raise TokenError("Not authorized or missing required scopes")

        # Refresh if (nearly) expired; update_token persists the new token
        expires_at = self.session.token.get("expires_at", 0)
        if expires_at and expires_at - EXPIRY_LEEWAY < datetime.now().timestamp():
            refresh_token = self.session.token.get("refresh_token")
            if not refresh_token:
                raise TokenError("Token expired and no refresh token is available")

            logger.info("Token expired, refreshing...")
            try:
                self.session.refresh_token(self.client.token_uri, refresh_token=refresh_token)
            except (AuthlibBaseError, requests.RequestException) as e:
                raise TokenError(f"Failed to refresh token: {e}") from e

        return GoogleCredentials(
            token=self.session.token["access_token"],
            refresh_token=self.session.token.get("refresh_token"),
            token_uri=self.client.token_uri,
            client_id=self.client.client_id,
            client_secret=self.client.client_secret,
            scopes=self.required_scopes,
            expiry=self._credentials_expiry(),
        )

    def _credentials_expiry(self) -> datetime | None:
        """Token expiry as the naive UTC datetime google-auth expects."""
        expires_at = self.session.token.get("expires_at")
        if not expires_at:
            return None
        return datetime.fromtimestamp(expires_at, tz=timezone.utc).replace(tzinfo=None)

    def build_service(self, service_name: str = "calendar", version: str = "v3"):
        """Build a Google API service with current credentials.

        Args:
            service_name: Name of the service.
            version: API version.

        Returns:
            Google API service object.
        """
        creds = self.get_credentials()
        return build(service_name, version, credentials=creds)

    def ensure_authorized_client(self):
        """Return a Calendar service, authorizing interactively if needed.

        The interactive flow runs when no cached token is usable, or when
        the cached token has expired and cannot be refreshed.

        Returns:
            Calendar v3 service object.

        Raises:
            AuthorizationError: If the interactive flow fails.
        """
        if not self.is_authorized():
            self.authorize()
            return self.build_service("calendar", "v3")

        try:
            return self.build_service("calendar", "v3")
        except TokenError as e:
            logger.warning(f"{e}; starting new authorization flow")

        self.authorize()
        return self.build_service("calendar", "v3")

    def revoke_token(self):
        """Revoke the current token and clear local storage."""
        try:
            if not self.session.token:
                logger.warning("No token to revoke")
            else:
                # Token travels as a query parameter, without an Authorization header
                try:
                    self.session.post(
                        self.REVOKE_URL,
                        params={"token": self.session.token["access_token"]},
                        withhold_token=True,
                    )
                except (AuthlibBaseError, requests.RequestException) as e:
                    logger.warning(f"Failed to revoke token remotely: {e}")
                self.session.token = None
        finally:
            delete_token(self.token_path)

        logger.info("Token revoked successfully")

    def get_token_info(self) -> dict[str, Any]:
        """Get information about the current token.

        Returns:
            Dictionary with token status, scopes, expiry, etc.
        """
        if not self.session.token:
            return {"status": "no_token"}

        token = self.session.token
        expires_at = token.get("expires_at", 0)

        if expires_at:
            expires_in = expires_at - datetime.now().timestamp()
            expires_str = str(timedelta(seconds=int(max(0, expires_in))))
            is_expired = expires_at < datetime.now().timestamp()
        else:
            expires_str = "unknown"
            is_expired = False

        return {
            "status": "valid" if not is_expired else "expired",
            "scopes": token.get("scope", "").split(),
            "expires_in": expires_str,
            "has_refresh_token": bool(token.get("refresh_token")),
            "refresh_count": self.refresh_count,
            "last_refresh": self.last_refresh.isoformat() if self.last_refresh else None,
        }
