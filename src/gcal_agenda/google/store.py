"""On-disk storage for Google OAuth client secrets and tokens.

Tokens are written in the authorized-user format understood by
google.oauth2.credentials.Credentials, and converted to Authlib token
dicts when loaded.
"""

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from gcal_agenda.exceptions import ConfigError, CredentialsNotFoundError
from gcal_agenda.google.exceptions import TokenNotFoundError

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
DEFAULT_REDIRECT_URI = "http://localhost"


@dataclass(frozen=True)
class ClientSecretConfig:
    """OAuth client configuration from a Google Cloud Console download."""

    client_id: str
    client_secret: str
    auth_uri: str = GOOGLE_AUTH_URI
    token_uri: str = GOOGLE_TOKEN_URI
    redirect_uris: tuple[str, ...] = ()

    @property
    def redirect_uri(self) -> str:
        return self.redirect_uris[0] if self.redirect_uris else DEFAULT_REDIRECT_URI


def load_client_secret(path: str | Path) -> ClientSecretConfig:
    """Load OAuth client credentials from file.

    Args:
        path: Path to credentials.json.

    Returns:
        Parsed client configuration.

    Raises:
        CredentialsNotFoundError: If the file does not exist.
        ConfigError: If the file cannot be read or has an unexpected format.
    """
    path = Path(path)
    if not path.exists():
        raise CredentialsNotFoundError(str(path))

    try:
        with open(path) as f:
            creds = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Unable to read client secret file {path}: {e}") from e

    # Handle both web and installed app credential formats
    if not isinstance(creds, dict):
        raise ConfigError(f"Invalid credentials format in {path}")
    if "installed" in creds:
        app_creds = creds["installed"]
    elif "web" in creds:
        app_creds = creds["web"]
    else:
        raise ConfigError("Invalid credentials.json format. Expected 'installed' or 'web' key.")

    try:
        client_id = app_creds["client_id"]
        client_secret = app_creds["client_secret"]
    except (KeyError, TypeError) as e:
        raise ConfigError(f"Unable to parse client secret file {path}: missing {e}") from e

    return ClientSecretConfig(
        client_id=client_id,
        client_secret=client_secret,
        auth_uri=app_creds.get("auth_uri") or GOOGLE_AUTH_URI,
        token_uri=app_creds.get("token_uri") or GOOGLE_TOKEN_URI,
        redirect_uris=tuple(app_creds.get("redirect_uris") or ()),
    )


def _parse_expiry(expiry: Any) -> float | None:
    """Convert a stored expiry (ISO string or epoch seconds) to a timestamp."""
    if expiry is None or expiry == "":
        return None
    if isinstance(expiry, (int, float)):
        return float(expiry)

    dt = datetime.fromisoformat(str(expiry).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        # google-auth writes naive UTC expiries
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def load_cached_token(
    path: str | Path,
    required_scopes: list[str] | None = None,
) -> dict[str, Any]:
    """Load token from storage.

    Args:
        path: Path to token.json.
        required_scopes: Full scope URLs the token must carry.

    Returns:
        Token in Authlib format.

    Raises:
        TokenNotFoundError: If the token is absent, unreadable, malformed
            or lacks a required scope.
    """
    path = Path(path)
    if not path.exists():
        logger.info("No existing token found")
        raise TokenNotFoundError(str(path))

    try:
        with open(path) as f:
            token_data = json.load(f)
        expires_at = _parse_expiry(token_data.get("expiry"))
    except (OSError, ValueError, AttributeError) as e:
        logger.error(f"Failed to load token: {e}")
        raise TokenNotFoundError(str(path), f"unreadable ({e})") from e

    access_token = token_data.get("token") or token_data.get("access_token")
    if not access_token:
        raise TokenNotFoundError(str(path), "no access token")

    scopes = token_data.get("scopes") or []
    if isinstance(scopes, str):
        scopes = scopes.split()

    current_scopes = set(scopes)
    missing = set(required_scopes or []) - current_scopes
    if missing:
        logger.warning(f"Token missing required scopes: {missing}")
        raise TokenNotFoundError(str(path), f"missing scopes {sorted(missing)}")

    logger.info(f"Loaded token with scopes: {current_scopes}")

    # Convert Google token format to Authlib format
    return {
        "access_token": access_token,
        "refresh_token": token_data.get("refresh_token"),
        "token_type": token_data.get("type") or token_data.get("token_type", "Bearer"),
        "expires_at": expires_at,
        "scope": " ".join(scopes),
    }


def save_token(
    path: str | Path,
    token: dict[str, Any],
    client: ClientSecretConfig,
) -> None:
    """Write an Authlib token to storage with owner-only permissions.

    Args:
        path: Path to token.json. Existing content is replaced.
        token: Authlib token dict.
        client: Client configuration recorded alongside the token.

    Raises:
        ConfigError: If the token file cannot be written.
    """
    path = Path(path)

    expires_at = token.get("expires_at")
    expiry = (
        datetime.fromtimestamp(expires_at, tz=timezone.utc).isoformat().replace("+00:00", "Z")
        if expires_at
        else None
    )

    # Convert to Google token format for compatibility
    google_token = {
        "token": token["access_token"],
        "refresh_token": token.get("refresh_token"),
        "token_uri": client.token_uri,
        "client_id": client.client_id,
        "client_secret": client.client_secret,
        "scopes": token.get("scope", "").split(),
        "type": token.get("token_type", "Bearer"),
        "expiry": expiry,
    }

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            json.dump(google_token, f, indent=2)
        # O_CREAT mode only applies to new files
        os.chmod(path, 0o600)
    except OSError as e:
        raise ConfigError(f"Unable to cache oauth token at {path}: {e}") from e

    logger.info(f"Token saved to {path}")


def delete_token(path: str | Path) -> bool:
    """Remove a cached token.

    Returns:
        True if a token file was removed.
    """
    path = Path(path)
    if not path.exists():
        return False
    path.unlink()
    return True
