"""Configuration for gcal-agenda.

Credentials live in a per-user configuration directory:
    ~/.config/calendar/credentials.json - Google OAuth client credentials
    ~/.config/calendar/token.json       - cached OAuth token

The directory can be moved with the GCAL_AGENDA_CONFIG_DIR environment
variable or the --config-dir CLI option. A single AgendaConfig is built at
process entry and handed to every component that needs a path.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_DIR_ENV = "GCAL_AGENDA_CONFIG_DIR"
CREDENTIALS_FILE = "credentials.json"
TOKEN_FILE = "token.json"

# If modifying these scopes, delete the previously saved token.json.
DEFAULT_SCOPES = ("calendar_readonly",)


def default_config_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the configuration directory for the current user.

    Args:
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        The override directory if set, otherwise $HOME/.config/calendar.
    """
    env = os.environ if environ is None else environ

    override = env.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()

    home = env.get("HOME")
    base = Path(home) if home else Path.home()
    return base / ".config" / "calendar"


@dataclass(frozen=True)
class AgendaConfig:
    """Paths and scopes used by a single gcal-agenda run."""

    config_dir: Path
    scopes: tuple[str, ...] = field(default=DEFAULT_SCOPES)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        config_dir: str | Path | None = None,
    ) -> AgendaConfig:
        """Build configuration from the environment.

        Args:
            environ: Environment mapping. Defaults to os.environ.
            config_dir: Explicit directory, takes precedence over the environment.
        """
        if config_dir:
            return cls(config_dir=Path(config_dir).expanduser())
        return cls(config_dir=default_config_dir(environ))

    @property
    def credentials_path(self) -> Path:
        return self.config_dir / CREDENTIALS_FILE

    @property
    def token_path(self) -> Path:
        return self.config_dir / TOKEN_FILE

    def status(self) -> dict:
        """Get status of the configured credential files.

        Returns:
            Dictionary with paths and whether each file exists.
        """
        return {
            "config_dir": str(self.config_dir),
            "credentials": self.credentials_path.exists(),
            "token": self.token_path.exists(),
        }
