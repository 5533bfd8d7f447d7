"""Shared fixtures for gcal-agenda tests."""

import json

import pytest

from gcal_agenda.config import AgendaConfig

CALENDAR_READONLY = "https://www.googleapis.com/auth/calendar.readonly"


@pytest.fixture
def config(tmp_path):
    """Configuration rooted in a temporary directory."""
    return AgendaConfig(config_dir=tmp_path)


@pytest.fixture
def mock_credentials(config):
    """Create a mock credentials file."""
    creds = {
        "installed": {
            "client_id": "test-client-id.apps.googleusercontent.com",
            "client_secret": "test-client-secret",
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": ["http://localhost"],
        }
    }
    with open(config.credentials_path, "w") as f:
        json.dump(creds, f)
    return config.credentials_path


@pytest.fixture
def mock_token(config):
    """Create a mock token file."""
    token = {
        "token": "test-access-token",
        "refresh_token": "test-refresh-token",
        "token_uri": "https://oauth2.googleapis.com/token",
        "client_id": "test-client-id.apps.googleusercontent.com",
        "client_secret": "test-client-secret",
        "scopes": [CALENDAR_READONLY],
        "type": "Bearer",
        "expiry": "2099-01-01T00:00:00Z",
    }
    with open(config.token_path, "w") as f:
        json.dump(token, f)
    return config.token_path
