"""Tests for configuration."""

from pathlib import Path

from gcal_agenda.config import CONFIG_DIR_ENV, AgendaConfig, default_config_dir


class TestAgendaConfig:
    def test_default_dir_from_home(self):
        """Should place configuration under $HOME/.config/calendar."""
        assert default_config_dir({"HOME": "/home/alice"}) == Path("/home/alice/.config/calendar")

    def test_env_override(self, tmp_path):
        env = {"HOME": "/home/alice", CONFIG_DIR_ENV: str(tmp_path)}
        assert AgendaConfig.from_env(env).config_dir == tmp_path

    def test_explicit_dir_wins(self, tmp_path):
        env = {CONFIG_DIR_ENV: "/elsewhere"}
        config = AgendaConfig.from_env(env, config_dir=tmp_path)
        assert config.credentials_path == tmp_path / "credentials.json"
        assert config.token_path == tmp_path / "token.json"

    def test_status(self, config, mock_credentials):
        status = config.status()
        assert status["credentials"] is True
        assert status["token"] is False
