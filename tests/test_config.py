"""Tests for Nitpick configuration."""

import json

import pytest

from nitpick.config import (
    DEFAULT_API_URL,
    DEFAULT_THEME,
    MissingTokenError,
    NitpickConfig,
    usage_message,
)


@pytest.fixture(autouse=True)
def home(tmp_path, monkeypatch):
    """Point the config directory at a temporary home without a token."""
    monkeypatch.setenv("HOME", str(tmp_path))
    # Set first so the removal is undone after the test
    monkeypatch.setenv("GITHUB_TOKEN", "placeholder")
    monkeypatch.delenv("GITHUB_TOKEN")
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestNitpickConfig:
    """Tests for loading and saving the config file."""

    def test_paths(self, home):
        """Test the config file lives under ~/.nitpick."""
        assert NitpickConfig.get_config_path() == home / ".nitpick" / "config.json"

    def test_defaults_when_missing(self):
        """Test defaults are used without a config file."""
        config = NitpickConfig.load()
        assert config.github_token is None
        assert config.theme == DEFAULT_THEME
        assert config.api_url == DEFAULT_API_URL

    def test_save_and_load(self):
        """Test saved settings are loaded back."""
        NitpickConfig(github_token="abc", theme="nord").save()
        config = NitpickConfig.load()
        assert config.github_token == "abc"
        assert config.theme == "nord"

    def test_unknown_keys_ignored(self):
        """Test keys from other versions do not break loading."""
        path = NitpickConfig.get_config_path()
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"theme": "nord", "obsolete": 1}))
        assert NitpickConfig.load().theme == "nord"

    def test_corrupt_file(self):
        """Test an unreadable config file gives defaults."""
        path = NitpickConfig.get_config_path()
        path.parent.mkdir(parents=True)
        path.write_text("{not json")
        assert NitpickConfig.load() == NitpickConfig()

    def test_reset(self):
        """Test reset restores every default."""
        config = NitpickConfig(github_token="abc", theme="nord", log_level="DEBUG")
        config.reset()
        assert config == NitpickConfig()


class TestResolveToken:
    """Tests for GitHub token resolution."""

    def test_from_environment(self, monkeypatch):
        """Test GITHUB_TOKEN wins over the config file."""
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        assert NitpickConfig(github_token="file-token").resolve_token() == "env-token"

    def test_from_dotenv(self, home):
        """Test a .env file in the working directory is read."""
        (home / ".env").write_text("GITHUB_TOKEN=dotenv-token\n")
        assert NitpickConfig().resolve_token() == "dotenv-token"

    def test_environment_beats_dotenv(self, home, monkeypatch):
        """Test existing environment variables are not overridden by .env."""
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        (home / ".env").write_text("GITHUB_TOKEN=dotenv-token\n")
        assert NitpickConfig().resolve_token() == "env-token"

    def test_from_config_file(self, home):
        """Test the config file token is used last, stripped."""
        assert NitpickConfig(github_token=" file-token ").resolve_token(
            env_file=home / "missing.env"
        ) == "file-token"

    def test_empty_counts_as_missing(self, home, monkeypatch):
        """Test blank tokens are treated as absent."""
        monkeypatch.setenv("GITHUB_TOKEN", "  ")
        with pytest.raises(MissingTokenError):
            NitpickConfig(github_token="").resolve_token(env_file=home / "missing.env")

    def test_missing(self, home):
        """Test a missing token raises MissingTokenError."""
        with pytest.raises(MissingTokenError):
            NitpickConfig().resolve_token(env_file=home / "missing.env")


def test_usage_message():
    """Test the usage message names every way to provide a token."""
    message = usage_message()
    assert "GITHUB_TOKEN" in message
    assert ".env" in message
    assert "https://github.com/settings/personal-access-tokens" in message
