"""Nitpick configuration management.

Handles persistent settings stored in ~/.nitpick/config.json and resolution
of the GitHub access token.
"""

import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv


# Default configuration values
DEFAULT_THEME = "textual-dark"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_API_URL = "https://api.github.com"

TOKEN_ENV_VAR = "GITHUB_TOKEN"
TOKEN_URL = "https://github.com/settings/personal-access-tokens"


class MissingTokenError(Exception):
    """Raised when no GitHub token is available from any source."""


@dataclass
class NitpickConfig:
    """Nitpick application configuration."""

    # Credentials (GITHUB_TOKEN takes precedence)
    github_token: Optional[str] = None

    # Appearance
    theme: str = DEFAULT_THEME

    # Diagnostics
    log_level: str = DEFAULT_LOG_LEVEL

    # API root, for GitHub Enterprise
    api_url: str = DEFAULT_API_URL

    @classmethod
    def get_config_dir(cls) -> Path:
        """Get the directory holding config and log files."""
        return Path.home() / ".nitpick"

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the path to the config file."""
        return cls.get_config_dir() / "config.json"

    @classmethod
    def load(cls) -> "NitpickConfig":
        """Load configuration from file, or return defaults if not found."""
        config_path = cls.get_config_path()

        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                # Only use known fields to avoid issues with old config versions
                known_fields = {f.name for f in cls.__dataclass_fields__.values()}
                filtered_data = {k: v for k, v in data.items() if k in known_fields}
                return cls(**filtered_data)
            except (json.JSONDecodeError, TypeError, ValueError, AttributeError):
                # Invalid config, return defaults
                pass

        return cls()

    def save(self) -> None:
        """Save configuration to file."""
        config_path = self.get_config_path()

        # Ensure directory exists
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2)

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self.github_token = None
        self.theme = DEFAULT_THEME
        self.log_level = DEFAULT_LOG_LEVEL
        self.api_url = DEFAULT_API_URL

    def resolve_token(self, env_file: Optional[Path] = None) -> str:
        """Find the GitHub token.

        Looks in a ``.env`` file (existing environment variables win), then
        the ``GITHUB_TOKEN`` environment variable, then ``github_token`` in
        the config file.

        Args:
            env_file: ``.env`` file to load; defaults to searching from the
                working directory.

        Raises:
            MissingTokenError: If no non-empty token is found.
        """
        dotenv_path = env_file or find_dotenv(usecwd=True)
        if dotenv_path:
            load_dotenv(dotenv_path=dotenv_path, override=False)
        token = os.environ.get(TOKEN_ENV_VAR, "").strip()
        if token:
            return token
        if self.github_token and self.github_token.strip():
            return self.github_token.strip()
        raise MissingTokenError(f"{TOKEN_ENV_VAR} is not set")


def usage_message() -> str:
    """Explain how to provide a token, shown when none is configured."""
    return "\n".join([
        f"Please set the {TOKEN_ENV_VAR} environment variable.",
        "You can either:",
        f"  1. Set environment variable: export {TOKEN_ENV_VAR}=your_token",
        f"  2. Create a .env file with: {TOKEN_ENV_VAR}=your_token",
        f"  3. Add \"github_token\" to {NitpickConfig.get_config_path()}",
        f"You can create a personal access token at: {TOKEN_URL}",
    ])
