"""
Configuration management for LeetCode → GitHub sync.

Loads settings from environment variables (optionally via a .env file)
and provides structured configuration for all sync components.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from leetcode_sync.errors import ConfigError

# (variable, hint) for every required setting
REQUIRED_VARIABLES = (
    (
        "LEETCODE_SESSION_COOKIE",
        "Copy the LEETCODE_SESSION cookie from a logged-in browser session.",
    ),
    (
        "LEETCODE_CSRF_TOKEN",
        "Copy the csrftoken cookie from a logged-in browser session.",
    ),
    (
        "GITHUB_TOKEN",
        "Create a token with contents write access at https://github.com/settings/tokens",
    ),
    (
        "REPO_OWNER",
        "Set this to the user or organization that owns the target repository.",
    ),
    (
        "REPO_NAME",
        "Set this to the name of the target repository.",
    ),
)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").lower() == "true"


@dataclass
class Config:
    """
    Central configuration for the sync system.

    Loads from environment variables and provides defaults.
    All secrets are loaded from env vars - never hardcoded.
    """

    # LeetCode settings
    leetcode_session: str
    leetcode_csrf_token: str

    # GitHub settings
    github_token: str
    repo_owner: str
    repo_name: str
    branch: str = "main"

    # Extension used when a submission does not report its language
    default_language: str = "python"

    # Sync behavior
    debug: bool = False
    dry_run: bool = False

    @property
    def repo_full_name(self) -> str:
        """owner/name of the target repository."""
        return f"{self.repo_owner}/{self.repo_name}"

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Config":
        """
        Load configuration from environment variables.

        Args:
            env_file: Optional path to .env file. If not provided,
                     looks for .env in current directory.

        Returns:
            Configured Config instance.

        Raises:
            ConfigError: If required environment variables are missing.
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        values = {}
        for name, hint in REQUIRED_VARIABLES:
            value = os.getenv(name, "").strip()
            if not value:
                raise ConfigError(f"{name} environment variable is required.\n{hint}")
            values[name] = value

        return cls(
            leetcode_session=values["LEETCODE_SESSION_COOKIE"],
            leetcode_csrf_token=values["LEETCODE_CSRF_TOKEN"],
            github_token=values["GITHUB_TOKEN"],
            repo_owner=values["REPO_OWNER"],
            repo_name=values["REPO_NAME"],
            branch=os.getenv("REPO_BRANCH", "").strip() or "main",
            default_language=os.getenv("DEFAULT_LANGUAGE", "").strip() or "python",
            debug=_env_flag("DEBUG"),
            dry_run=_env_flag("DRY_RUN"),
        )
