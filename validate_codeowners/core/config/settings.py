"""
Main configuration class that composes all configs.
"""

import os
from urllib.parse import urlparse

from dotenv import load_dotenv

from validate_codeowners.core.config.gitlab_config import GitLabConfig
from validate_codeowners.core.config.logging_config import LoggingConfig
from validate_codeowners.core.errors import ConfigurationError

# Load environment variables from a .env file
load_dotenv()

REQUIRED_VARIABLES = {
    "CI_PROJECT_PATH": "project_path",
    "CI_COMMIT_REF_NAME": "branch",
    "CI_API_GRAPHQL_URL": "graphql_url",
    "CI_API_V4_URL": "rest_url",
    "GITLAB_TOKEN": "token",
}


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() == "true"


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        timeout_secs, self._timeout_problem = _parse_timeout(os.getenv("GITLAB_TIMEOUT_SECS", "30"))
        self.gitlab = GitLabConfig(
            project_path=os.getenv("CI_PROJECT_PATH", ""),
            branch=os.getenv("CI_COMMIT_REF_NAME", ""),
            graphql_url=os.getenv("CI_API_GRAPHQL_URL", ""),
            rest_url=os.getenv("CI_API_V4_URL", ""),
            token=os.getenv("GITLAB_TOKEN", ""),
            timeout_secs=timeout_secs,
        )

        self.logging = LoggingConfig(
            debug=_env_flag("DEBUG"),
            format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        )

        # Fail when owner tokens without "@" are present; GitLab silently ignores them
        self.fail_non_users_groups = _env_flag("FAIL_NON_USERS_GROUPS")
        self.root_dir = os.getenv("CODEOWNERS_ROOT", ".")

    @classmethod
    def from_env(cls) -> "Config":
        """Build and validate a configuration from the current environment."""
        config = cls()
        config.validate()
        return config

    def validate(self) -> bool:
        """Validate configuration, reporting every problem at once."""
        errors = []

        for variable, field_name in REQUIRED_VARIABLES.items():
            if not getattr(self.gitlab, field_name):
                errors.append(f"{variable} is required")

        for variable, url in (("CI_API_GRAPHQL_URL", self.gitlab.graphql_url), ("CI_API_V4_URL", self.gitlab.rest_url)):
            if url:
                problem = _url_problem(url)
                if problem:
                    errors.append(f"{variable} {problem}: '{url}'")

        if self._timeout_problem:
            errors.append(self._timeout_problem)

        if errors:
            raise ConfigurationError(errors)

        return True


def _parse_timeout(raw: str) -> tuple[int, str | None]:
    """Parse GITLAB_TIMEOUT_SECS, keeping the default of 30 alongside a problem description."""
    try:
        timeout_secs = int(raw)
    except ValueError:
        return 30, f"GITLAB_TIMEOUT_SECS must be an integer: '{raw}'"
    if timeout_secs <= 0:
        return 30, "GITLAB_TIMEOUT_SECS must be a positive integer"
    return timeout_secs, None


def _url_problem(url: str) -> str | None:
    """Return a description of what is wrong with an API URL, or None."""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return "is not a valid URL"
    if not parsed.path or parsed.path == "/":
        return "does not contain a path"
    return None
