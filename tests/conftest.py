"""
Shared fixtures: a throwaway repository and environment-based settings.
"""

from pathlib import Path

import pytest

from validate_codeowners.core.config import Config

GITLAB_ENV = {
    "CI_PROJECT_PATH": "grp/proj",
    "CI_COMMIT_REF_NAME": "main",
    "CI_API_GRAPHQL_URL": "https://gitlab.example.com/api/graphql",
    "CI_API_V4_URL": "https://gitlab.example.com/api/v4",
    "GITLAB_TOKEN": "glpat-test",
}


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    """A small checked-out repository without a CODEOWNERS file."""
    (tmp_path / "src" / "app").mkdir(parents=True)
    (tmp_path / "src" / "app" / "main.go").write_text("package main\n")
    (tmp_path / "README.md").write_text("# project\n")
    return tmp_path


@pytest.fixture
def make_config(monkeypatch: pytest.MonkeyPatch, repo_dir: Path):
    """Build a validated Config for repo_dir, with optional environment overrides."""

    def _make(**overrides: str) -> Config:
        for name in ("GITLAB_TIMEOUT_SECS", "DEBUG", "FAIL_NON_USERS_GROUPS", "LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)
        for name, value in {**GITLAB_ENV, "CODEOWNERS_ROOT": str(repo_dir), **overrides}.items():
            monkeypatch.setenv(name, value)
        return Config.from_env()

    return _make
