"""
GitLab configuration.
"""

from dataclasses import dataclass


@dataclass
class GitLabConfig:
    """GitLab connection and project settings."""

    project_path: str
    branch: str
    graphql_url: str
    rest_url: str
    token: str
    timeout_secs: int = 30
