"""
Configuration package - unified access point.

Settings are read from the environment once, at process start, and passed
into the validator as plain values.
"""

from validate_codeowners.core.config.gitlab_config import GitLabConfig
from validate_codeowners.core.config.logging_config import LoggingConfig
from validate_codeowners.core.config.settings import Config

__all__ = [
    "Config",
    "GitLabConfig",
    "LoggingConfig",
]
