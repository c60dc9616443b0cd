"""
Logging configuration.
"""

from dataclasses import dataclass


@dataclass
class LoggingConfig:
    """Logging configuration."""

    debug: bool = False
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
