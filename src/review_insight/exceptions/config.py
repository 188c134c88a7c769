"""Configuration exceptions: settings values and rule tables."""

from pathlib import Path
from typing import Any

from .base import ReviewInsightError


class ConfigurationError(ReviewInsightError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class RuleLoadError(ConfigurationError):
    """Raised when a rule table cannot be read or contains bad records."""

    def __init__(self, source: Path, reason: str):
        super().__init__(
            f"Cannot load rules from {source}",
            details={"source": str(source), "reason": reason},
        )
        self.source = source
        self.reason = reason
