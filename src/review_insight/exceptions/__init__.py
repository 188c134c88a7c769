"""Exception hierarchy for Review Insight."""

from .analysis import (
    AnalysisError,
    AnalyzerError,
    AnalyzerTimeoutError,
    CriticalStageError,
    MalformedInputError,
)
from .base import ReviewInsightError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    RuleLoadError,
)

__all__ = [
    "ReviewInsightError",
    "AnalysisError",
    "AnalyzerError",
    "AnalyzerTimeoutError",
    "CriticalStageError",
    "MalformedInputError",
    "ConfigurationError",
    "InvalidConfigError",
    "RuleLoadError",
]
