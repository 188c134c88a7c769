"""Configuration loading and management for Review Insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in ReviewConfig)
    2. Global config (~/.review-insight.toml)
    3. Project config (./review-insight.toml)
    4. Explicit config file
    5. Environment variables (REVIEW_INSIGHT_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(workers=4)
    >>> config.workers
    4
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import InvalidConfigError, ReviewInsightError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "REVIEW_INSIGHT_"


@dataclass(frozen=True)
class ReviewConfig:
    """Configuration for one review run.

    Attributes:
        core_file_threshold: A file with more dependents than this is logged
            as a core file. Telemetry only; it never changes which analyzers run.
        analyzer_timeout_seconds: Bounded-time guard for every analyzer invocation.
        workers: Files analyzed concurrently. 1 means strictly sequential.
        security_rules_file: JSON rule table replacing the bundled security rules.
        quality_rules_file: JSON rule table replacing the bundled quality rules.
        max_security_recommendations: Security findings promoted to recommendations.
        max_quality_recommendations: Quality issues promoted to recommendations.
        verbosity: Logging verbosity for CLI use.
    """

    core_file_threshold: int = 2
    analyzer_timeout_seconds: float = 30.0
    workers: int = 1

    security_rules_file: Optional[str] = None
    quality_rules_file: Optional[str] = None

    max_security_recommendations: int = 3
    max_quality_recommendations: int = 2

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.core_file_threshold < 0:
            raise ValueError("core_file_threshold must be non-negative")
        if self.analyzer_timeout_seconds <= 0:
            raise ValueError("analyzer_timeout_seconds must be positive")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.max_security_recommendations < 0:
            raise ValueError("max_security_recommendations must be non-negative")
        if self.max_quality_recommendations < 0:
            raise ValueError("max_quality_recommendations must be non-negative")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")


DEFAULT_CONFIG = ReviewConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> ReviewConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated ReviewConfig instance

    Raises:
        ReviewInsightError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".review-insight.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise ReviewInsightError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "review-insight.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise ReviewInsightError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ReviewInsightError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise ReviewInsightError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ReviewConfig(**merged)
    except TypeError as e:
        raise ReviewInsightError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise ReviewInsightError(f"Invalid configuration value: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from REVIEW_INSIGHT_* environment variables.

    Supported environment variables:
        REVIEW_INSIGHT_CORE_FILE_THRESHOLD: int
        REVIEW_INSIGHT_ANALYZER_TIMEOUT_SECONDS: float
        REVIEW_INSIGHT_WORKERS: int
        REVIEW_INSIGHT_SECURITY_RULES_FILE: path
        REVIEW_INSIGHT_QUALITY_RULES_FILE: path
        REVIEW_INSIGHT_MAX_SECURITY_RECOMMENDATIONS: int
        REVIEW_INSIGHT_MAX_QUALITY_RECOMMENDATIONS: int
        REVIEW_INSIGHT_VERBOSITY: quiet/normal/verbose
    """
    type_hints = get_type_hints(ReviewConfig)

    result: dict[str, Any] = {}

    for field_name in ReviewConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ReviewInsightError: If no TOML parser is available
        Exception: If TOML parsing fails
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ReviewInsightError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        data = tomllib.load(f)

    # Allow settings nested under a [review] table
    if isinstance(data.get("review"), dict):
        return dict(data["review"])
    return data
