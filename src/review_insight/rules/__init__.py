"""Pattern rule tables for the rule-driven analyzers.

Rules are plain records: ``{name, pattern, severity, message, recommendation,
languages, confidence, category, cwe_id}``. An empty ``languages`` list makes a
rule apply to every language. Bundled defaults live next to this module as
JSON; a config file can point to replacement tables.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Optional

from ..exceptions import RuleLoadError
from ..logging_config import get_logger

logger = get_logger(__name__)

VALID_SEVERITIES = ("low", "medium", "high", "critical")

SECURITY_RULES_RESOURCE = "security_rules.json"
QUALITY_RULES_RESOURCE = "quality_rules.json"


@dataclass(frozen=True)
class PatternRule:
    name: str
    pattern: re.Pattern
    severity: str
    message: str
    recommendation: str = ""
    languages: tuple[str, ...] = ()
    confidence: float = 0.8
    category: str = "maintainability"
    cwe_id: Optional[str] = None

    def applies_to(self, language: str) -> bool:
        return not self.languages or language in self.languages


def parse_rule(record: dict[str, Any]) -> PatternRule:
    """Build one PatternRule from a raw record. Raises ValueError on bad data."""
    missing = [key for key in ("name", "pattern", "severity", "message") if key not in record]
    if missing:
        raise ValueError(f"rule is missing {', '.join(missing)}")

    severity = str(record["severity"]).lower()
    if severity not in VALID_SEVERITIES:
        raise ValueError(f"rule {record['name']!r} has unknown severity {severity!r}")

    confidence = float(record.get("confidence", 0.8))
    if not 0.0 <= confidence <= 1.0:
        raise ValueError(f"rule {record['name']!r} confidence must be in [0, 1]")

    try:
        pattern = re.compile(record["pattern"], re.IGNORECASE)
    except re.error as e:
        raise ValueError(f"rule {record['name']!r} has invalid pattern: {e}")

    return PatternRule(
        name=record["name"],
        pattern=pattern,
        severity=severity,
        message=record["message"],
        recommendation=record.get("recommendation") or record.get("suggestion", ""),
        languages=tuple(record.get("languages", ())),
        confidence=confidence,
        category=record.get("category", "maintainability"),
        cwe_id=record.get("cweId") or record.get("cwe_id"),
    )


def parse_rules(records: list[dict[str, Any]], source: Path) -> list[PatternRule]:
    if not isinstance(records, list):
        raise RuleLoadError(source, "rule table must be a JSON list")
    rules = []
    for record in records:
        try:
            rules.append(parse_rule(record))
        except (ValueError, TypeError) as e:
            raise RuleLoadError(source, str(e))
    return rules


def load_rules(path: Path) -> list[PatternRule]:
    """Load a rule table from a JSON file."""
    try:
        records = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise RuleLoadError(Path(path), str(e))
    rules = parse_rules(records, Path(path))
    logger.debug(f"Loaded {len(rules)} rules from {path}")
    return rules


def _load_bundled(resource_name: str) -> list[PatternRule]:
    text = resources.files(__package__).joinpath(resource_name).read_text(encoding="utf-8")
    return parse_rules(json.loads(text), Path(resource_name))


def load_security_rules(path: Optional[str] = None) -> list[PatternRule]:
    return load_rules(Path(path)) if path else _load_bundled(SECURITY_RULES_RESOURCE)


def load_quality_rules(path: Optional[str] = None) -> list[PatternRule]:
    return load_rules(Path(path)) if path else _load_bundled(QUALITY_RULES_RESOURCE)


__all__ = [
    "PatternRule",
    "parse_rule",
    "parse_rules",
    "load_rules",
    "load_security_rules",
    "load_quality_rules",
]
