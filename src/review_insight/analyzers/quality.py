"""Quality checker: rule-driven per-line pattern matching filtered by language."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

from ..models import AnalyzerResult, AnalyzerType, HealthStatus, QualityIssue
from ..rules import PatternRule, load_quality_rules
from .base import FileAnalyzer

if TYPE_CHECKING:
    from ..pipeline.state import FileRecord

CLEAN_CONFIDENCE = 0.95

_INTEGER = re.compile(r"-?\d+")


class QualityChecker(FileAnalyzer):
    """At most one issue per rule per line."""

    type = AnalyzerType.QUALITY_CHECKER
    description = "Checks changed files for code quality issues."

    def __init__(self, rules: Optional[list[PatternRule]] = None):
        self.rules = list(rules) if rules is not None else load_quality_rules()

    def analyze(self, record: FileRecord) -> AnalyzerResult:
        issues: list[QualityIssue] = []
        lines = record.content.split("\n")

        for rule in self.rules:
            if not rule.applies_to(record.language):
                continue
            for index, line_content in enumerate(lines):
                match = rule.pattern.search(line_content)
                if match is None:
                    continue
                issues.append(
                    QualityIssue(
                        severity=rule.severity,
                        category=rule.category,
                        message=rule.message,
                        file_path=record.file_path,
                        suggestion=rule.recommendation,
                        line=index + 1,
                        rule=rule.name,
                        confidence=self._issue_confidence(rule, match.group(0)),
                    )
                )

        if issues:
            confidence = sum(i.confidence for i in issues) / len(issues)
        else:
            confidence = CLEAN_CONFIDENCE

        return self._result(
            issues,
            confidence,
            rules_applied=[r.name for r in self.rules],
        )

    def _issue_confidence(self, rule: PatternRule, matched: str) -> float:
        confidence = rule.confidence
        # Small magic numbers are usually harmless
        if rule.name == "magic_numbers":
            number = _INTEGER.search(matched)
            if number is not None and int(number.group(0)) < 10:
                confidence -= 0.2
        return round(max(0.0, confidence), 2)

    def health_check(self) -> HealthStatus:
        if not self.rules:
            return HealthStatus(healthy=False, message="No quality rules loaded.")
        return HealthStatus(healthy=True, message=f"{len(self.rules)} rules loaded.")
