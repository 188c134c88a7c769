"""Security scanner: rule-driven per-line pattern matching."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..models import AnalyzerResult, AnalyzerType, HealthStatus, SecurityFinding
from ..rules import PatternRule, load_security_rules
from .base import FileAnalyzer

if TYPE_CHECKING:
    from ..pipeline.state import FileRecord


class SecurityScanner(FileAnalyzer):
    """One finding per rule match; confidence is the mean finding confidence."""

    type = AnalyzerType.SECURITY_SCANNER
    description = "Scans changed files for security vulnerabilities."

    def __init__(self, rules: Optional[list[PatternRule]] = None):
        self.rules = list(rules) if rules is not None else load_security_rules()

    def analyze(self, record: FileRecord) -> AnalyzerResult:
        findings: list[SecurityFinding] = []
        lines = record.content.split("\n")

        for rule in self.rules:
            if not rule.applies_to(record.language):
                continue
            for index, line_content in enumerate(lines):
                for match in rule.pattern.finditer(line_content):
                    findings.append(
                        SecurityFinding(
                            severity=rule.severity,
                            rule=rule.name,
                            message=rule.message,
                            file_path=record.file_path,
                            lines=(index + 1,),
                            recommendation=rule.recommendation,
                            evidence=(match.group(0),),
                            cwe_id=rule.cwe_id,
                            confidence=rule.confidence,
                        )
                    )

        if findings:
            confidence = sum(f.confidence for f in findings) / len(findings)
        else:
            confidence = 1.0

        return self._result(
            findings,
            confidence,
            rules_applied=[r.name for r in self.rules],
        )

    def health_check(self) -> HealthStatus:
        if not self.rules:
            return HealthStatus(healthy=False, message="No security rules loaded.")
        return HealthStatus(healthy=True, message=f"{len(self.rules)} rules loaded.")
