"""Report Builder: FinalReport from the synthesized findings.

All prose is template-based. The score starts at 10 and loses
severity-weighted points per finding, clamped to [1, 10].
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import numpy as np

from ..analyzers.base import GLOBAL_SCOPE
from ..config import DEFAULT_CONFIG, ReviewConfig
from ..logging_config import get_logger
from ..models import (
    AnalyzerResult,
    AnalyzerType,
    FinalReport,
    HealthStatus,
    LineComment,
    QualityIssue,
    Recommendations,
    ReportFindings,
    ReportMetadata,
    SecurityFinding,
    severity_rank,
)
from .ranking import sort_by_severity
from .state import RunState
from .synthesizer import SynthesisResult

logger = get_logger(__name__)

NO_ISSUES_SUMMARY = "No major issues were found in this review. The code looks clean and well structured."

SECURITY_PENALTY = {"critical": 3.0, "high": 2.0, "medium": 1.0, "low": 0.5}
QUALITY_PENALTY = {"critical": 1.5, "high": 1.0, "medium": 0.5, "low": 0.25}
LANGUAGE_PENALTY = 0.1
DEGRADED_SECURITY_PENALTY = 2.0

MAX_SCORE = 10.0
MIN_SCORE = 1.0


def build_summary(synthesis: SynthesisResult) -> str:
    security = synthesis.security_findings
    quality = synthesis.quality_issues
    complexity = synthesis.complexity_metrics
    total = len(security) + len(quality)

    if total == 0:
        text = NO_ISSUES_SUMMARY
    else:
        parts = [f"This review found {total} major issue(s)."]
        if security:
            parts.append(f"*   **Security**: {len(security)} potential vulnerability(ies) need attention.")
        if quality:
            parts.append(
                f"*   **Code quality**: {len(quality)} issue(s) affecting maintainability and style."
            )
        if complexity:
            mean_cognitive = float(np.mean([m.cognitive_complexity for m in complexity]))
            parts.append(
                f"*   **Complexity**: analyzed {len(complexity)} file(s), "
                f"average cognitive complexity {mean_cognitive:.2f}."
            )
        parts.append("See the recommendations below for details.")
        text = "\n".join(parts)

    if synthesis.degraded_security:
        text += (
            f"\nSecurity scanning failed for {len(synthesis.degraded_security)} file(s); "
            "their security could not be assessed."
        )
    return text


def build_recommendations(
    synthesis: SynthesisResult,
    max_security: int = 3,
    max_quality: int = 2,
) -> Recommendations:
    recommendations = Recommendations()

    for finding in sort_by_severity(synthesis.security_findings)[:max_security]:
        lines = ", ".join(str(line) for line in finding.lines)
        message = f"[Security] {finding.message} (file: {finding.file_path}, lines: {lines})"
        if finding.severity in ("critical", "high"):
            recommendations.high.append(message)
        else:
            recommendations.medium.append(message)

    for issue in sort_by_severity(synthesis.quality_issues)[:max_quality]:
        recommendations.medium.append(
            f"[Quality] {issue.message} (file: {issue.file_path}, line: {issue.line})"
        )

    return recommendations


def compute_score(synthesis: SynthesisResult) -> float:
    penalty = sum(SECURITY_PENALTY.get(f.severity, 0.5) for f in synthesis.security_findings)
    penalty += sum(QUALITY_PENALTY.get(i.severity, 0.25) for i in synthesis.quality_issues)
    # Idioms are observations, not problems.
    penalty += LANGUAGE_PENALTY * sum(
        len(insight.patterns.anti_patterns) + len(insight.patterns.best_practices)
        for insight in synthesis.language_insights
    )
    penalty += DEGRADED_SECURITY_PENALTY * len(synthesis.degraded_security)
    return round(min(MAX_SCORE, max(MIN_SCORE, MAX_SCORE - penalty)), 1)


def assess_risk(synthesis: SynthesisResult) -> str:
    """``high`` for any serious or unassessed security slice, else by severity."""
    if synthesis.degraded_security:
        return "high"
    if any(severity_rank(f.severity) >= severity_rank("high") for f in synthesis.security_findings):
        return "high"
    if synthesis.security_findings:
        return "medium"
    if any(i.severity == "high" for i in synthesis.quality_issues):
        return "medium"
    return "low"


def build_line_comments(synthesis: SynthesisResult) -> list[LineComment]:
    comments: list[LineComment] = []
    for finding in synthesis.security_findings:
        if finding.line is None:
            continue
        body = f"**[Security - {finding.severity}]** {finding.message}"
        if finding.recommendation:
            body += f"\n\n{finding.recommendation}"
        comments.append(LineComment(path=finding.file_path, line=finding.line, body=body))
    for issue in synthesis.quality_issues:
        if issue.line is None:
            continue
        body = f"**[Quality - {issue.severity}]** {issue.message}"
        if issue.suggestion:
            body += f"\n\n{issue.suggestion}"
        comments.append(LineComment(path=issue.file_path, line=issue.line, body=body))
    comments.sort(key=lambda c: (c.path, c.line))
    return comments


def uncertain_areas(state: RunState, synthesis: SynthesisResult) -> list[str]:
    areas = [
        f"Security of {path} could not be assessed; the security scan failed."
        for path in synthesis.degraded_security
    ]
    for analyzer_state in state.analyzer_states.values():
        if analyzer_state.status != "failed":
            continue
        if analyzer_state.analyzer_type == AnalyzerType.SECURITY_SCANNER:
            continue  # already reported above
        where = f" for {analyzer_state.file_path}" if analyzer_state.file_path else ""
        areas.append(
            f"{analyzer_state.analyzer_type.value} did not complete{where}: "
            f"{analyzer_state.status_message}"
        )
    return areas


def average_confidence(state: RunState) -> float:
    confidences = [s.confidence for s in state.analyzer_states.values() if s.status != "working"]
    if not confidences:
        return 0.0
    return round(float(np.mean(confidences)), 2)


class ReportBuilder:
    """Global-scoped stage producing the FinalReport from ``intermediate_results``."""

    type = AnalyzerType.REPORT_BUILDER
    scope = GLOBAL_SCOPE
    description = "Generates the final report from synthesized findings."

    def __init__(self, config: ReviewConfig = DEFAULT_CONFIG):
        self.config = config

    def process(self, target: RunState, state: Optional[RunState] = None) -> AnalyzerResult:
        return AnalyzerResult(output=self.build(target), confidence=1.0)

    def build(self, state: RunState) -> FinalReport:
        synthesis = SynthesisResult.from_intermediate(state.intermediate_results)
        elapsed = (datetime.now(timezone.utc) - state.context.created_at).total_seconds()

        report = FinalReport(
            summary=build_summary(synthesis),
            overall_score=compute_score(synthesis),
            risk_level=assess_risk(synthesis),
            findings=ReportFindings(
                security=list(synthesis.security_findings),
                quality=list(synthesis.quality_issues),
                complexity=list(synthesis.complexity_metrics),
                language=list(synthesis.language_insights),
            ),
            line_comments=build_line_comments(synthesis),
            recommendations=build_recommendations(
                synthesis,
                max_security=self.config.max_security_recommendations,
                max_quality=self.config.max_quality_recommendations,
            ),
            metadata=ReportMetadata(
                total_files_analyzed=len(state.files),
                total_analyzers_used=len(state.analyzer_states),
                average_confidence=average_confidence(state),
                processing_time=elapsed,
                uncertain_areas=uncertain_areas(state, synthesis),
                core_files=list(state.core_files),
                change_summaries=dict(synthesis.change_summaries),
            ),
        )
        logger.debug(f"Report built: score {report.overall_score}, risk {report.risk_level}")
        return report

    def health_check(self) -> HealthStatus:
        return HealthStatus(healthy=True)
