"""Synthesizer: bucket, diff-filter, deduplicate, and regroup findings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..analyzers.base import GLOBAL_SCOPE
from ..diff import added_line_map
from ..logging_config import get_logger
from ..models import (
    PATTERN_SUBCATEGORIES,
    SPECIALIST_TYPES,
    AnalyzerResult,
    AnalyzerType,
    ChangeSummary,
    ComplexityMetric,
    DegradedSecurityResult,
    HealthStatus,
    LanguageInsight,
    PatternFinding,
    QualityIssue,
    SecurityFinding,
)
from .ranking import deduplicate_findings, filter_by_diff
from .state import RunState

logger = get_logger(__name__)


@dataclass
class SynthesisResult:
    security_findings: list[SecurityFinding] = field(default_factory=list)
    quality_issues: list[QualityIssue] = field(default_factory=list)
    complexity_metrics: list[ComplexityMetric] = field(default_factory=list)
    language_insights: list[LanguageInsight] = field(default_factory=list)
    # Files whose security scan failed and was replaced by a stand-in.
    degraded_security: list[str] = field(default_factory=list)
    change_summaries: dict[str, str] = field(default_factory=dict)

    def as_intermediate(self) -> dict[str, Any]:
        return {
            "security_findings": self.security_findings,
            "quality_issues": self.quality_issues,
            "complexity_metrics": self.complexity_metrics,
            "language_insights": self.language_insights,
            "degraded_security": self.degraded_security,
            "change_summaries": self.change_summaries,
        }

    @classmethod
    def from_intermediate(cls, results: dict[str, Any]) -> SynthesisResult:
        return cls(
            security_findings=list(results.get("security_findings", [])),
            quality_issues=list(results.get("quality_issues", [])),
            complexity_metrics=list(results.get("complexity_metrics", [])),
            language_insights=list(results.get("language_insights", [])),
            degraded_security=list(results.get("degraded_security", [])),
            change_summaries=dict(results.get("change_summaries", {})),
        )


@dataclass(frozen=True)
class _LanguageEntry:
    """A flattened language-insight entry tagged with where it came from."""

    finding: PatternFinding
    subcategory: str
    language: str

    kind = "language"

    @property
    def file_path(self) -> str:
        return self.finding.file_path

    @property
    def line(self) -> Optional[int]:
        return self.finding.line

    @property
    def severity(self) -> str:
        return self.finding.severity

    @property
    def message(self) -> str:
        return self.finding.message


def _flatten(insight: LanguageInsight) -> list[_LanguageEntry]:
    entries = []
    for subcategory in PATTERN_SUBCATEGORIES:
        for finding in getattr(insight.patterns, subcategory):
            entries.append(_LanguageEntry(finding, subcategory, insight.language))
    return entries


def _regroup(entries: list[_LanguageEntry], originals: dict[str, LanguageInsight]) -> list[LanguageInsight]:
    """One insight per file, each entry back in its original sub-category."""
    by_file: dict[str, LanguageInsight] = {}
    for entry in entries:
        insight = by_file.get(entry.file_path)
        if insight is None:
            insight = LanguageInsight(language=entry.language, file_path=entry.file_path)
            original = originals.get(entry.file_path)
            if original is not None:
                insight.dependencies = original.dependencies
            by_file[entry.file_path] = insight
        getattr(insight.patterns, entry.subcategory).append(entry.finding)
    return [by_file[path] for path in sorted(by_file)]


class Synthesizer:
    """Global-scoped stage run strictly after every file has been analyzed."""

    type = AnalyzerType.SYNTHESIZER
    scope = GLOBAL_SCOPE
    description = "Correlates analyzer outputs with the diff and deduplicates them."

    def process(self, target: RunState, state: Optional[RunState] = None) -> AnalyzerResult:
        result = self.synthesize(target)
        return AnalyzerResult(output=result, confidence=1.0)

    def synthesize(self, state: RunState) -> SynthesisResult:
        security: list[SecurityFinding] = []
        quality: list[QualityIssue] = []
        complexity: list[ComplexityMetric] = []
        language_entries: list[_LanguageEntry] = []
        insights_by_file: dict[str, LanguageInsight] = {}
        degraded: list[str] = []
        change_summaries: dict[str, str] = {}

        for path in state.file_paths():
            record = state.files[path]
            for analyzer_type, output in record.analysis_results.items():
                if analyzer_type == AnalyzerType.SECURITY_SCANNER:
                    if isinstance(output, DegradedSecurityResult):
                        degraded.append(path)
                        security.extend(output.findings)
                    else:
                        security.extend(output)
                elif analyzer_type == AnalyzerType.QUALITY_CHECKER:
                    quality.extend(output)
                elif analyzer_type == AnalyzerType.COMPLEXITY_ANALYZER:
                    if isinstance(output, ComplexityMetric):
                        complexity.append(output)
                elif analyzer_type == AnalyzerType.DIFF_CLASSIFIER:
                    if isinstance(output, ChangeSummary):
                        change_summaries[path] = output.change_type
                elif analyzer_type in SPECIALIST_TYPES:
                    if isinstance(output, LanguageInsight):
                        insights_by_file[path] = output
                        language_entries.extend(_flatten(output))

        added_lines = added_line_map(state.context.diff_text)
        security = filter_by_diff(security, added_lines)
        quality = filter_by_diff(quality, added_lines)
        language_entries = filter_by_diff(language_entries, added_lines)

        # One dedup pass across categories: a (file, line) key holds one finding.
        survivors = deduplicate_findings([*security, *quality, *language_entries])

        result = SynthesisResult(
            security_findings=[f for f in survivors if isinstance(f, SecurityFinding)],
            quality_issues=[f for f in survivors if isinstance(f, QualityIssue)],
            complexity_metrics=complexity,
            language_insights=_regroup(
                [f for f in survivors if isinstance(f, _LanguageEntry)], insights_by_file
            ),
            degraded_security=degraded,
            change_summaries=change_summaries,
        )
        logger.debug(
            f"Synthesized {len(result.security_findings)} security, "
            f"{len(result.quality_issues)} quality, "
            f"{len(result.language_insights)} language insight(s)"
        )
        return result

    def health_check(self) -> HealthStatus:
        return HealthStatus(healthy=True)
