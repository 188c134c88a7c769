"""Data models for review findings, analyzer results, and the final report."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class AnalyzerType(str, Enum):
    """Symbolic identifier of every analyzer variant."""

    # Global-scoped stages
    ORCHESTRATOR = "orchestrator"
    DEPENDENCY_MAPPER = "dependency_mapper"
    SYNTHESIZER = "synthesizer"
    REPORT_BUILDER = "report_builder"

    # File-scoped, universal
    DIFF_CLASSIFIER = "diff_classifier"
    SECURITY_SCANNER = "security_scanner"
    QUALITY_CHECKER = "quality_checker"
    COMPLEXITY_ANALYZER = "complexity_analyzer"

    # File-scoped, language specialists
    TYPESCRIPT_SPECIALIST = "typescript_specialist"
    PYTHON_SPECIALIST = "python_specialist"
    JAVA_SPECIALIST = "java_specialist"
    GO_SPECIALIST = "go_specialist"


SPECIALIST_TYPES = frozenset(
    {
        AnalyzerType.TYPESCRIPT_SPECIALIST,
        AnalyzerType.PYTHON_SPECIALIST,
        AnalyzerType.JAVA_SPECIALIST,
        AnalyzerType.GO_SPECIALIST,
    }
)

SEVERITY_ORDER: dict[str, int] = {
    "critical": 4,
    "high": 3,
    "medium": 2,
    "low": 1,
}


def severity_rank(severity: Optional[str]) -> int:
    """Rank used for ordering; unknown or missing severities rank lowest."""
    if severity is None:
        return 0
    return SEVERITY_ORDER.get(severity.lower(), 0)


# ── Findings ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SecurityFinding:
    severity: str  # low | medium | high | critical
    rule: str
    message: str
    file_path: str
    lines: tuple[int, ...]
    recommendation: str
    evidence: tuple[str, ...] = ()
    cwe_id: Optional[str] = None
    confidence: float = 0.8
    kind: str = "security"

    @property
    def line(self) -> Optional[int]:
        """First anchored line, or None for a file-level finding."""
        return self.lines[0] if self.lines else None


@dataclass(frozen=True)
class QualityIssue:
    severity: str  # low | medium | high
    category: str  # maintainability | readability | performance | style
    message: str
    file_path: str
    suggestion: str
    line: Optional[int] = None
    rule: str = ""
    confidence: float = 0.8
    kind: str = "quality"


@dataclass(frozen=True)
class PatternFinding:
    """One idiom, anti-pattern, or best-practice note from a language specialist."""

    message: str
    file_path: str
    line: Optional[int] = None
    severity: str = "low"
    suggestion: str = ""
    kind: str = "language"


@dataclass
class LanguagePatterns:
    idioms: list[PatternFinding] = field(default_factory=list)
    anti_patterns: list[PatternFinding] = field(default_factory=list)
    best_practices: list[PatternFinding] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.idioms or self.anti_patterns or self.best_practices)


PATTERN_SUBCATEGORIES = ("idioms", "anti_patterns", "best_practices")


@dataclass
class LanguageDependencies:
    direct: list[str] = field(default_factory=list)
    circular: list[str] = field(default_factory=list)
    unused: list[str] = field(default_factory=list)


@dataclass
class LanguageInsight:
    language: str
    file_path: str
    patterns: LanguagePatterns = field(default_factory=LanguagePatterns)
    dependencies: LanguageDependencies = field(default_factory=LanguageDependencies)


@dataclass
class TechnicalDebt:
    estimated_minutes: int
    issues: list[str] = field(default_factory=list)


@dataclass
class ComplexityMetric:
    """File-scoped metrics. No line anchor, never diff-filtered."""

    file_path: str
    cyclomatic_complexity: int
    cognitive_complexity: int
    lines_of_code: int
    maintainability_index: int
    technical_debt: TechnicalDebt


@dataclass
class ChangeSummary:
    file_path: str
    change_type: str  # Documentation | Feature/Refactor | Deletion | General Fix


@dataclass
class DegradedSecurityResult:
    """Stand-in output for a failed security scan. Never reads as clean."""

    findings: list[SecurityFinding] = field(default_factory=list)
    risk_level: str = "high"
    summary: str = "Security scan failed; the security of this code could not be assessed."


# ── Analyzer results ──────────────────────────────────────────────────


@dataclass
class ProcessingMetadata:
    processing_time: float = 0.0  # seconds
    resource_units: int = 0  # external units consumed (tokens, API calls)
    rules_applied: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    timed_out: bool = False


@dataclass
class AnalyzerResult:
    output: Any
    confidence: float
    metadata: ProcessingMetadata = field(default_factory=ProcessingMetadata)


@dataclass
class HealthStatus:
    healthy: bool
    message: Optional[str] = None


# ── Final report ──────────────────────────────────────────────────────


@dataclass
class LineComment:
    path: str
    line: int
    body: str


@dataclass
class Recommendations:
    critical: list[str] = field(default_factory=list)
    high: list[str] = field(default_factory=list)
    medium: list[str] = field(default_factory=list)
    low: list[str] = field(default_factory=list)


@dataclass
class ReportFindings:
    security: list[SecurityFinding] = field(default_factory=list)
    quality: list[QualityIssue] = field(default_factory=list)
    complexity: list[ComplexityMetric] = field(default_factory=list)
    language: list[LanguageInsight] = field(default_factory=list)


@dataclass
class ReportMetadata:
    total_files_analyzed: int = 0
    total_analyzers_used: int = 0
    average_confidence: float = 0.0
    processing_time: float = 0.0  # seconds since the run context was created
    uncertain_areas: list[str] = field(default_factory=list)
    core_files: list[str] = field(default_factory=list)
    change_summaries: dict[str, str] = field(default_factory=dict)


@dataclass
class FinalReport:
    summary: str
    overall_score: float  # 1-10, 0 for a failed run
    risk_level: str  # low | medium | high
    findings: ReportFindings = field(default_factory=ReportFindings)
    line_comments: list[LineComment] = field(default_factory=list)
    recommendations: Recommendations = field(default_factory=Recommendations)
    metadata: ReportMetadata = field(default_factory=ReportMetadata)
