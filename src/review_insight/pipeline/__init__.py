"""Review pipeline: shared run state, stages, and the kernel that runs them."""

from .dependency_mapper import DependencyMapper, build_dependency_graph
from .failure import FailurePolicy, build_fallback_report, invoke_analyzer, run_with_timeout
from .kernel import ReviewKernel
from .orchestrator import Orchestrator, OrchestrationSummary, analyzers_for
from .ranking import deduplicate_findings, filter_by_diff, sort_by_severity
from .report import ReportBuilder
from .state import (
    AnalyzerState,
    DependencyGraph,
    FileRecord,
    RunContext,
    RunState,
    Slot,
)
from .synthesizer import SynthesisResult, Synthesizer

__all__ = [
    "AnalyzerState",
    "DependencyGraph",
    "DependencyMapper",
    "FailurePolicy",
    "FileRecord",
    "Orchestrator",
    "OrchestrationSummary",
    "ReportBuilder",
    "ReviewKernel",
    "RunContext",
    "RunState",
    "Slot",
    "SynthesisResult",
    "Synthesizer",
    "analyzers_for",
    "build_dependency_graph",
    "build_fallback_report",
    "deduplicate_findings",
    "filter_by_diff",
    "invoke_analyzer",
    "run_with_timeout",
    "sort_by_severity",
]
