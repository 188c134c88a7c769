"""ReviewKernel: runs the pipeline stages over one RunState.

    Dependency Mapper -> Orchestrator -> Synthesizer -> Report Builder

Global stages return their contribution; the kernel writes it into the
state. A failure on the critical path yields the fallback report, so
``run`` never raises.
"""

from __future__ import annotations

from typing import Any, Optional

from ..analyzers.registry import AnalyzerRegistry, default_registry
from ..config import DEFAULT_CONFIG, ReviewConfig
from ..logging_config import get_logger
from ..models import AnalyzerResult, FinalReport
from .dependency_mapper import DependencyMapper
from .failure import FailurePolicy, build_fallback_report, invoke_analyzer
from .orchestrator import Orchestrator
from .report import ReportBuilder
from .state import RunState
from .synthesizer import Synthesizer

logger = get_logger(__name__)


class ReviewKernel:
    """Review one change set: map dependencies -> analyze -> synthesize -> report."""

    def __init__(
        self,
        config: Optional[ReviewConfig] = None,
        registry: Optional[AnalyzerRegistry] = None,
        policy: Optional[FailurePolicy] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.registry = registry if registry is not None else default_registry(self.config)
        self.policy = policy or FailurePolicy()

        self.dependency_mapper = DependencyMapper()
        self.orchestrator = Orchestrator(self.registry, self.config, self.policy)
        self.synthesizer = Synthesizer()
        self.report_builder = ReportBuilder(self.config)

        # The populated state of the most recent run, for diagnostics.
        self.last_state: Optional[RunState] = None

    def run(self, state: RunState) -> FinalReport:
        """Run every stage over ``state`` and return the report.

        Never raises: a critical failure produces the fallback report
        (score 0, risk high, one manual-review recommendation).
        """
        self.last_state = state
        logger.info(f"Reviewing {state.context.label}: {len(state.files)} file(s)")
        try:
            return self._run(state)
        except Exception as e:
            logger.error(f"Review of {state.context.label} failed: {e}")
            return build_fallback_report(state, e)

    def _run(self, state: RunState) -> FinalReport:
        timeout = self.config.analyzer_timeout_seconds

        # Phase 1: dependency graph, strictly before dispatch
        graph = self._invoke(self.dependency_mapper, state, timeout).output
        state.dependency_graph.set(graph, produced_by=self.dependency_mapper.type.value)

        # Phase 2: per-file analysis; every inner invocation has its own guard
        summary = self._invoke(self.orchestrator, state, None).output
        state.core_files.extend(summary.core_files)

        # Phase 3: synthesis, strictly after all files
        synthesis = self._invoke(self.synthesizer, state, timeout).output
        state.merge_intermediate(synthesis.as_intermediate())

        # Phase 4: report
        report = self._invoke(self.report_builder, state, timeout).output
        state.final_result.set(report, produced_by=self.report_builder.type.value)
        return report

    def _invoke(self, stage: Any, state: RunState, timeout: Optional[float]) -> AnalyzerResult:
        return invoke_analyzer(
            stage,
            state,
            state,
            instance_id=stage.type.value,
            timeout=timeout,
            policy=self.policy,
        )
