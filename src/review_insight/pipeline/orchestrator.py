"""Orchestrator: per-file analyzer selection and dispatch.

Each file gets a base analyzer set chosen by its language plus the
universal analyzers. Analyzers missing from the registry are skipped;
a missing analyzer never fails the file or the run.
"""

from __future__ import annotations

import concurrent.futures
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from ..analyzers.base import GLOBAL_SCOPE
from ..config import DEFAULT_CONFIG, ReviewConfig
from ..logging_config import get_logger
from ..models import AnalyzerResult, AnalyzerType, HealthStatus
from .failure import FailurePolicy, invoke_analyzer
from .state import DependencyGraph, RunState

if TYPE_CHECKING:
    from ..analyzers.registry import AnalyzerRegistry

logger = get_logger(__name__)

_QUALITY_AND_SECURITY = (AnalyzerType.QUALITY_CHECKER, AnalyzerType.SECURITY_SCANNER)

ANALYZERS_BY_LANGUAGE: dict[str, tuple[AnalyzerType, ...]] = {
    "typescript": _QUALITY_AND_SECURITY + (AnalyzerType.TYPESCRIPT_SPECIALIST,),
    "javascript": _QUALITY_AND_SECURITY + (AnalyzerType.TYPESCRIPT_SPECIALIST,),
    "python": _QUALITY_AND_SECURITY + (AnalyzerType.PYTHON_SPECIALIST,),
    "java": _QUALITY_AND_SECURITY + (AnalyzerType.JAVA_SPECIALIST,),
    "go": _QUALITY_AND_SECURITY + (AnalyzerType.GO_SPECIALIST,),
}

# Run for every file regardless of language.
UNIVERSAL_ANALYZERS: tuple[AnalyzerType, ...] = (
    AnalyzerType.COMPLEXITY_ANALYZER,
    AnalyzerType.DIFF_CLASSIFIER,
)


def analyzers_for(language: str) -> tuple[AnalyzerType, ...]:
    """Analyzer types to invoke for a file, in invocation order."""
    return ANALYZERS_BY_LANGUAGE.get(language, ()) + UNIVERSAL_ANALYZERS


def instance_id(analyzer_type: AnalyzerType, file_path: str) -> str:
    return f"{analyzer_type.value}:{file_path}"


@dataclass
class OrchestrationSummary:
    files_processed: int = 0
    total_invocations: int = 0
    # "type:path" for each analyzer that was selected but not registered
    skipped: list[str] = field(default_factory=list)
    core_files: list[str] = field(default_factory=list)


class Orchestrator:
    """Dispatch file-scoped analyzers and write their outputs per file.

    This is the only stage that writes ``FileRecord.analysis_results``.
    Each file's dict is touched by one worker only, so files can run
    concurrently when ``config.workers > 1``.
    """

    type = AnalyzerType.ORCHESTRATOR
    scope = GLOBAL_SCOPE
    description = "Selects and runs analyzers for every changed file."

    def __init__(
        self,
        registry: AnalyzerRegistry,
        config: ReviewConfig = DEFAULT_CONFIG,
        policy: Optional[FailurePolicy] = None,
    ):
        self.registry = registry
        self.config = config
        self.policy = policy or FailurePolicy()

    def process(self, target: RunState, state: Optional[RunState] = None) -> AnalyzerResult:
        graph = target.dependency_graph.get(default=DependencyGraph())
        paths = target.file_paths()
        summary = OrchestrationSummary(
            files_processed=len(paths),
            core_files=self.core_files(paths, graph),
        )

        if self.config.workers > 1 and len(paths) > 1:
            with concurrent.futures.ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                outcomes = list(executor.map(lambda p: self._process_file(target, p), paths))
        else:
            outcomes = [self._process_file(target, path) for path in paths]

        for invocations, skipped in outcomes:
            summary.total_invocations += invocations
            summary.skipped.extend(skipped)

        logger.info(
            f"Orchestrated {summary.total_invocations} analyzer invocation(s) "
            f"across {summary.files_processed} file(s)"
        )
        return AnalyzerResult(output=summary, confidence=1.0)

    def core_files(self, paths: list[str], graph: DependencyGraph) -> list[str]:
        """Files with more dependents than the threshold. Reporting only."""
        core = [p for p in paths if graph.dependent_count(p) > self.config.core_file_threshold]
        for path in core:
            logger.info(f"Core file: {path} ({graph.dependent_count(path)} dependents)")
        return core

    def _process_file(self, state: RunState, path: str) -> tuple[int, list[str]]:
        record = state.files[path]
        invocations = 0
        skipped: list[str] = []

        for analyzer_type in analyzers_for(record.language):
            analyzer = self.registry.get(analyzer_type)
            if analyzer is None:
                logger.warning(f"No analyzer registered for {analyzer_type.value}; skipping {path}")
                skipped.append(instance_id(analyzer_type, path))
                continue

            result = invoke_analyzer(
                analyzer,
                record,
                state,
                instance_id=instance_id(analyzer_type, path),
                timeout=self.config.analyzer_timeout_seconds,
                policy=self.policy,
                file_path=path,
            )
            record.analysis_results[analyzer_type] = result.output
            invocations += 1

        return invocations, skipped

    def health_check(self) -> HealthStatus:
        if not len(self.registry):
            return HealthStatus(healthy=False, message="Registry is empty.")
        return HealthStatus(healthy=True)
