"""Dependency Mapper: import/require scan over the whole change set.

Specifiers are recorded exactly as written. Relative paths are not
resolved, and modules outside the change set are still recorded as
dependents keys.
"""

from __future__ import annotations

import re
from typing import Optional

from ..analyzers.base import GLOBAL_SCOPE
from ..logging_config import get_logger
from ..models import AnalyzerResult, AnalyzerType, HealthStatus
from .state import DependencyGraph, FileRecord, RunState

logger = get_logger(__name__)

IMPORT_PATTERNS = (
    re.compile(r"""import\s+.*\s+from\s+['"](.*?)['"]"""),
    re.compile(r"""require\(['"](.*?)['"]\)"""),
)


def module_specifiers(content: str) -> set[str]:
    """Every module specifier referenced by ``content``."""
    found: set[str] = set()
    for pattern in IMPORT_PATTERNS:
        found.update(match.group(1) for match in pattern.finditer(content))
    return found


def build_dependency_graph(files: dict[str, FileRecord]) -> DependencyGraph:
    """Build both directions of the graph in one pass, in stable file order."""
    graph = DependencyGraph()
    for file_path in sorted(files):
        modules = sorted(module_specifiers(files[file_path].content))
        graph.dependencies[file_path] = modules
        for module in modules:
            graph.dependents.setdefault(module, []).append(file_path)
    return graph


class DependencyMapper:
    """Global-scoped stage; its output is written into ``state.dependency_graph``."""

    type = AnalyzerType.DEPENDENCY_MAPPER
    scope = GLOBAL_SCOPE
    description = "Builds the import graph across all changed files."

    def process(self, target: RunState, state: Optional[RunState] = None) -> AnalyzerResult:
        graph = build_dependency_graph(target.files)
        edges = sum(len(modules) for modules in graph.dependencies.values())
        logger.debug(f"Dependency graph: {len(graph.dependencies)} files, {edges} edges")
        # Exact text matching; there is nothing to be uncertain about.
        return AnalyzerResult(output=graph, confidence=1.0)

    def health_check(self) -> HealthStatus:
        return HealthStatus(healthy=True)
