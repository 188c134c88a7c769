"""AnalyzerRegistry: symbolic type to analyzer instance.

Built once per run (or per process) and injected into the Orchestrator;
there is no module-level registry state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..logging_config import get_logger
from ..models import AnalyzerType, HealthStatus
from .base import Analyzer

if TYPE_CHECKING:
    from ..config import ReviewConfig

logger = get_logger(__name__)


class AnalyzerRegistry:
    def __init__(self) -> None:
        self._analyzers: dict[AnalyzerType, Analyzer] = {}

    def register(self, analyzer: Analyzer) -> None:
        """Register ``analyzer`` under its type. The last registration wins."""
        if analyzer.type in self._analyzers:
            logger.warning(
                f"Analyzer {analyzer.type.value} already registered; "
                f"replacing {type(self._analyzers[analyzer.type]).__name__} "
                f"with {type(analyzer).__name__}"
            )
        self._analyzers[analyzer.type] = analyzer

    def get(self, analyzer_type: AnalyzerType) -> Optional[Analyzer]:
        return self._analyzers.get(analyzer_type)

    def list(self) -> list[AnalyzerType]:
        return list(self._analyzers)

    def health_check(self, analyzer_type: AnalyzerType) -> HealthStatus:
        analyzer = self._analyzers.get(analyzer_type)
        if analyzer is None:
            return HealthStatus(healthy=False, message="not registered")
        try:
            return analyzer.health_check()
        except Exception as e:
            return HealthStatus(healthy=False, message=f"health check raised: {e}")

    def __contains__(self, analyzer_type: object) -> bool:
        return analyzer_type in self._analyzers

    def __len__(self) -> int:
        return len(self._analyzers)


def default_registry(config: ReviewConfig | None = None) -> AnalyzerRegistry:
    """Registry with every built-in file-scoped analyzer.

    Rule tables come from ``config`` when it names replacement files,
    otherwise from the bundled defaults.
    """
    from ..config import DEFAULT_CONFIG
    from ..rules import load_quality_rules, load_security_rules
    from .complexity import ComplexityAnalyzer
    from .diff_classifier import DiffClassifier
    from .go_specialist import GoSpecialist
    from .java_specialist import JavaSpecialist
    from .python_specialist import PythonSpecialist
    from .quality import QualityChecker
    from .security import SecurityScanner
    from .typescript_specialist import TypeScriptSpecialist

    config = config or DEFAULT_CONFIG
    registry = AnalyzerRegistry()
    for analyzer in (
        SecurityScanner(load_security_rules(config.security_rules_file)),
        QualityChecker(load_quality_rules(config.quality_rules_file)),
        ComplexityAnalyzer(),
        DiffClassifier(),
        TypeScriptSpecialist(),
        PythonSpecialist(),
        JavaSpecialist(),
        GoSpecialist(),
    ):
        registry.register(analyzer)
    return registry
