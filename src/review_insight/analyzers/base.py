"""Analyzer contract shared by every variant."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Protocol

from ..exceptions import AnalyzerError, MalformedInputError, ReviewInsightError
from ..models import AnalyzerResult, AnalyzerType, HealthStatus, ProcessingMetadata

if TYPE_CHECKING:
    from ..pipeline.state import FileRecord, RunState

FILE_SCOPE = "file"
GLOBAL_SCOPE = "global"


class Analyzer(Protocol):
    """Any unit the pipeline can invoke.

    ``process`` must be idempotent and must not mutate ``state``; everything it
    contributes travels in the returned AnalyzerResult.
    """

    type: AnalyzerType
    scope: str  # "file" | "global"
    description: str

    def process(self, target: Any, state: RunState) -> AnalyzerResult: ...

    def health_check(self) -> HealthStatus: ...


class FileAnalyzer(ABC):
    """Base class for file-scoped analyzers.

    Subclasses implement :meth:`analyze`; timing and input validation
    happen here.
    """

    type: AnalyzerType
    scope = FILE_SCOPE
    description = ""

    def process(self, record: FileRecord, state: RunState) -> AnalyzerResult:
        self._validate(record)
        start = time.perf_counter()
        try:
            result = self.analyze(record)
        except ReviewInsightError:
            raise
        except Exception as e:
            raise AnalyzerError(self.type.value, str(e), record.file_path) from e
        result.metadata.processing_time = time.perf_counter() - start
        return result

    @abstractmethod
    def analyze(self, record: FileRecord) -> AnalyzerResult:
        """Inspect one file and return findings with a confidence score."""

    def health_check(self) -> HealthStatus:
        return HealthStatus(healthy=True)

    def _validate(self, record: FileRecord) -> None:
        if record.validation_error:
            raise MalformedInputError(record.file_path, record.validation_error)
        if not isinstance(record.content, str):
            raise MalformedInputError(record.file_path, "file content is not text")
        if not isinstance(record.diff_fragment, str):
            raise MalformedInputError(record.file_path, "diff fragment is not text")

    def _result(self, output: Any, confidence: float, **metadata: Any) -> AnalyzerResult:
        return AnalyzerResult(
            output=output,
            confidence=round(confidence, 2),
            metadata=ProcessingMetadata(**metadata),
        )
