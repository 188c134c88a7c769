"""RunState: the blackboard shared by every stage of one review run.

Ownership rules:
    - RunContext is frozen at construction.
    - FileRecord.analysis_results is written only by the Orchestrator; each
      file's dict is disjoint, so files may be processed concurrently.
    - dependency_graph and final_result are write-once Slots.
    - intermediate_results only grows through merge_intermediate().
    - One RunState per run; never share an instance between runs.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar

from ..models import AnalyzerType, FinalReport, ProcessingMetadata

T = TypeVar("T")


@dataclass
class Slot(Generic[T]):
    """A typed, write-once blackboard slot with provenance.

    Usage:
        if state.dependency_graph.available:
            graph = state.dependency_graph.value
        graph = state.dependency_graph.get(default=DependencyGraph())
    """

    _value: T | None = None
    _produced_by: str = ""

    @property
    def available(self) -> bool:
        return self._value is not None

    @property
    def value(self) -> T:
        """Get the value. Raises LookupError if not populated."""
        if self._value is None:
            raise LookupError("Slot not populated. Check .available before accessing .value")
        return self._value

    def get(self, default: T | None = None) -> T | None:
        return self._value if self._value is not None else default

    def set(self, value: T, produced_by: str) -> None:
        if self._value is not None:
            raise RuntimeError(
                f"Slot already populated by {self._produced_by}; "
                f"{produced_by} cannot overwrite it"
            )
        self._value = value
        self._produced_by = produced_by

    @property
    def produced_by(self) -> str:
        return self._produced_by


@dataclass(frozen=True)
class RunContext:
    """Immutable identity of one review run."""

    owner: str
    repo: str
    change_number: int
    commit_sha: str
    diff_text: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def label(self) -> str:
        return f"{self.owner}/{self.repo}#{self.change_number}@{self.commit_sha[:8]}"


@dataclass
class FileRecord:
    """One changed file and the raw outputs of the analyzers that ran on it."""

    file_path: str
    content: str
    diff_fragment: str
    file_type: str
    language: str
    analysis_results: dict[AnalyzerType, Any] = field(default_factory=dict)
    # Set by the change-set loader when the record could not be built cleanly.
    validation_error: Optional[str] = None


@dataclass
class DependencyGraph:
    """``dependencies[file] -> modules`` and ``dependents[module] -> files``."""

    dependencies: dict[str, list[str]] = field(default_factory=dict)
    dependents: dict[str, list[str]] = field(default_factory=dict)

    def dependent_count(self, module: str) -> int:
        return len(self.dependents.get(module, ()))

    def is_symmetric(self) -> bool:
        """Every dependency edge has its reverse entry."""
        for file_path, modules in self.dependencies.items():
            for module in modules:
                if file_path not in self.dependents.get(module, ()):
                    return False
        for module, files in self.dependents.items():
            for file_path in files:
                if module not in self.dependencies.get(file_path, ()):
                    return False
        return True


@dataclass
class AnalyzerState:
    """Execution record of one analyzer invocation: idle -> working -> completed | failed."""

    instance_id: str
    analyzer_type: AnalyzerType
    status: str = "idle"
    confidence: float = 0.0
    metadata: ProcessingMetadata = field(default_factory=ProcessingMetadata)
    file_path: Optional[str] = None
    status_message: str = ""


@dataclass
class RunState:
    context: RunContext
    files: dict[str, FileRecord] = field(default_factory=dict)
    dependency_graph: Slot[DependencyGraph] = field(default_factory=Slot)
    analyzer_states: dict[str, AnalyzerState] = field(default_factory=dict)
    intermediate_results: dict[str, Any] = field(default_factory=dict)
    final_result: Slot[FinalReport] = field(default_factory=Slot)
    # File paths whose dependents count crossed the core-file threshold.
    core_files: list[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def add_file(self, record: FileRecord) -> None:
        self.files[record.file_path] = record

    def file_paths(self) -> list[str]:
        """Stable iteration order for dispatch."""
        return sorted(self.files)

    def record_analyzer_state(self, analyzer_state: AnalyzerState) -> None:
        with self._lock:
            self.analyzer_states[analyzer_state.instance_id] = analyzer_state

    def merge_intermediate(self, delta: dict[str, Any]) -> None:
        """Additive merge: keys in ``delta`` replace, unrelated keys survive."""
        with self._lock:
            self.intermediate_results.update(delta)
