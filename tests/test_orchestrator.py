"""Tests for per-file analyzer selection and dispatch."""

import logging

from review_insight.analyzers.registry import AnalyzerRegistry
from review_insight.config import ReviewConfig
from review_insight.models import AnalyzerType
from review_insight.pipeline.dependency_mapper import build_dependency_graph
from review_insight.pipeline.orchestrator import (
    ANALYZERS_BY_LANGUAGE,
    UNIVERSAL_ANALYZERS,
    Orchestrator,
    analyzers_for,
)

ALL_FILE_TYPES = [
    AnalyzerType.QUALITY_CHECKER,
    AnalyzerType.SECURITY_SCANNER,
    AnalyzerType.COMPLEXITY_ANALYZER,
    AnalyzerType.DIFF_CLASSIFIER,
    AnalyzerType.TYPESCRIPT_SPECIALIST,
    AnalyzerType.PYTHON_SPECIALIST,
    AnalyzerType.JAVA_SPECIALIST,
    AnalyzerType.GO_SPECIALIST,
]


def _stub_registry(stub_analyzer, types=ALL_FILE_TYPES):
    registry = AnalyzerRegistry()
    for analyzer_type in types:
        registry.register(stub_analyzer(analyzer_type, output=lambda record, t=analyzer_type: f"{t.value}@{record.file_path}"))
    return registry


class TestAnalyzerSelection:
    def test_every_language_set_has_quality_and_security(self):
        for types in ANALYZERS_BY_LANGUAGE.values():
            assert AnalyzerType.QUALITY_CHECKER in types
            assert AnalyzerType.SECURITY_SCANNER in types

    def test_universal_analyzers_always_added(self):
        for language in ["typescript", "python", "java", "go", "unknown", "markdown"]:
            selected = analyzers_for(language)
            for universal in UNIVERSAL_ANALYZERS:
                assert universal in selected

    def test_unsupported_language_gets_only_universal(self):
        assert analyzers_for("unknown") == UNIVERSAL_ANALYZERS

    def test_javascript_uses_typescript_specialist(self):
        assert AnalyzerType.TYPESCRIPT_SPECIALIST in analyzers_for("javascript")

    def test_python_set(self):
        assert analyzers_for("python") == (
            AnalyzerType.QUALITY_CHECKER,
            AnalyzerType.SECURITY_SCANNER,
            AnalyzerType.PYTHON_SPECIALIST,
            AnalyzerType.COMPLEXITY_ANALYZER,
            AnalyzerType.DIFF_CLASSIFIER,
        )


class TestDispatch:
    def test_outputs_written_per_file(self, make_state, stub_analyzer):
        state = make_state("", {"a.py": "x = 1", "b.go": "package b"})
        orchestrator = Orchestrator(_stub_registry(stub_analyzer))

        result = orchestrator.process(state)

        a = state.files["a.py"].analysis_results
        assert a[AnalyzerType.PYTHON_SPECIALIST] == "python_specialist@a.py"
        assert AnalyzerType.GO_SPECIALIST not in a
        b = state.files["b.go"].analysis_results
        assert b[AnalyzerType.GO_SPECIALIST] == "go_specialist@b.go"
        assert result.output.total_invocations == 10
        assert result.output.files_processed == 2

    def test_invocation_count_and_state_entries(self, make_state, stub_analyzer):
        state = make_state("", {"a.ts": "", "notes.yaml": ""})
        result = Orchestrator(_stub_registry(stub_analyzer)).process(state)

        assert result.output.total_invocations == 5 + 2
        assert "typescript_specialist:a.ts" in state.analyzer_states
        assert "complexity_analyzer:notes.yaml" in state.analyzer_states
        assert len(state.analyzer_states) == 7

    def test_missing_analyzer_is_skipped(self, make_state, stub_analyzer):
        registry = _stub_registry(
            stub_analyzer, [t for t in ALL_FILE_TYPES if t != AnalyzerType.SECURITY_SCANNER]
        )
        state = make_state("", {"a.js": "eval(x)"})

        result = Orchestrator(registry).process(state)

        assert AnalyzerType.SECURITY_SCANNER not in state.files["a.js"].analysis_results
        assert result.output.skipped == ["security_scanner:a.js"]
        assert result.output.total_invocations == 4

    def test_missing_analyzer_is_warned(self, make_state, stub_analyzer, caplog):
        registry = _stub_registry(
            stub_analyzer, [t for t in ALL_FILE_TYPES if t != AnalyzerType.SECURITY_SCANNER]
        )
        state = make_state("", {"a.js": "eval(x)"})

        with caplog.at_level(logging.WARNING, logger="review_insight"):
            Orchestrator(registry).process(state)

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert any("security_scanner" in r.getMessage() and "a.js" in r.getMessage() for r in warnings)

    def test_empty_registry_completes(self, make_state, empty_registry):
        state = make_state("", {"a.js": ""})
        result = Orchestrator(empty_registry).process(state)
        assert result.output.total_invocations == 0
        assert state.files["a.js"].analysis_results == {}

    def test_dispatch_order_is_stable(self, make_state, stub_analyzer):
        registry = _stub_registry(stub_analyzer)
        state = make_state("", {"z.py": "", "a.py": "", "m.py": ""})
        Orchestrator(registry).process(state)
        assert registry.get(AnalyzerType.PYTHON_SPECIALIST).calls == ["a.py", "m.py", "z.py"]

    def test_worker_pool_gives_same_results(self, make_state, stub_analyzer):
        files = {f"f{i}.py": f"x = {i}" for i in range(8)}
        sequential = make_state("", files)
        parallel = make_state("", files)

        Orchestrator(_stub_registry(stub_analyzer)).process(sequential)
        Orchestrator(_stub_registry(stub_analyzer), ReviewConfig(workers=4)).process(parallel)

        for path in files:
            assert sequential.files[path].analysis_results == parallel.files[path].analysis_results
        assert set(sequential.analyzer_states) == set(parallel.analyzer_states)


class TestCoreFiles:
    FILES = {
        "lib": "",
        "a.js": "import x from 'lib';",
        "b.js": "import x from 'lib';",
        "c.js": "const x = require('lib');",
    }

    def _state(self, make_state):
        state = make_state("", self.FILES)
        state.dependency_graph.set(build_dependency_graph(state.files), "test")
        return state

    def test_flagged_above_threshold(self, make_state, stub_analyzer):
        state = self._state(make_state)
        result = Orchestrator(_stub_registry(stub_analyzer), ReviewConfig(core_file_threshold=2)).process(state)
        assert result.output.core_files == ["lib"]

    def test_not_flagged_at_threshold(self, make_state, stub_analyzer):
        state = self._state(make_state)
        result = Orchestrator(_stub_registry(stub_analyzer), ReviewConfig(core_file_threshold=3)).process(state)
        assert result.output.core_files == []

    def test_flag_does_not_change_analysis(self, make_state, stub_analyzer):
        flagged = self._state(make_state)
        unflagged = self._state(make_state)
        Orchestrator(_stub_registry(stub_analyzer), ReviewConfig(core_file_threshold=0)).process(flagged)
        Orchestrator(_stub_registry(stub_analyzer), ReviewConfig(core_file_threshold=100)).process(unflagged)

        for path in self.FILES:
            assert flagged.files[path].analysis_results == unflagged.files[path].analysis_results
