"""Tests for the import/require dependency graph."""

from review_insight.models import AnalyzerType
from review_insight.pipeline.dependency_mapper import (
    DependencyMapper,
    build_dependency_graph,
    module_specifiers,
)

FILES = {
    "src/a.js": "import helper from './helper';\nimport { x } from \"lodash\";\n",
    "src/b.js": "const helper = require('./helper');\nconst fs = require('fs');\n",
    "src/c.ts": "import type { Cfg } from './config';\nimport helper from './helper';\n",
    "README.md": "No imports here.\n",
}


class TestModuleSpecifiers:
    def test_es_imports_and_requires(self):
        assert module_specifiers(FILES["src/a.js"]) == {"./helper", "lodash"}
        assert module_specifiers(FILES["src/b.js"]) == {"./helper", "fs"}

    def test_duplicates_suppressed(self):
        content = "const a = require('x');\nconst b = require('x');\n"
        assert module_specifiers(content) == {"x"}

    def test_no_imports(self):
        assert module_specifiers("print('hello')\n") == set()


class TestDependencyGraph:
    def _graph(self, make_state):
        state = make_state("", FILES)
        return build_dependency_graph(state.files)

    def test_dependencies_per_file(self, make_state):
        graph = self._graph(make_state)
        assert graph.dependencies["src/a.js"] == ["./helper", "lodash"]
        assert graph.dependencies["README.md"] == []

    def test_dependents_per_module(self, make_state):
        graph = self._graph(make_state)
        assert graph.dependents["./helper"] == ["src/a.js", "src/b.js", "src/c.ts"]
        assert graph.dependent_count("./helper") == 3
        assert graph.dependent_count("missing") == 0

    def test_modules_outside_change_set_recorded(self, make_state):
        graph = self._graph(make_state)
        assert "lodash" in graph.dependents
        assert "fs" in graph.dependents

    def test_relative_paths_not_resolved(self, make_state):
        graph = self._graph(make_state)
        assert "./config" in graph.dependents
        assert "src/config" not in graph.dependents

    def test_symmetry_invariant(self, make_state):
        graph = self._graph(make_state)
        assert graph.is_symmetric()
        for file_path, modules in graph.dependencies.items():
            for module in modules:
                assert file_path in graph.dependents[module]

    def test_symmetry_on_empty_change_set(self, make_state):
        graph = build_dependency_graph(make_state("", {}).files)
        assert graph.dependencies == {}
        assert graph.is_symmetric()


class TestDependencyMapperStage:
    def test_process_returns_graph_without_mutating_state(self, make_state):
        state = make_state("", FILES)
        mapper = DependencyMapper()
        result = mapper.process(state, state)

        assert mapper.type == AnalyzerType.DEPENDENCY_MAPPER
        assert result.confidence == 1.0
        assert result.output.is_symmetric()
        assert not state.dependency_graph.available
