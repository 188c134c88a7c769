"""Python specialist: unused imports from the syntax tree."""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

from ..exceptions import MalformedInputError
from ..models import (
    AnalyzerResult,
    AnalyzerType,
    LanguageDependencies,
    LanguageInsight,
    LanguagePatterns,
    PatternFinding,
)
from .base import FileAnalyzer

if TYPE_CHECKING:
    from ..pipeline.state import FileRecord


class _UsageCollector(ast.NodeVisitor):
    def __init__(self) -> None:
        self.imported: list[tuple[str, str, int]] = []  # (bound name, module, line)
        self.used: set[str] = set()
        self.exported: set[str] = set()

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            bound = alias.asname or alias.name.split(".")[0]
            self.imported.append((bound, alias.name, node.lineno))

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        if node.module == "__future__":
            return
        module = "." * node.level + (node.module or "")
        for alias in node.names:
            if alias.name == "*":
                continue
            self.imported.append((alias.asname or alias.name, module, node.lineno))

    def visit_Name(self, node: ast.Name) -> None:
        self.used.add(node.id)

    def visit_Assign(self, node: ast.Assign) -> None:
        for target in node.targets:
            if isinstance(target, ast.Name) and target.id == "__all__":
                if isinstance(node.value, (ast.List, ast.Tuple)):
                    for element in node.value.elts:
                        if isinstance(element, ast.Constant) and isinstance(element.value, str):
                            self.exported.add(element.value)
        self.generic_visit(node)


class PythonSpecialist(FileAnalyzer):
    type = AnalyzerType.PYTHON_SPECIALIST
    description = "In-depth checks for Python code."

    def analyze(self, record: FileRecord) -> AnalyzerResult:
        try:
            tree = ast.parse(record.content, filename=record.file_path)
        except SyntaxError as e:
            raise MalformedInputError(record.file_path, f"syntax error on line {e.lineno}: {e.msg}")

        collector = _UsageCollector()
        collector.visit(tree)

        # String annotations still count as usage
        referenced = collector.used | collector.exported | _names_in_string_annotations(tree)

        best_practices: list[PatternFinding] = []
        unused: list[str] = []
        for bound, module, line in collector.imported:
            if bound in referenced:
                continue
            unused.append(bound)
            best_practices.append(
                PatternFinding(
                    message=f"'{bound}' is imported but unused",
                    file_path=record.file_path,
                    line=line,
                    suggestion=f"Remove the unused import of '{module}'.",
                )
            )

        insight = LanguageInsight(
            language="python",
            file_path=record.file_path,
            patterns=LanguagePatterns(best_practices=best_practices),
            dependencies=LanguageDependencies(
                direct=sorted({module for _, module, _ in collector.imported}),
                unused=unused,
            ),
        )
        return self._result(insight, 0.9 if best_practices else 0.95)


def _names_in_string_annotations(tree: ast.AST) -> set[str]:
    names: set[str] = set()
    for node in ast.walk(tree):
        annotation = getattr(node, "annotation", None) or getattr(node, "returns", None)
        if isinstance(annotation, ast.Constant) and isinstance(annotation.value, str):
            try:
                parsed = ast.parse(annotation.value, mode="eval")
            except SyntaxError:
                continue
            names.update(n.id for n in ast.walk(parsed) if isinstance(n, ast.Name))
    return names
