"""Java specialist: unused local variables by declaration pattern."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

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

# `Type name = ...;` or `Type name;` inside a method body (indented, no modifiers).
_LOCAL_DECLARATION = re.compile(
    r"^\s{4,}(?:final\s+)?(?!return\b|new\b|throw\b)[A-Za-z_][\w.]*(?:<[^;=()]*>)?(?:\[\])*\s+([a-z_]\w*)\s*(?:=|;)"
)
_FIELD_MODIFIERS = re.compile(r"^\s*(?:public|private|protected|static)\b")
_IMPORT = re.compile(r"^\s*import\s+(?:static\s+)?([\w.]+(?:\.\*)?)\s*;")


class JavaSpecialist(FileAnalyzer):
    type = AnalyzerType.JAVA_SPECIALIST
    description = "In-depth checks for Java code."

    def analyze(self, record: FileRecord) -> AnalyzerResult:
        lines = record.content.split("\n")
        imports: list[str] = []
        declarations: list[tuple[str, int]] = []

        for index, line in enumerate(lines, start=1):
            imported = _IMPORT.match(line)
            if imported:
                imports.append(imported.group(1))
                continue
            if _FIELD_MODIFIERS.match(line):
                continue
            declared = _LOCAL_DECLARATION.match(line)
            if declared:
                declarations.append((declared.group(1), index))

        best_practices: list[PatternFinding] = []
        unused: list[str] = []
        for name, line_number in declarations:
            occurrences = len(re.findall(rf"\b{re.escape(name)}\b", record.content))
            if occurrences <= 1:
                unused.append(name)
                best_practices.append(
                    PatternFinding(
                        message=f"Avoid unused local variables such as '{name}'.",
                        file_path=record.file_path,
                        line=line_number,
                        suggestion="Remove the variable or use it.",
                    )
                )

        insight = LanguageInsight(
            language="java",
            file_path=record.file_path,
            patterns=LanguagePatterns(best_practices=best_practices),
            dependencies=LanguageDependencies(direct=imports, unused=unused),
        )
        return self._result(insight, 0.95 if best_practices else 0.98)
