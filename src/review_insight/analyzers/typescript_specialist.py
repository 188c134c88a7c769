"""TypeScript/JavaScript specialist: explicit ``any`` and unused exports."""

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

_ANY_TYPE = re.compile(r"(?::|\bas|<|\|)\s*any\b(?!\w)|\bany\s*\[\]")
_EXPORTED_FUNCTION = re.compile(r"^\s*export\s+(?:default\s+)?(?:async\s+)?function\s*\*?\s*(\w+)")
_CALL = re.compile(r"\b(\w+)\s*\(")
_IMPORT_FROM = re.compile(r"""\bfrom\s+['"]([^'"]+)['"]""")
_LINE_COMMENT = re.compile(r"//.*$")


class TypeScriptSpecialist(FileAnalyzer):
    type = AnalyzerType.TYPESCRIPT_SPECIALIST
    description = "In-depth checks for TypeScript and JavaScript code."

    def analyze(self, record: FileRecord) -> AnalyzerResult:
        anti_patterns: list[PatternFinding] = []
        exported: list[tuple[str, int]] = []
        called: set[str] = set()
        imports: list[str] = []

        for index, raw_line in enumerate(record.content.split("\n"), start=1):
            line = _LINE_COMMENT.sub("", raw_line)

            if _ANY_TYPE.search(line):
                anti_patterns.append(
                    PatternFinding(
                        message="Explicit use of `any` type detected.",
                        file_path=record.file_path,
                        line=index,
                        suggestion="Use a precise type or `unknown`.",
                    )
                )

            declared = _EXPORTED_FUNCTION.match(line)
            if declared:
                exported.append((declared.group(1), index))
                # the declaration itself is not a call
                line = line[declared.end():]

            called.update(m.group(1) for m in _CALL.finditer(line))
            imports.extend(_IMPORT_FROM.findall(line))

        for name, line_number in exported:
            if name not in called:
                anti_patterns.append(
                    PatternFinding(
                        message=f"Unused exported function: '{name}'",
                        file_path=record.file_path,
                        line=line_number,
                        suggestion="Remove it or confirm it is used by other modules.",
                    )
                )

        insight = LanguageInsight(
            language=record.language,
            file_path=record.file_path,
            patterns=LanguagePatterns(anti_patterns=anti_patterns),
            dependencies=LanguageDependencies(direct=sorted(set(imports))),
        )
        return self._result(insight, 0.85 if anti_patterns else 0.9)
