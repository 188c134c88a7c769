"""Go specialist: discarded errors, panics, and deferred cleanup."""

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

_DISCARDED_ERROR = re.compile(r"(?:^|,)\s*_\s*(?::=|=)\s*[\w.]+\s*\(|,\s*_\s*:?=\s*[\w.]+\s*\(")
_PANIC = re.compile(r"\bpanic\s*\(")
_DEFER_CLOSE = re.compile(r"\bdefer\s+[\w.]+\.(?:Close|Unlock|Done)\s*\(")
_IMPORT_LINE = re.compile(r'^\s*(?:import\s+)?(?:\w+\s+)?"([^"]+)"\s*$')


class GoSpecialist(FileAnalyzer):
    type = AnalyzerType.GO_SPECIALIST
    description = "In-depth checks for Go code."

    def analyze(self, record: FileRecord) -> AnalyzerResult:
        idioms: list[PatternFinding] = []
        anti_patterns: list[PatternFinding] = []
        imports: list[str] = []
        in_import_block = False

        for index, line in enumerate(record.content.split("\n"), start=1):
            stripped = line.strip()
            if stripped.startswith("import ("):
                in_import_block = True
                continue
            if in_import_block and stripped == ")":
                in_import_block = False
                continue
            if in_import_block or stripped.startswith("import "):
                imported = _IMPORT_LINE.match(stripped)
                if imported:
                    imports.append(imported.group(1))
                continue

            if _DISCARDED_ERROR.search(stripped):
                anti_patterns.append(
                    PatternFinding(
                        message="Return value discarded with '_'; errors may be ignored.",
                        file_path=record.file_path,
                        line=index,
                        severity="medium",
                        suggestion="Check the error or document why it is safe to ignore.",
                    )
                )
            if _PANIC.search(stripped):
                anti_patterns.append(
                    PatternFinding(
                        message="panic() in library code.",
                        file_path=record.file_path,
                        line=index,
                        severity="medium",
                        suggestion="Return an error instead of panicking.",
                    )
                )
            if _DEFER_CLOSE.search(stripped):
                idioms.append(
                    PatternFinding(
                        message="Deferred cleanup.",
                        file_path=record.file_path,
                        line=index,
                    )
                )

        insight = LanguageInsight(
            language="go",
            file_path=record.file_path,
            patterns=LanguagePatterns(idioms=idioms, anti_patterns=anti_patterns),
            dependencies=LanguageDependencies(direct=imports),
        )
        return self._result(insight, 0.8)
