"""Diff classifier: labels the nature of one file's change."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..models import AnalyzerResult, AnalyzerType, ChangeSummary
from .base import FileAnalyzer

if TYPE_CHECKING:
    from ..pipeline.state import FileRecord

DOCUMENTATION = "Documentation"
FEATURE_OR_REFACTOR = "Feature/Refactor"
DELETION = "Deletion"
GENERAL_FIX = "General Fix"

CONFIDENCE = 0.7

_DECLARATION = re.compile(r"\b(?:function|class|const|let|def|func|interface|type)\b")
_DOC_SUFFIXES = (".md", ".markdown", ".rst", ".txt")


def _changed_lines(fragment: str, marker: str) -> list[str]:
    header = marker * 3 + " "
    return [
        line
        for line in fragment.split("\n")
        if line.startswith(marker) and not line.startswith(header)
    ]


class DiffClassifier(FileAnalyzer):
    type = AnalyzerType.DIFF_CLASSIFIER
    description = "Classifies the nature of each file's change."

    def analyze(self, record: FileRecord) -> AnalyzerResult:
        added = _changed_lines(record.diff_fragment, "+")
        removed = _changed_lines(record.diff_fragment, "-")

        change_type = GENERAL_FIX
        if record.file_path.lower().endswith(_DOC_SUFFIXES):
            change_type = DOCUMENTATION
        elif added and not removed:
            if any(_DECLARATION.search(line) for line in added):
                change_type = FEATURE_OR_REFACTOR
        elif removed and not added:
            change_type = DELETION

        return self._result(
            ChangeSummary(file_path=record.file_path, change_type=change_type),
            CONFIDENCE,
        )
