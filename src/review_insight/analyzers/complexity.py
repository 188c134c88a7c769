"""Complexity analyzer: deterministic file-level metrics.

Metrics:
    lines_of_code          non-blank, non-comment lines
    cyclomatic_complexity  decision keywords/operators + 1
    cognitive_complexity   nesting-weighted decision count (simplified)
    maintainability_index  171 - 5.2 ln(LOC) - 0.23 CC - 16.2 ln(LOC), scaled to 0-100
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

from ..languages import get_language_config
from ..models import AnalyzerResult, AnalyzerType, ComplexityMetric, TechnicalDebt
from .base import FileAnalyzer

if TYPE_CHECKING:
    from ..pipeline.state import FileRecord

_DEFAULT_COMMENT_PREFIXES = ("//", "/*", "*", "#")

_DECISION_KEYWORDS = re.compile(r"\b(?:if|else|while|for|foreach|switch|case|catch)\b")
_DECISION_OPERATORS = re.compile(r"&&|\|\||\?")
_NESTING_KEYWORDS = re.compile(r"\b(?:if|while|for|foreach|catch)\b")
_JUMP_KEYWORDS = re.compile(r"\b(?:break|continue|return)\b")
_BLOCK_END = ("}", "end")

CONFIDENCE = 0.99


class ComplexityAnalyzer(FileAnalyzer):
    type = AnalyzerType.COMPLEXITY_ANALYZER
    description = "Measures code complexity and maintainability."

    def analyze(self, record: FileRecord) -> AnalyzerResult:
        content = record.content
        loc = lines_of_code(content, _comment_prefixes(record.language))
        cyclomatic = cyclomatic_complexity(content)
        cognitive = cognitive_complexity(content)
        maintainability = maintainability_index(loc, cyclomatic)

        metric = ComplexityMetric(
            file_path=record.file_path,
            cyclomatic_complexity=cyclomatic,
            cognitive_complexity=cognitive,
            lines_of_code=loc,
            maintainability_index=maintainability,
            technical_debt=estimate_technical_debt(cyclomatic, cognitive, maintainability),
        )
        return self._result(
            metric,
            CONFIDENCE,
            rules_applied=["cyclomatic_complexity", "cognitive_complexity", "maintainability_index"],
        )


def _comment_prefixes(language: str) -> tuple[str, ...]:
    config = get_language_config(language)
    if config is None:
        return _DEFAULT_COMMENT_PREFIXES
    return config.comment_prefixes


def lines_of_code(content: str, comment_prefixes: tuple[str, ...] = _DEFAULT_COMMENT_PREFIXES) -> int:
    loc = 0
    for line in content.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        if comment_prefixes and stripped.startswith(comment_prefixes):
            continue
        loc += 1
    return loc


def cyclomatic_complexity(content: str) -> int:
    decisions = len(_DECISION_KEYWORDS.findall(content)) + len(_DECISION_OPERATORS.findall(content))
    return decisions + 1


def cognitive_complexity(content: str) -> int:
    """Nesting-weighted complexity.

    Each nesting keyword opens a level and costs the new depth; logical
    operators cost 1 + depth; jumps cost 1. A line that is just ``}`` or
    ``end`` closes a level.
    """
    complexity = 0
    nesting = 0

    for line in content.split("\n"):
        stripped = line.strip()

        if _NESTING_KEYWORDS.search(stripped):
            nesting += 1
            complexity += nesting

        if stripped in _BLOCK_END and nesting > 0:
            nesting -= 1

        if _DECISION_OPERATORS.search(stripped):
            complexity += 1 + nesting

        if _JUMP_KEYWORDS.search(stripped):
            complexity += 1

    return complexity


def maintainability_index(loc: int, cyclomatic: int) -> int:
    if loc == 0:
        return 100
    raw = max(0.0, 171 - 5.2 * math.log(loc) - 0.23 * cyclomatic - 16.2 * math.log(loc))
    return round(raw / 171 * 100)


def estimate_technical_debt(cyclomatic: int, cognitive: int, maintainability: int) -> TechnicalDebt:
    issues: list[str] = []
    minutes = 0.0

    if cyclomatic > 20:
        minutes += (cyclomatic - 20) * 2
        issues.append(f"Cyclomatic complexity is very high ({cyclomatic}); refactor.")
    elif cyclomatic > 10:
        minutes += cyclomatic - 10
        issues.append(f"Cyclomatic complexity is elevated ({cyclomatic}); consider simplifying.")

    if cognitive > 15:
        minutes += (cognitive - 15) * 3
        issues.append(f"Cognitive complexity is very high ({cognitive}); the code is hard to follow.")
    elif cognitive > 10:
        minutes += (cognitive - 10) * 1.5
        issues.append(f"Cognitive complexity is elevated ({cognitive}); readability could improve.")

    if maintainability < 20:
        minutes += 60
        issues.append(f"Maintainability index is very low ({maintainability}); major rework needed.")
    elif maintainability < 50:
        minutes += 30
        issues.append(f"Maintainability index is low ({maintainability}); refactoring advised.")

    return TechnicalDebt(estimated_minutes=round(minutes), issues=issues)
