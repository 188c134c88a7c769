"""Diff relevance filter, severity ordering, and finding deduplication."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Optional

from ..models import severity_rank

# On equal severity a security finding outranks a quality issue, which
# outranks a language note.
_KIND_RANK = {"security": 3, "quality": 2, "language": 1}


def finding_lines(finding: Any) -> tuple[int, ...]:
    """All line anchors of a finding; empty for a file-level finding."""
    lines = getattr(finding, "lines", None)
    if lines is not None:
        return tuple(lines)
    line = getattr(finding, "line", None)
    return () if line is None else (line,)


def dedup_anchor(finding: Any) -> Optional[int]:
    """The line a finding is deduplicated on (its first anchor), or None."""
    lines = finding_lines(finding)
    return lines[0] if lines else None


def filter_by_diff(findings: Iterable[Any], added_lines: Mapping[str, set[int]]) -> list[Any]:
    """Keep findings that touch lines this diff adds.

    A finding survives only if its file is in ``added_lines`` and it is
    either file-level or anchored to at least one added line.
    """
    kept = []
    for finding in findings:
        added = added_lines.get(finding.file_path)
        if added is None:
            continue
        lines = finding_lines(finding)
        if not lines or any(line in added for line in lines):
            kept.append(finding)
    return kept


def precedence(finding: Any) -> tuple:
    """Total order used to pick the survivor of a (file, line) collision."""
    return (
        severity_rank(getattr(finding, "severity", None)),
        _KIND_RANK.get(getattr(finding, "kind", ""), 0),
        getattr(finding, "confidence", 0.0),
        getattr(finding, "message", ""),
        getattr(finding, "rule", ""),
        repr(finding),
    )


def deduplicate_findings(findings: list[Any]) -> list[Any]:
    """Collapse findings that share ``(file_path, line)``.

    The highest-precedence finding of each key survives, independent of
    input order. Findings without a line are never deduplicated. Survivors
    keep their relative input order.
    """
    winners: dict[tuple[str, int], Any] = {}
    for finding in findings:
        anchor = dedup_anchor(finding)
        if anchor is None:
            continue
        key = (finding.file_path, anchor)
        current = winners.get(key)
        if current is None or precedence(finding) > precedence(current):
            winners[key] = finding

    result = []
    emitted: set[tuple[str, int]] = set()
    for finding in findings:
        anchor = dedup_anchor(finding)
        if anchor is None:
            result.append(finding)
            continue
        key = (finding.file_path, anchor)
        if key in emitted or precedence(finding) != precedence(winners[key]):
            continue
        emitted.add(key)
        result.append(finding)
    return result


def sort_by_severity(findings: Iterable[Any]) -> list[Any]:
    """Most severe first; equal severities keep their original order."""
    return sorted(findings, key=lambda f: severity_rank(getattr(f, "severity", None)), reverse=True)
