"""Tests for the diff relevance filter, deduplication, and severity ordering."""

import itertools

from review_insight.models import PatternFinding, QualityIssue, SecurityFinding
from review_insight.pipeline.ranking import (
    dedup_anchor,
    deduplicate_findings,
    filter_by_diff,
    sort_by_severity,
)


def _sec(path, lines, severity="high", message="eval", rule="eval_usage", confidence=0.9):
    return SecurityFinding(
        severity=severity,
        rule=rule,
        message=message,
        file_path=path,
        lines=tuple(lines),
        recommendation="avoid",
        confidence=confidence,
    )


def _qual(path, line, severity="low", message="style", rule="todo_comment"):
    return QualityIssue(
        severity=severity,
        category="style",
        message=message,
        file_path=path,
        suggestion="fix",
        line=line,
        rule=rule,
    )


class TestDiffRelevanceFilter:
    ADDED = {"a.js": {5, 6, 7}, "b.js": set()}

    def test_keeps_finding_on_added_line(self):
        finding = _sec("a.js", [6])
        assert filter_by_diff([finding], self.ADDED) == [finding]

    def test_drops_finding_on_unchanged_line(self):
        assert filter_by_diff([_sec("a.js", [2])], self.ADDED) == []

    def test_any_line_in_added_set_is_enough(self):
        finding = _sec("a.js", [1, 2, 7])
        assert filter_by_diff([finding], self.ADDED) == [finding]

    def test_never_admits_line_finding_for_file_absent_from_diff(self):
        for line in range(1, 20):
            assert filter_by_diff([_qual("elsewhere.js", line)], self.ADDED) == []

    def test_file_level_findings_always_kept_for_files_in_diff(self):
        a = _sec("a.js", [])
        b = _qual("b.js", None)
        assert filter_by_diff([a, b], self.ADDED) == [a, b]

    def test_file_level_finding_dropped_for_file_absent_from_diff(self):
        assert filter_by_diff([_qual("c.js", None)], self.ADDED) == []

    def test_pure_deletion_drops_every_line_finding(self):
        findings = [_sec("b.js", [1]), _qual("b.js", 2)]
        assert filter_by_diff(findings, self.ADDED) == []


class TestDeduplication:
    def test_higher_severity_wins_collision(self):
        security = _sec("a.js", [6], severity="high")
        quality = _qual("a.js", 6, severity="low")
        assert deduplicate_findings([quality, security]) == [security]

    def test_cross_category_collision_collapses(self):
        security = _sec("a.js", [6], severity="low")
        quality = _qual("a.js", 6, severity="low")
        # Same severity: security outranks quality
        assert deduplicate_findings([quality, security]) == [security]

    def test_unknown_severity_ranks_lowest(self):
        unknown = _qual("a.js", 3, severity="weird")
        low = _qual("a.js", 3, severity="low", message="other")
        assert deduplicate_findings([unknown, low]) == [low]

    def test_findings_without_line_never_deduplicated(self):
        first = _sec("a.js", [])
        second = _sec("a.js", [], message="another")
        third = _qual("a.js", None)
        assert deduplicate_findings([first, second, third]) == [first, second, third]

    def test_different_lines_do_not_collide(self):
        findings = [_sec("a.js", [5]), _sec("a.js", [6]), _sec("b.js", [5])]
        assert deduplicate_findings(findings) == findings

    def test_multi_line_finding_keyed_on_first_line(self):
        wide = _sec("a.js", [4, 5, 6], severity="medium")
        assert dedup_anchor(wide) == 4
        narrow = _qual("a.js", 6)
        assert deduplicate_findings([wide, narrow]) == [wide, narrow]

    def test_idempotent(self):
        findings = [
            _sec("a.js", [6], severity="high"),
            _qual("a.js", 6, severity="medium"),
            _qual("a.js", 7),
            _qual("a.js", None),
            _sec("b.js", [1], severity="critical"),
            PatternFinding(message="any", file_path="a.js", line=7),
        ]
        once = deduplicate_findings(findings)
        assert deduplicate_findings(once) == once

    def test_order_independent(self):
        findings = [
            _sec("a.js", [6], severity="high"),
            _sec("a.js", [6], severity="high", message="different", rule="other"),
            _qual("a.js", 6, severity="high"),
            _qual("a.js", 7, severity="medium"),
            PatternFinding(message="any", file_path="a.js", line=7, severity="medium"),
            _qual("a.js", None),
        ]
        expected = set(deduplicate_findings(findings))
        for permutation in itertools.permutations(findings):
            assert set(deduplicate_findings(list(permutation))) == expected

    def test_survivors_keep_input_order(self):
        a = _qual("a.js", 1)
        b = _sec("a.js", [2])
        c = _qual("a.js", 3)
        assert deduplicate_findings([c, a, b]) == [c, a, b]


class TestSortBySeverity:
    def test_descending_and_stable(self):
        first_medium = _sec("a.js", [1], severity="medium", message="1")
        high = _sec("a.js", [2], severity="high")
        second_medium = _sec("a.js", [3], severity="medium", message="2")
        critical = _sec("a.js", [4], severity="critical")
        result = sort_by_severity([first_medium, high, second_medium, critical])
        assert result == [critical, high, first_medium, second_medium]
