"""Tests for rule table parsing and loading."""

import json

import pytest

from review_insight.exceptions import RuleLoadError
from review_insight.rules import (
    load_quality_rules,
    load_rules,
    load_security_rules,
    parse_rule,
)


def _record(**overrides):
    record = {
        "name": "no_alert",
        "pattern": r"\balert\s*\(",
        "severity": "Medium",
        "message": "alert() left in code.",
    }
    record.update(overrides)
    return record


class TestParseRule:
    def test_minimal_record(self):
        rule = parse_rule(_record())
        assert rule.name == "no_alert"
        assert rule.severity == "medium"
        assert rule.confidence == 0.8
        assert rule.languages == ()
        assert rule.applies_to("go")

    def test_pattern_is_case_insensitive(self):
        rule = parse_rule(_record())
        assert rule.pattern.search("ALERT('x')")

    def test_aliases(self):
        rule = parse_rule(_record(suggestion="Remove it.", cweId="CWE-1", languages=["javascript"]))
        assert rule.recommendation == "Remove it."
        assert rule.cwe_id == "CWE-1"
        assert rule.applies_to("javascript")
        assert not rule.applies_to("python")

    @pytest.mark.parametrize(
        "overrides, fragment",
        [
            ({"severity": "urgent"}, "unknown severity"),
            ({"confidence": 1.5}, "confidence"),
            ({"pattern": "(unclosed"}, "invalid pattern"),
        ],
    )
    def test_bad_values(self, overrides, fragment):
        with pytest.raises(ValueError, match=fragment):
            parse_rule(_record(**overrides))

    def test_missing_keys(self):
        with pytest.raises(ValueError, match="missing pattern, severity"):
            parse_rule({"name": "x", "message": "y"})


class TestLoadRules:
    def test_load_from_file(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps([_record(), _record(name="second")]))
        assert [r.name for r in load_rules(path)] == ["no_alert", "second"]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("[{")
        with pytest.raises(RuleLoadError):
            load_rules(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuleLoadError):
            load_rules(tmp_path / "absent.json")

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"name": "x"}))
        with pytest.raises(RuleLoadError, match="JSON list"):
            load_rules(path)

    def test_bad_record_names_source(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps([_record(severity="nope")]))
        with pytest.raises(RuleLoadError) as excinfo:
            load_rules(path)
        assert excinfo.value.source == path

    def test_config_path_replaces_bundled(self, tmp_path):
        path = tmp_path / "security.json"
        path.write_text(json.dumps([_record()]))
        assert [r.name for r in load_security_rules(str(path))] == ["no_alert"]


class TestBundledRules:
    def test_security_rules(self):
        names = {r.name for r in load_security_rules()}
        assert {"eval_usage", "hardcoded_secret", "sql_string_concatenation"} <= names

    def test_quality_rules(self):
        names = {r.name for r in load_quality_rules()}
        assert {"console_log", "magic_numbers", "todo_comment"} <= names
