"""Tests for change classification."""

from review_insight.analyzers import DiffClassifier
from review_insight.analyzers.diff_classifier import DELETION, DOCUMENTATION, FEATURE_OR_REFACTOR, GENERAL_FIX


def _classify(make_record, path, fragment):
    result = DiffClassifier().process(make_record(path, "", fragment), state=None)
    assert result.confidence == 0.7
    return result.output.change_type


HEADER = "--- a/{0}\n+++ b/{0}\n@@ -1,2 +1,3 @@\n"


class TestDiffClassifier:
    def test_documentation(self, make_record):
        fragment = HEADER.format("README.md") + "+More docs\n"
        assert _classify(make_record, "README.md", fragment) == DOCUMENTATION

    def test_new_declaration_is_feature(self, make_record):
        fragment = HEADER.format("a.js") + "+function added() {}\n"
        assert _classify(make_record, "a.js", fragment) == FEATURE_OR_REFACTOR

    def test_plain_addition_is_fix(self, make_record):
        fragment = HEADER.format("a.js") + "+  total += 1;\n"
        assert _classify(make_record, "a.js", fragment) == GENERAL_FIX

    def test_only_removals_is_deletion(self, make_record):
        fragment = HEADER.format("a.js") + "-function gone() {}\n"
        assert _classify(make_record, "a.js", fragment) == DELETION

    def test_mixed_change_is_fix(self, make_record):
        fragment = HEADER.format("a.py") + "-x = 1\n+def y():\n"
        assert _classify(make_record, "a.py", fragment) == GENERAL_FIX

    def test_headers_are_not_changes(self, make_record):
        assert _classify(make_record, "a.go", HEADER.format("a.go")) == GENERAL_FIX

    def test_output_names_file(self, make_record):
        result = DiffClassifier().process(make_record("x.go", "", ""), state=None)
        assert result.output.file_path == "x.go"
