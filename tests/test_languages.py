"""Tests for language detection."""

import pytest

from review_insight.languages import UNKNOWN_LANGUAGE, detect_file_type, detect_language, get_language_config


class TestDetectLanguage:
    @pytest.mark.parametrize(
        "path, language",
        [
            ("src/a.ts", "typescript"),
            ("src/view.TSX", "typescript"),
            ("lib/index.js", "javascript"),
            ("pkg/mod.py", "python"),
            ("Main.java", "java"),
            ("cmd/main.go", "go"),
            ("README.md", "markdown"),
            ("Gemfile", "ruby"),
        ],
    )
    def test_known(self, path, language):
        assert detect_language(path) == language

    def test_unknown(self):
        assert detect_language("deploy/settings.yaml") == UNKNOWN_LANGUAGE
        assert detect_language("Makefile") == UNKNOWN_LANGUAGE


class TestDetectFileType:
    def test_extension_lowercased(self):
        assert detect_file_type("a/b.TSX") == "tsx"

    def test_no_extension(self):
        assert detect_file_type("Makefile") == ""


def test_language_config_lookup():
    assert get_language_config("python").comment_prefixes == ("#",)
    assert get_language_config("cobol") is None
