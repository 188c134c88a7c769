"""Tests for the failure policy, time guard, and fallback report."""

import pytest

from review_insight.exceptions import AnalyzerTimeoutError, CriticalStageError
from review_insight.models import AnalyzerType, DegradedSecurityResult
from review_insight.pipeline.failure import (
    DEGRADED_SECURITY_CONFIDENCE,
    FailurePolicy,
    build_fallback_report,
    invoke_analyzer,
    run_with_timeout,
)


class TestFailurePolicy:
    def test_security_failure_degrades_to_high_risk(self):
        result = FailurePolicy().handle(AnalyzerType.SECURITY_SCANNER, RuntimeError("boom"))

        assert isinstance(result.output, DegradedSecurityResult)
        assert result.output.findings == []
        assert result.output.risk_level == "high"
        assert result.confidence == DEGRADED_SECURITY_CONFIDENCE == 0.1
        assert "boom" in result.metadata.errors[0]

    def test_other_failure_degrades_to_empty_output(self):
        result = FailurePolicy().handle(AnalyzerType.QUALITY_CHECKER, ValueError("bad"))

        assert result.output == []
        assert result.confidence == 0.0
        assert "quality_checker" in result.metadata.errors[0]
        assert not result.metadata.timed_out

    @pytest.mark.parametrize(
        "analyzer_type",
        [
            AnalyzerType.ORCHESTRATOR,
            AnalyzerType.DEPENDENCY_MAPPER,
            AnalyzerType.SYNTHESIZER,
            AnalyzerType.REPORT_BUILDER,
        ],
    )
    def test_critical_stages_are_fatal(self, analyzer_type):
        policy = FailurePolicy()
        assert policy.is_fatal(analyzer_type)
        with pytest.raises(CriticalStageError):
            policy.handle(analyzer_type, RuntimeError("down"))

    def test_timeout_is_marked(self):
        error = AnalyzerTimeoutError("complexity_analyzer", 0.1)
        result = FailurePolicy().handle(AnalyzerType.COMPLEXITY_ANALYZER, error)
        assert result.metadata.timed_out


class TestRunWithTimeout:
    def test_returns_value(self):
        assert run_with_timeout(lambda: 42, 1.0, "quick") == 42

    def test_no_timeout_runs_inline(self):
        assert run_with_timeout(lambda: "inline", None, "inline") == "inline"

    def test_expiry_raises(self):
        import time

        with pytest.raises(AnalyzerTimeoutError):
            run_with_timeout(lambda: time.sleep(0.5), 0.05, "sleepy")

    def test_exceptions_propagate(self):
        def explode():
            raise KeyError("missing")

        with pytest.raises(KeyError):
            run_with_timeout(explode, 1.0, "explode")


class TestInvokeAnalyzer:
    def test_success_marks_completed(self, make_state, stub_analyzer):
        state = make_state("", {"a.js": "x"})
        record = state.files["a.js"]
        analyzer = stub_analyzer(AnalyzerType.QUALITY_CHECKER, confidence=0.95)

        result = invoke_analyzer(analyzer, record, state, "quality_checker:a.js", 1.0, FailurePolicy(), "a.js")

        assert result.confidence == 0.95
        entry = state.analyzer_states["quality_checker:a.js"]
        assert entry.status == "completed"
        assert entry.confidence == 0.95
        assert entry.file_path == "a.js"

    def test_failure_marks_failed_and_degrades(self, make_state, failing_analyzer):
        state = make_state("", {"a.js": "x"})
        analyzer = failing_analyzer(AnalyzerType.SECURITY_SCANNER)

        result = invoke_analyzer(
            analyzer, state.files["a.js"], state, "security_scanner:a.js", 1.0, FailurePolicy(), "a.js"
        )

        entry = state.analyzer_states["security_scanner:a.js"]
        assert entry.status == "failed"
        assert entry.confidence == 0.1
        assert "analyzer exploded" in entry.status_message
        assert isinstance(result.output, DegradedSecurityResult)

    def test_timeout_routes_through_policy(self, make_state, slow_analyzer):
        state = make_state("", {"a.js": "x"})
        analyzer = slow_analyzer(AnalyzerType.COMPLEXITY_ANALYZER, delay=0.5)

        result = invoke_analyzer(
            analyzer, state.files["a.js"], state, "complexity_analyzer:a.js", 0.05, FailurePolicy(), "a.js"
        )

        assert result.output == []
        assert result.metadata.timed_out
        assert state.analyzer_states["complexity_analyzer:a.js"].metadata.timed_out

    def test_fatal_failure_propagates(self, make_state, failing_analyzer):
        state = make_state("", {})
        analyzer = failing_analyzer(AnalyzerType.DEPENDENCY_MAPPER)

        with pytest.raises(CriticalStageError):
            invoke_analyzer(analyzer, state, state, "dependency_mapper", 1.0, FailurePolicy())
        assert state.analyzer_states["dependency_mapper"].status == "failed"


class TestFallbackReport:
    def test_shape(self, make_state):
        state = make_state("", {"a.js": "x", "b.js": "y"})
        report = build_fallback_report(state, RuntimeError("kaput"))

        assert report.overall_score == 0
        assert report.risk_level == "high"
        assert report.findings.security == []
        assert report.findings.quality == []
        assert report.findings.complexity == []
        assert report.findings.language == []
        assert report.line_comments == []
        assert len(report.recommendations.critical) == 1
        assert "manually" in report.recommendations.critical[0]
        assert report.recommendations.high == []
        assert report.metadata.total_files_analyzed == 2
        assert report.metadata.average_confidence == 0.0
        assert report.metadata.uncertain_areas
        assert "kaput" in report.summary
