"""Shared test fixtures for Review Insight tests."""

import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

import pytest

from review_insight.analyzers.registry import AnalyzerRegistry
from review_insight.changeset import build_run_state, make_file_record
from review_insight.config import ReviewConfig
from review_insight.models import AnalyzerResult, AnalyzerType, HealthStatus


# a.js gains lines 5-7; line 6 is the eval call.
EVAL_DIFF = """\
diff --git a/src/a.js b/src/a.js
index 1111111..2222222 100644
--- a/src/a.js
+++ b/src/a.js
@@ -3,3 +3,6 @@ import helper from './helper';
 function load(x) {
   const base = helper(1);
+  const y = x;
+  eval(x);
+  return y + base;
 }
"""

EVAL_SOURCE = """\
import helper from './helper';

function load(x) {
  const base = helper(1);
  const y = x;
  eval(x);
  return y + base;
}
"""

# b.js only loses a line; its head content still has an eval on line 1.
DELETION_DIFF = """\
diff --git a/src/b.js b/src/b.js
index 3333333..4444444 100644
--- a/src/b.js
+++ b/src/b.js
@@ -1,3 +1,2 @@
 const keep = eval(input);
-const legacy = eval(old);
 module.exports = keep;
"""

DELETION_SOURCE = """\
const keep = eval(input);
module.exports = keep;
"""


class StubAnalyzer:
    """File-scoped analyzer returning a fixed output."""

    scope = "file"
    description = "stub"

    def __init__(self, analyzer_type, output=None, confidence=1.0):
        self.type = analyzer_type
        self.output = output if output is not None else []
        self.confidence = confidence
        self.calls = []

    def process(self, target, state):
        self.calls.append(target.file_path)
        output = self.output(target) if callable(self.output) else self.output
        return AnalyzerResult(output=output, confidence=self.confidence)

    def health_check(self):
        return HealthStatus(healthy=True)


class FailingAnalyzer(StubAnalyzer):
    def __init__(self, analyzer_type, error=None):
        super().__init__(analyzer_type)
        self.error = error or RuntimeError("analyzer exploded")

    def process(self, target, state):
        raise self.error


class SlowAnalyzer(StubAnalyzer):
    def __init__(self, analyzer_type, delay=0.5):
        super().__init__(analyzer_type)
        self.delay = delay

    def process(self, target, state):
        time.sleep(self.delay)
        return super().process(target, state)


@pytest.fixture
def stub_analyzer():
    return StubAnalyzer


@pytest.fixture
def failing_analyzer():
    return FailingAnalyzer


@pytest.fixture
def slow_analyzer():
    return SlowAnalyzer


@pytest.fixture
def make_record():
    return make_file_record


@pytest.fixture
def make_state():
    """Build a RunState from a diff and ``{path: content}``."""

    def _make(diff_text="", files=None, **kwargs):
        return build_run_state(diff_text, files or {}, **kwargs)

    return _make


@pytest.fixture
def eval_diff():
    return EVAL_DIFF


@pytest.fixture
def eval_source():
    return EVAL_SOURCE


@pytest.fixture
def deletion_diff():
    return DELETION_DIFF


@pytest.fixture
def deletion_source():
    return DELETION_SOURCE


@pytest.fixture
def empty_registry():
    return AnalyzerRegistry()


@pytest.fixture
def fast_config():
    return ReviewConfig(analyzer_timeout_seconds=5.0)
