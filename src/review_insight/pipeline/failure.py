"""Failure Policy: bounded-time invocation and degradation by analyzer class.

Every analyzer invocation moves through ``idle -> working -> completed |
failed``. There is no retry. When an invocation fails (or its time guard
expires) the policy either substitutes a stand-in result or, for
critical-path stages, raises :class:`CriticalStageError`.
"""

from __future__ import annotations

import concurrent.futures
import time
from datetime import datetime, timezone
from typing import Any, Callable, Optional, TypeVar

from ..exceptions import AnalyzerTimeoutError, CriticalStageError
from ..logging_config import get_logger
from ..models import (
    AnalyzerResult,
    AnalyzerType,
    DegradedSecurityResult,
    FinalReport,
    ProcessingMetadata,
    Recommendations,
    ReportFindings,
    ReportMetadata,
)
from .state import AnalyzerState, RunState

logger = get_logger(__name__)

T = TypeVar("T")

CRITICAL_STAGES = frozenset(
    {
        AnalyzerType.ORCHESTRATOR,
        AnalyzerType.DEPENDENCY_MAPPER,
        AnalyzerType.SYNTHESIZER,
        AnalyzerType.REPORT_BUILDER,
    }
)

DEGRADED_SECURITY_CONFIDENCE = 0.1

MANUAL_REVIEW_RECOMMENDATION = (
    "The automated review could not be completed. "
    "Please review the change manually and check the logs."
)
WHOLLY_UNCERTAIN = "The entire review is uncertain because the automated analysis did not complete."


class FailurePolicy:
    """Maps ``(analyzer type, error)`` to a stand-in result or a fatal error."""

    def __init__(self, critical_stages: frozenset[AnalyzerType] = CRITICAL_STAGES):
        self.critical_stages = critical_stages

    def is_fatal(self, analyzer_type: AnalyzerType) -> bool:
        return analyzer_type in self.critical_stages

    def handle(
        self,
        analyzer_type: AnalyzerType,
        error: BaseException,
        elapsed: float = 0.0,
    ) -> AnalyzerResult:
        """Stand-in result for a failed invocation.

        Raises:
            CriticalStageError: ``analyzer_type`` is on the critical path.
        """
        if self.is_fatal(analyzer_type):
            raise CriticalStageError(analyzer_type.value, str(error)) from error

        timed_out = isinstance(error, AnalyzerTimeoutError)

        if analyzer_type == AnalyzerType.SECURITY_SCANNER:
            # A security blind spot must never read as a clean scan.
            return AnalyzerResult(
                output=DegradedSecurityResult(),
                confidence=DEGRADED_SECURITY_CONFIDENCE,
                metadata=ProcessingMetadata(
                    processing_time=elapsed,
                    errors=[f"Security scanner failed: {error}"],
                    timed_out=timed_out,
                ),
            )

        return AnalyzerResult(
            output=[],
            confidence=0.0,
            metadata=ProcessingMetadata(
                processing_time=elapsed,
                errors=[f"Analyzer {analyzer_type.value} failed: {error}"],
                timed_out=timed_out,
            ),
        )


def run_with_timeout(func: Callable[[], T], timeout: Optional[float], name: str) -> T:
    """Run ``func`` with a time limit. Raises AnalyzerTimeoutError if exceeded.

    The worker thread is abandoned on expiry, not killed; its eventual
    result is discarded.
    """
    if timeout is None:
        return func()

    executor = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
    future = executor.submit(func)
    try:
        return future.result(timeout=timeout)
    except concurrent.futures.TimeoutError:
        raise AnalyzerTimeoutError(name, timeout) from None
    finally:
        executor.shutdown(wait=False)


def invoke_analyzer(
    analyzer: Any,
    target: Any,
    state: RunState,
    instance_id: str,
    timeout: Optional[float],
    policy: FailurePolicy,
    file_path: Optional[str] = None,
) -> AnalyzerResult:
    """Invoke one analyzer under the time guard and the failure policy.

    The analyzer's execution record is registered in ``state`` before the
    call and updated in place when it finishes.
    """
    record = AnalyzerState(
        instance_id=instance_id,
        analyzer_type=analyzer.type,
        status="working",
        file_path=file_path,
    )
    state.record_analyzer_state(record)

    start = time.perf_counter()
    try:
        result = run_with_timeout(
            lambda: analyzer.process(target, state), timeout, analyzer.type.value
        )
    except Exception as e:
        elapsed = time.perf_counter() - start
        record.status = "failed"
        record.status_message = str(e)
        record.metadata = ProcessingMetadata(
            processing_time=elapsed,
            errors=[str(e)],
            timed_out=isinstance(e, AnalyzerTimeoutError),
        )
        if policy.is_fatal(analyzer.type):
            logger.error(f"Critical stage {instance_id} failed: {e}")
        else:
            logger.warning(f"Analyzer {instance_id} failed, using degraded result: {e}")
        result = policy.handle(analyzer.type, e, elapsed)
        record.confidence = result.confidence
        record.metadata = result.metadata
        return result

    record.status = "completed"
    record.confidence = result.confidence
    record.metadata = result.metadata
    logger.debug(f"Analyzer {instance_id} completed (confidence {result.confidence:.2f})")
    return result


def build_fallback_report(state: Optional[RunState], error: BaseException) -> FinalReport:
    """Minimal well-formed report for a run that could not complete."""
    files_analyzed = len(state.files) if state is not None else 0
    elapsed = 0.0
    if state is not None:
        elapsed = (datetime.now(timezone.utc) - state.context.created_at).total_seconds()

    return FinalReport(
        summary=f"Code review failed due to a critical error: {error}",
        overall_score=0,
        risk_level="high",
        findings=ReportFindings(),
        line_comments=[],
        recommendations=Recommendations(critical=[MANUAL_REVIEW_RECOMMENDATION]),
        metadata=ReportMetadata(
            total_files_analyzed=files_analyzed,
            total_analyzers_used=0,
            average_confidence=0.0,
            processing_time=elapsed,
            uncertain_areas=[WHOLLY_UNCERTAIN],
        ),
    )
