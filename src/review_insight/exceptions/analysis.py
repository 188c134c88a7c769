"""Analysis-related exceptions: analyzer failures, timeouts, malformed input."""

from typing import Optional

from .base import ReviewInsightError


class AnalysisError(ReviewInsightError):
    """Base class for analysis-related errors."""

    pass


class AnalyzerError(AnalysisError):
    """Raised when a single analyzer fails on its input."""

    def __init__(self, analyzer_type: str, reason: str, file_path: Optional[str] = None):
        details = {"analyzer": analyzer_type, "reason": reason}
        if file_path:
            details["file"] = file_path
        super().__init__(f"Analyzer {analyzer_type} failed", details=details)
        self.analyzer_type = analyzer_type
        self.reason = reason
        self.file_path = file_path


class AnalyzerTimeoutError(AnalysisError):
    """Raised when an analyzer invocation exceeds its time limit."""

    def __init__(self, analyzer_type: str, timeout: float):
        super().__init__(
            f"Analyzer '{analyzer_type}' exceeded {timeout}s timeout",
            details={"analyzer": analyzer_type, "timeout": str(timeout)},
        )
        self.analyzer_type = analyzer_type
        self.timeout = timeout


class CriticalStageError(AnalysisError):
    """Raised when a critical-path stage fails and the run must abort."""

    def __init__(self, analyzer_type: str, reason: str):
        super().__init__(
            f"Critical analyzer {analyzer_type} failed: {reason}",
            details={"analyzer": analyzer_type},
        )
        self.analyzer_type = analyzer_type
        self.reason = reason


class MalformedInputError(AnalysisError):
    """Raised when a file record or diff fragment cannot be analyzed as given."""

    def __init__(self, file_path: str, reason: str):
        super().__init__(
            f"Malformed input for {file_path}",
            details={"file": file_path, "reason": reason},
        )
        self.file_path = file_path
        self.reason = reason
