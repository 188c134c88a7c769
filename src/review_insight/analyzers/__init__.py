"""File-scoped analyzers and the registry that resolves them by type."""

from .base import FILE_SCOPE, GLOBAL_SCOPE, Analyzer, FileAnalyzer
from .complexity import ComplexityAnalyzer
from .diff_classifier import DiffClassifier
from .go_specialist import GoSpecialist
from .java_specialist import JavaSpecialist
from .python_specialist import PythonSpecialist
from .quality import QualityChecker
from .registry import AnalyzerRegistry, default_registry
from .security import SecurityScanner
from .typescript_specialist import TypeScriptSpecialist

__all__ = [
    "Analyzer",
    "AnalyzerRegistry",
    "ComplexityAnalyzer",
    "DiffClassifier",
    "FILE_SCOPE",
    "FileAnalyzer",
    "GLOBAL_SCOPE",
    "GoSpecialist",
    "JavaSpecialist",
    "PythonSpecialist",
    "QualityChecker",
    "SecurityScanner",
    "TypeScriptSpecialist",
    "default_registry",
]
