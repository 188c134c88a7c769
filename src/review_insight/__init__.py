"""Review Insight: automated multi-analyzer review of code change sets."""

__version__ = "0.1.0"

from .api import review
from .config import ReviewConfig, load_config
from .exceptions import ReviewInsightError
from .models import FinalReport
from .pipeline import ReviewKernel, RunState

__all__ = [
    "FinalReport",
    "ReviewConfig",
    "ReviewInsightError",
    "ReviewKernel",
    "RunState",
    "__version__",
    "load_config",
    "review",
]
