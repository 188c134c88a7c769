"""Base formatter interface for report rendering."""

from abc import ABC, abstractmethod

from ..models import FinalReport


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, report: FinalReport) -> None:
        """Write the report to the terminal."""

    @abstractmethod
    def format(self, report: FinalReport) -> str:
        """Return the formatted report as a string."""
