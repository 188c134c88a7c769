"""JSON formatter for review reports."""

import json
from dataclasses import asdict

from ..models import FinalReport
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render the report as JSON."""

    def render(self, report: FinalReport) -> None:
        print(self.format(report))

    def format(self, report: FinalReport) -> str:
        return json.dumps(asdict(report), indent=2, default=str)
