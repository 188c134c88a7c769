"""Rich terminal formatter for review reports."""

from io import StringIO
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import FinalReport
from .base import BaseFormatter

_SEVERITY_STYLES = {
    "critical": "red bold",
    "high": "red",
    "medium": "yellow",
    "low": "green",
}

_RISK_STYLES = {"high": "red bold", "medium": "yellow", "low": "green"}


def _severity_label(severity: str) -> str:
    style = _SEVERITY_STYLES.get(severity, "dim")
    return f"[{style}]{severity}[/{style}]"


def _score_label(score: float) -> str:
    if score >= 8:
        return f"[green]{score:.1f}[/green]"
    elif score >= 5:
        return f"[yellow]{score:.1f}[/yellow]"
    else:
        return f"[red]{score:.1f}[/red]"


class RichFormatter(BaseFormatter):
    """Summary panel, findings tables, and recommendation buckets."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, report: FinalReport) -> None:
        self._print(report, self.console)

    def format(self, report: FinalReport) -> str:
        buffer = Console(file=StringIO(), width=120, record=True)
        self._print(report, buffer)
        return buffer.export_text()

    def _print(self, report: FinalReport, console: Console) -> None:
        risk_style = _RISK_STYLES.get(report.risk_level, "dim")
        meta = report.metadata
        header = (
            f"Score: {_score_label(report.overall_score)} / 10    "
            f"Risk: [{risk_style}]{report.risk_level}[/{risk_style}]\n"
            f"[dim]{meta.total_files_analyzed} file(s), {meta.total_analyzers_used} analyzer run(s), "
            f"average confidence {meta.average_confidence:.2f}, {meta.processing_time:.2f}s[/dim]\n\n"
            f"{escape(report.summary)}"
        )
        console.print(Panel(header, title="[bold cyan]Review Summary[/bold cyan]", expand=False))

        findings = report.findings
        if findings.security:
            table = Table(title="Security", show_header=True, title_justify="left")
            table.add_column("Severity")
            table.add_column("Location")
            table.add_column("Rule", style="dim")
            table.add_column("Message")
            for f in findings.security:
                location = f"{f.file_path}:{','.join(str(n) for n in f.lines)}" if f.lines else f.file_path
                table.add_row(_severity_label(f.severity), escape(location), f.rule, escape(f.message))
            console.print(table)

        if findings.quality:
            table = Table(title="Quality", show_header=True, title_justify="left")
            table.add_column("Severity")
            table.add_column("Location")
            table.add_column("Category", style="dim")
            table.add_column("Message")
            for q in findings.quality:
                location = f"{q.file_path}:{q.line}" if q.line is not None else q.file_path
                table.add_row(_severity_label(q.severity), escape(location), q.category, escape(q.message))
            console.print(table)

        if findings.complexity:
            table = Table(title="Complexity", show_header=True, title_justify="left")
            table.add_column("File")
            table.add_column("LOC", justify="right")
            table.add_column("Cyclomatic", justify="right")
            table.add_column("Cognitive", justify="right")
            table.add_column("Maintainability", justify="right")
            table.add_column("Debt (min)", justify="right")
            for m in findings.complexity:
                table.add_row(
                    escape(m.file_path),
                    str(m.lines_of_code),
                    str(m.cyclomatic_complexity),
                    str(m.cognitive_complexity),
                    str(m.maintainability_index),
                    str(m.technical_debt.estimated_minutes),
                )
            console.print(table)

        for insight in findings.language:
            console.print(f"\n[bold]{escape(insight.file_path)}[/bold] [dim]({insight.language})[/dim]")
            for label, entries in (
                ("idiom", insight.patterns.idioms),
                ("anti-pattern", insight.patterns.anti_patterns),
                ("best practice", insight.patterns.best_practices),
            ):
                for entry in entries:
                    where = f"line {entry.line}: " if entry.line is not None else ""
                    console.print(f"  [dim]{label}[/dim] {where}{escape(entry.message)}")

        recs = report.recommendations
        buckets = [("critical", recs.critical), ("high", recs.high), ("medium", recs.medium), ("low", recs.low)]
        if any(items for _, items in buckets):
            console.print("\n[bold cyan]Recommendations[/bold cyan]")
            for severity, items in buckets:
                for item in items:
                    console.print(f"  {_severity_label(severity)}  {escape(item)}", highlight=False)

        if meta.uncertain_areas:
            console.print("\n[bold yellow]Uncertain areas[/bold yellow]")
            for area in meta.uncertain_areas:
                console.print(f"  - {area}", markup=False)
