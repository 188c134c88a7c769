"""Review CLI command: run the pipeline over a unified diff."""

from pathlib import Path
from typing import Optional

import typer

from ..changeset import load_changeset
from ..exceptions import ReviewInsightError
from ..formatters import get_formatter
from ..logging_config import setup_logging
from ..models import FinalReport
from ..pipeline import ReviewKernel
from . import app
from ._common import err_console, resolve_config

FAIL_ON_CHOICES = ("high", "any")


def _should_fail(report: FinalReport, fail_on: Optional[str]) -> bool:
    if fail_on == "high":
        return report.risk_level == "high"
    if fail_on == "any":
        findings = report.findings
        return bool(findings.security or findings.quality or findings.language) or report.risk_level == "high"
    return False


@app.command()
def review(
    diff_file: Path = typer.Argument(
        ...,
        help="Unified diff of the change set",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    root: Path = typer.Option(
        Path("."),
        "--root",
        "-r",
        help="Directory holding the head version of the changed files",
        exists=True,
        file_okay=False,
    ),
    owner: str = typer.Option("local", "--owner", help="Repository owner"),
    repo: str = typer.Option("", "--repo", help="Repository name (default: root directory name)"),
    number: int = typer.Option(0, "--number", "-n", help="Change-set (pull request) number"),
    commit: str = typer.Option("", "--commit", help="Head commit id"),
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich or json",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a review-insight.toml file",
        dir_okay=False,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Files analyzed concurrently",
        min=1,
    ),
    fail_on: Optional[str] = typer.Option(
        None,
        "--fail-on",
        help="Exit 1 when risk is high ('high') or anything was found ('any')",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable DEBUG logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
):
    """
    Review a change set and print the report.

    [bold cyan]Examples:[/bold cyan]

      review-insight review changes.diff --root .

      review-insight review pr.diff --root checkout --format json --fail-on high
    """
    if fail_on is not None and fail_on not in FAIL_ON_CHOICES:
        raise typer.BadParameter(
            f"must be one of {', '.join(FAIL_ON_CHOICES)}", param_hint="--fail-on"
        )

    try:
        settings = resolve_config(config, workers=workers, verbose=verbose, quiet=quiet)
        setup_logging(settings.verbosity)
        formatter = get_formatter(output_format)
        kernel = ReviewKernel(config=settings)
    except (ReviewInsightError, ValueError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    try:
        diff_text = diff_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        err_console.print(f"[red]Error:[/red] Cannot read diff {diff_file}: {e}")
        raise typer.Exit(2)
    if not diff_text.strip():
        err_console.print("[yellow]The diff is empty; nothing to review.[/yellow]")

    state = load_changeset(
        diff_text,
        root,
        owner=owner,
        repo=repo,
        change_number=number,
        commit_sha=commit,
    )
    report = kernel.run(state)
    formatter.render(report)

    if _should_fail(report, fail_on):
        raise typer.Exit(1)
