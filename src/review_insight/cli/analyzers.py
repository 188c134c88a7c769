"""Analyzers CLI command: list registered analyzers and their health."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..analyzers import default_registry
from ..exceptions import ReviewInsightError
from ..logging_config import setup_logging
from ..pipeline.orchestrator import ANALYZERS_BY_LANGUAGE, UNIVERSAL_ANALYZERS
from . import app
from ._common import console, err_console, resolve_config


@app.command()
def analyzers(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a review-insight.toml file",
        dir_okay=False,
    ),
):
    """
    List the registered analyzers with their health-check status.
    """
    try:
        settings = resolve_config(config)
        setup_logging(settings.verbosity)
        registry = default_registry(settings)
    except ReviewInsightError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    languages: dict[str, list[str]] = {}
    for language, types in ANALYZERS_BY_LANGUAGE.items():
        for analyzer_type in types:
            languages.setdefault(analyzer_type.value, []).append(language)

    table = Table(show_header=True, title="Registered analyzers", title_justify="left")
    table.add_column("Analyzer", style="bold")
    table.add_column("Languages")
    table.add_column("Health")
    table.add_column("Description", style="dim")

    unhealthy = 0
    for analyzer_type in registry.list():
        analyzer = registry.get(analyzer_type)
        status = registry.health_check(analyzer_type)
        if status.healthy:
            health = "[green]ok[/green]"
        else:
            unhealthy += 1
            health = f"[red]{status.message or 'unhealthy'}[/red]"
        if analyzer_type in UNIVERSAL_ANALYZERS:
            applies = "all"
        else:
            applies = ", ".join(languages.get(analyzer_type.value, [])) or "-"
        table.add_row(analyzer_type.value, applies, health, analyzer.description)

    console.print(table)
    if unhealthy:
        raise typer.Exit(1)
