"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="review-insight",
    help="Review Insight - automated multi-analyzer review of change sets",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"review-insight {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Review a change set with independent analyzers and one combined report."""


# Import subcommands to register them
from .review import review as _review  # noqa: F401, E402
from .analyzers import analyzers as _analyzers  # noqa: F401, E402
