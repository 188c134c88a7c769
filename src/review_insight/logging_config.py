"""
Logging configuration for Review Insight.

Log lines go to stderr through rich so they never mix with a report
rendered on stdout.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure logging for one CLI run.

    Args:
        verbosity: ``ReviewConfig.verbosity``; "quiet" keeps only errors,
            "verbose" adds per-analyzer DEBUG records and source paths.
        log_file: Optional file that also receives every record

    Returns:
        The configured review_insight logger
    """
    level = LOG_LEVELS.get(verbosity, logging.WARNING)
    verbose = verbosity == "verbose"

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True)

    logger = logging.getLogger("review_insight")
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``review_insight`` namespace (the root one when ``name`` is None)."""
    if name is None:
        return logging.getLogger("review_insight")
    if not name.startswith("review_insight"):
        name = f"review_insight.{name}"
    return logging.getLogger(name)
