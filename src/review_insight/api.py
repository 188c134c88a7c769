"""Public API for running a review from Python code.

Example:
    >>> from review_insight import review
    >>> report = review(diff_text, {"src/a.js": source})
    >>> report.risk_level
    'high'
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Optional, Union

from .analyzers.registry import AnalyzerRegistry
from .changeset import build_run_state, load_changeset
from .config import ReviewConfig
from .exceptions import ReviewInsightError
from .models import FinalReport
from .pipeline.kernel import ReviewKernel


def review(
    diff_text: str,
    files: Optional[Mapping[str, str]] = None,
    root: Optional[Union[str, Path]] = None,
    config: Optional[ReviewConfig] = None,
    registry: Optional[AnalyzerRegistry] = None,
    owner: str = "local",
    repo: str = "",
    change_number: int = 0,
    commit_sha: str = "",
) -> FinalReport:
    """Review one change set.

    Head contents come from ``files`` (path -> text) or, when omitted,
    are read from ``root``.

    Raises:
        ReviewInsightError: Neither ``files`` nor ``root`` was given.
    """
    if files is not None:
        state = build_run_state(diff_text, files, owner, repo, change_number, commit_sha)
    elif root is not None:
        state = load_changeset(diff_text, Path(root), owner, repo, change_number, commit_sha)
    else:
        raise ReviewInsightError("review() needs either file contents or a root directory")

    return ReviewKernel(config=config, registry=registry).run(state)
