"""Change-set loading: unified diff plus head contents -> RunState."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from .diff import split_file_diffs
from .languages import detect_file_type, detect_language
from .logging_config import get_logger
from .pipeline.state import FileRecord, RunContext, RunState

logger = get_logger(__name__)


def make_file_record(
    file_path: str,
    content: str,
    diff_fragment: str = "",
    language: Optional[str] = None,
) -> FileRecord:
    return FileRecord(
        file_path=file_path,
        content=content,
        diff_fragment=diff_fragment,
        file_type=detect_file_type(file_path),
        language=language or detect_language(file_path),
    )


def _context(diff_text: str, owner: str, repo: str, change_number: int, commit_sha: str) -> RunContext:
    return RunContext(
        owner=owner,
        repo=repo,
        change_number=change_number,
        commit_sha=commit_sha,
        diff_text=diff_text,
    )


def build_run_state(
    diff_text: str,
    files: Mapping[str, str],
    owner: str = "local",
    repo: str = "",
    change_number: int = 0,
    commit_sha: str = "",
    languages: Optional[Mapping[str, str]] = None,
) -> RunState:
    """RunState from in-memory head contents keyed by path.

    ``languages`` overrides extension-based detection per path.
    """
    fragments = split_file_diffs(diff_text)
    state = RunState(context=_context(diff_text, owner, repo, change_number, commit_sha))
    for path, content in files.items():
        fragment = fragments[path].fragment if path in fragments else ""
        language = languages.get(path) if languages else None
        state.add_file(make_file_record(path, content, fragment, language))
    return state


def load_changeset(
    diff_text: str,
    root: Path,
    owner: str = "local",
    repo: str = "",
    change_number: int = 0,
    commit_sha: str = "",
) -> RunState:
    """RunState for every file the diff touches, contents read under ``root``.

    Deleted files have no head content and are left out. A file that
    cannot be read is still recorded, with a validation error, so its
    analyzers degrade instead of the run failing.
    """
    root = Path(root)
    state = RunState(context=_context(diff_text, owner, repo or root.resolve().name, change_number, commit_sha))

    for path, file_diff in split_file_diffs(diff_text).items():
        if file_diff.is_deleted:
            logger.debug(f"Skipping deleted file {path}")
            continue

        record = make_file_record(path, "", file_diff.fragment)
        try:
            record.content = (root / path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {path}: {e}")
            record.validation_error = f"could not read head content: {e}"
        state.add_file(record)

    logger.debug(f"Loaded {len(state.files)} file(s) from {root}")
    return state
