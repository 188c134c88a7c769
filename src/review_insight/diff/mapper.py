"""Diff Mapper: unified diff text to per-file added-line sets.

Line numbering follows the new-file side of each hunk: the counter starts at
the hunk's ``+start`` value and advances on added and context lines. Removed
lines never advance it.
"""

from __future__ import annotations

import re

from ..logging_config import get_logger
from .models import FileChanges, FileDiff

logger = get_logger(__name__)

_HUNK_HEADER = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)(?:,(\d+))? @@")
_GIT_HEADER = re.compile(r"^diff --git a/(.+?) b/(.+)$")

_NEW_FILE_PREFIX = "+++ "
_OLD_FILE_PREFIX = "--- "
_NO_NEWLINE_MARKER = "\\"


def _strip_path_prefix(raw: str) -> str | None:
    """Turn ``b/src/a.js`` (or ``/dev/null``) from a ---/+++ header into a path."""
    path = raw.split("\t", 1)[0].strip()
    if path == "/dev/null":
        return None
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


def parse_added_lines(diff_text: str) -> dict[str, FileChanges]:
    """Map every file in ``diff_text`` to the new-file line numbers it adds.

    Files present in the diff with no added lines (pure deletions) map to an
    empty set. Deleted files (``+++ /dev/null``) are not included.
    """
    files: dict[str, FileChanges] = {}
    current: FileChanges | None = None
    line_number = 0
    # Lines still expected in the current hunk, per side (from the @@ header).
    old_remaining = 0
    new_remaining = 0

    for line in _diff_lines(diff_text):
        in_hunk = old_remaining > 0 or new_remaining > 0

        if not in_hunk:
            if line.startswith("diff --git "):
                current = None
            elif line.startswith(_NEW_FILE_PREFIX):
                path = _strip_path_prefix(line[len(_NEW_FILE_PREFIX):])
                if path is None:
                    current = None
                else:
                    current = files.setdefault(path, FileChanges(file_path=path))
            elif line.startswith("@@"):
                match = _HUNK_HEADER.match(line)
                if match is None:
                    logger.debug(f"Skipping malformed hunk header: {line!r}")
                    continue
                old_count, new_count = _hunk_counts(line)
                line_number = int(match.group(1))
                old_remaining, new_remaining = old_count, new_count
            continue

        if current is None:
            old_remaining = new_remaining = 0
            continue

        if line.startswith("+"):
            current.added_lines.add(line_number)
            line_number += 1
            new_remaining -= 1
        elif line.startswith("-"):
            old_remaining -= 1
        elif line.startswith(_NO_NEWLINE_MARKER):
            continue
        elif line.startswith(" ") or line == "":
            line_number += 1
            old_remaining -= 1
            new_remaining -= 1
        else:
            logger.debug(f"Hunk in {current.file_path} ended early at {line!r}")
            old_remaining = new_remaining = 0

    return files


def _hunk_counts(header: str) -> tuple[int, int]:
    """Old/new line counts from a hunk header; an omitted count means 1."""
    match = re.match(r"^@@ -\d+(?:,(\d+))? \+\d+(?:,(\d+))? @@", header)
    if match is None:
        return 0, 0
    old_count = int(match.group(1)) if match.group(1) is not None else 1
    new_count = int(match.group(2)) if match.group(2) is not None else 1
    return old_count, new_count


def added_line_map(diff_text: str) -> dict[str, set[int]]:
    """Plain ``{path: {lines}}`` view of :func:`parse_added_lines`."""
    return {path: changes.added_lines for path, changes in parse_added_lines(diff_text).items()}


def split_file_diffs(diff_text: str) -> dict[str, FileDiff]:
    """Split a multi-file unified diff into per-file fragments.

    Keyed by the new path (the old path for deleted files). Fragments keep
    their ``diff --git`` header so they are valid diffs on their own.
    """
    result: dict[str, FileDiff] = {}

    for chunk in _file_chunks(_diff_lines(diff_text)):
        fragment = "".join(f"{line}\n" for line in chunk)
        old_path: str | None = None
        new_path: str | None = None
        is_deleted = False
        is_new = False

        for stripped in chunk:
            git_match = _GIT_HEADER.match(stripped)
            if git_match:
                old_path, new_path = git_match.group(1), git_match.group(2)
            elif stripped.startswith(_OLD_FILE_PREFIX):
                parsed = _strip_path_prefix(stripped[len(_OLD_FILE_PREFIX):])
                if parsed is None:
                    is_new = True
                else:
                    old_path = parsed
            elif stripped.startswith(_NEW_FILE_PREFIX):
                parsed = _strip_path_prefix(stripped[len(_NEW_FILE_PREFIX):])
                if parsed is None:
                    is_deleted = True
                else:
                    new_path = parsed
                break

        if is_deleted:
            key = old_path
        else:
            key = new_path or old_path
        if key is None:
            continue

        result[key] = FileDiff(
            file_path=key,
            fragment=fragment,
            old_path=old_path,
            is_deleted=is_deleted,
            is_new=is_new,
        )

    return result


def _diff_lines(diff_text: str) -> list[str]:
    """Split on ``\\n`` only; form feeds and U+2028 inside a line are content."""
    lines = diff_text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _file_chunks(lines: list[str]) -> list[list[str]]:
    """Group diff lines per file.

    A chunk starts at a ``diff`` line or, for plain ``diff -u`` output, at a
    ``--- `` header once the current chunk already has its ``+++ `` header.
    Hunk bodies are counted off so content such as ``--- x`` is never taken
    for a header.
    """
    chunks: list[list[str]] = []
    seen_new_header = False
    old_remaining = 0
    new_remaining = 0

    for index, line in enumerate(lines):
        if old_remaining > 0 or new_remaining > 0:
            if line.startswith("+"):
                new_remaining -= 1
                chunks[-1].append(line)
                continue
            if line.startswith("-"):
                old_remaining -= 1
                chunks[-1].append(line)
                continue
            if line.startswith(" ") or line == "":
                old_remaining -= 1
                new_remaining -= 1
                chunks[-1].append(line)
                continue
            if line.startswith(_NO_NEWLINE_MARKER):
                chunks[-1].append(line)
                continue
            # hunk ended early; treat the line as a header
            old_remaining = new_remaining = 0

        next_line = lines[index + 1] if index + 1 < len(lines) else ""
        starts_file = line.startswith("diff ") or (
            seen_new_header
            and line.startswith(_OLD_FILE_PREFIX)
            and next_line.startswith(_NEW_FILE_PREFIX)
        )
        if starts_file or not chunks:
            chunks.append([])
            seen_new_header = False

        if line.startswith(_NEW_FILE_PREFIX):
            seen_new_header = True
        elif line.startswith("@@"):
            old_remaining, new_remaining = _hunk_counts(line)

        chunks[-1].append(line)

    return chunks
