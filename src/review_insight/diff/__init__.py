"""Unified diff parsing: added-line maps and per-file fragments."""

from .mapper import added_line_map, parse_added_lines, split_file_diffs
from .models import FileChanges, FileDiff

__all__ = [
    "FileChanges",
    "FileDiff",
    "added_line_map",
    "parse_added_lines",
    "split_file_diffs",
]
