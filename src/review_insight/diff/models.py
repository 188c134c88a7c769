"""Data models for unified-diff mapping."""

from dataclasses import dataclass, field


@dataclass
class FileChanges:
    """Added-line numbers (new-file numbering) for one file in a diff."""

    file_path: str
    added_lines: set[int] = field(default_factory=set)

    def contains(self, line: int) -> bool:
        return line in self.added_lines

    def sorted_lines(self) -> list[int]:
        return sorted(self.added_lines)


@dataclass
class FileDiff:
    """One file's slice of a unified diff."""

    file_path: str
    fragment: str
    old_path: str | None = None
    is_deleted: bool = False
    is_new: bool = False
