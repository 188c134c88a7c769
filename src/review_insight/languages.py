"""Language configurations: extension-based language detection.

Adding a new language:
  1. Add a LanguageConfig entry to LANGUAGES below.
  2. Map it to an analyzer set in pipeline/orchestrator.py if it gets a specialist.
"""

from dataclasses import dataclass, field
from pathlib import PurePosixPath

UNKNOWN_LANGUAGE = "unknown"


@dataclass(frozen=True)
class LanguageConfig:
    """What the pipeline needs to know about a language."""

    name: str
    extensions: list[str]

    # Line comment prefixes, used by the complexity analyzer to skip comment lines.
    comment_prefixes: tuple[str, ...] = ("//", "/*", "*")

    # Exact file names that belong to this language regardless of extension.
    file_names: tuple[str, ...] = field(default_factory=tuple)


LANGUAGES = {
    "typescript": LanguageConfig(
        name="typescript",
        extensions=[".ts", ".tsx", ".mts", ".cts"],
    ),
    "javascript": LanguageConfig(
        name="javascript",
        extensions=[".js", ".jsx", ".mjs", ".cjs"],
    ),
    "python": LanguageConfig(
        name="python",
        extensions=[".py", ".pyi"],
        comment_prefixes=("#",),
    ),
    "java": LanguageConfig(
        name="java",
        extensions=[".java"],
    ),
    "go": LanguageConfig(
        name="go",
        extensions=[".go"],
    ),
    "markdown": LanguageConfig(
        name="markdown",
        extensions=[".md", ".markdown"],
        comment_prefixes=(),
    ),
    "shell": LanguageConfig(
        name="shell",
        extensions=[".sh", ".bash"],
        comment_prefixes=("#",),
    ),
    "ruby": LanguageConfig(
        name="ruby",
        extensions=[".rb"],
        comment_prefixes=("#",),
        file_names=("Gemfile", "Rakefile"),
    ),
}

_EXTENSION_INDEX = {ext: cfg.name for cfg in LANGUAGES.values() for ext in cfg.extensions}
_FILENAME_INDEX = {name: cfg.name for cfg in LANGUAGES.values() for name in cfg.file_names}


def detect_language(file_path: str) -> str:
    """Detect a file's language from its name.

    Returns ``"unknown"`` when the extension is not in LANGUAGES.
    """
    path = PurePosixPath(file_path)
    if path.name in _FILENAME_INDEX:
        return _FILENAME_INDEX[path.name]
    return _EXTENSION_INDEX.get(path.suffix.lower(), UNKNOWN_LANGUAGE)


def detect_file_type(file_path: str) -> str:
    """Return the lower-cased extension without the dot ("" when none)."""
    return PurePosixPath(file_path).suffix.lower().lstrip(".")


def get_language_config(name: str) -> LanguageConfig | None:
    """Look up a language config by name."""
    return LANGUAGES.get(name)
