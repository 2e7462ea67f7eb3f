"""File utility functions."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from ..errors import InvalidArgument

EXT_TO_LANG = {
    ".js": "javascript",
    ".ts": "typescript",
    ".jsx": "javascript",
    ".tsx": "typescript",
    ".py": "python",
    ".java": "java",
    ".cpp": "cpp",
    ".c": "c",
    ".cs": "csharp",
    ".php": "php",
    ".rb": "ruby",
    ".go": "go",
    ".rs": "rust",
    ".swift": "swift",
    ".kt": "kotlin",
    ".scala": "scala",
    ".html": "html",
    ".css": "css",
    ".scss": "scss",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".md": "markdown",
    ".txt": "text",
    ".sh": "bash",
    ".bash": "bash",
    ".zsh": "bash",
}


def language_for(path: str) -> str:
    """Code-fence language tag for a file name."""
    return EXT_TO_LANG.get(os.path.splitext(path)[1], "text")


def normalize_root(root: Optional[str]) -> str:
    """Absolute form of a codebase root, used as its identity everywhere.

    Raises:
        InvalidArgument: if ``root`` is empty.
    """
    if root is None or not str(root).strip():
        raise InvalidArgument("Codebase path is required")
    return os.path.abspath(os.path.expanduser(str(root).strip()))


def is_binary_file(path: Path) -> bool:
    """Check if file is binary by looking for null bytes."""
    try:
        with path.open("rb") as f:
            sample = f.read(2048)
        return b"\x00" in sample
    except OSError:
        return True


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")
