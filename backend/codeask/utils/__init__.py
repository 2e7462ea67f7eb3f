"""Utility functions for codeask."""

from .file_utils import (
    is_binary_file,
    language_for,
    normalize_root,
    read_text,
)

__all__ = [
    "is_binary_file",
    "language_for",
    "normalize_root",
    "read_text",
]
