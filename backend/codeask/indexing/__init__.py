"""Indexing functionality for codeask."""

from .base import Indexer
from .indexer import DefaultIndexer
from .walker import iter_code_files, walk

__all__ = [
    "Indexer",
    "DefaultIndexer",
    "iter_code_files",
    "walk",
]
