"""Semantic search over indexed codebases."""

from .base import Searcher
from .searcher import DefaultSearcher, format_hit, format_hits

__all__ = [
    "Searcher",
    "DefaultSearcher",
    "format_hit",
    "format_hits",
]
