"""Indexer Interface."""

from __future__ import annotations

from typing import Set

from ..core.models import IndexProgress, IndexResult


class Indexer:
    """Abstract base class for code indexing."""

    indexed_roots: Set[str]
    is_indexing: bool
    progress: IndexProgress

    async def index_codebase(self, root: str) -> IndexResult:
        raise NotImplementedError

    async def clear(self, root: str) -> None:
        raise NotImplementedError
