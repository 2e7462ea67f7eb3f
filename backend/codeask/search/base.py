"""Searcher Interface."""

from __future__ import annotations

from typing import List, Optional

from ..core import SearchHit


class Searcher:
    """Abstract base class for semantic search."""

    async def search(
        self,
        query: str,
        codebase_path: Optional[str] = None,
        limit: int = 10,
    ) -> List[SearchHit]:
        """Search for code chunks semantically similar to query.

        Args:
            query: Search query text
            codebase_path: Restrict results to this codebase root, or search all
            limit: Maximum number of results

        Returns:
            List of hits sorted by descending score
        """
        raise NotImplementedError
