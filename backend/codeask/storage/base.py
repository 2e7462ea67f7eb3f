"""Abstract vector storage interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from ..core.models import ChunkRecord, SearchHit


class VectorStore(ABC):
    """Abstract base class for vector storage backends.

    Every point carries a ``codebasePath`` payload field; it is the only
    key used for scoping searches and deletes.
    """

    @abstractmethod
    async def ensure_collection(self, vector_dim: int) -> None:
        """Create the collection if it does not exist yet."""

    @abstractmethod
    async def upsert(self, records: List[ChunkRecord]) -> None:
        """Insert or replace records, keyed by their chunk id."""

    @abstractmethod
    async def search(
        self,
        query_vector: List[float],
        limit: int,
        codebase_filter: Optional[str] = None,
        score_threshold: Optional[float] = None,
    ) -> List[SearchHit]:
        """Return hits best-first, none scoring below ``score_threshold``."""

    @abstractmethod
    async def delete_by_filter(self, codebase_path: str) -> None:
        """Delete every record of one codebase."""

    @abstractmethod
    async def count(self, codebase_path: Optional[str] = None, file_path: Optional[str] = None) -> int:
        """Count records, optionally restricted to a codebase and/or file."""

    async def close(self) -> None:
        """Release client resources."""
