"""Semantic search functionality."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..core import Embedder, SearchHit
from ..errors import EmbeddingRequestFailed, InvalidArgument, RetrievalFailure, VectorStoreError
from ..storage import VectorStore
from ..utils import language_for, normalize_root
from .base import Searcher

logger = logging.getLogger(__name__)

DEFAULT_SCORE_THRESHOLD = 0.7


class DefaultSearcher(Searcher):
    """Embed the query and run a filtered similarity search.

    The score threshold is handed to the vector store, which drops
    anything below it before ranking.
    """

    def __init__(self, embedder: Embedder, store: VectorStore, score_threshold: float = DEFAULT_SCORE_THRESHOLD):
        self.embedder = embedder
        self.store = store
        self.score_threshold = score_threshold

    async def search(
        self,
        query: str,
        codebase_path: Optional[str] = None,
        limit: int = 10,
    ) -> List[SearchHit]:
        if not query or not query.strip():
            raise InvalidArgument("Query is required")
        if limit <= 0:
            raise InvalidArgument(f"limit must be positive, got {limit}")
        scope = normalize_root(codebase_path) if codebase_path else None

        try:
            await self.store.ensure_collection(self.embedder.dimension)
            qv = await self.embedder.embed_one(query)
            hits = await self.store.search(
                qv,
                limit,
                codebase_filter=scope,
                score_threshold=self.score_threshold,
            )
        except (EmbeddingRequestFailed, VectorStoreError) as e:
            logger.error(f"Search failed: {e}")
            raise RetrievalFailure(str(e)) from e

        return hits[:limit]


def format_hit(hit: SearchHit) -> str:
    return (
        f"### {hit.path} (lines {hit.start_line}-{hit.end_line}, score: {hit.score:.3f}):\n"
        f"```{language_for(hit.path)}\n{hit.text}\n```\n"
    )


def format_hits(hits: List[SearchHit]) -> str:
    """Render hits as the indexed-search context block, or "" when empty."""
    if not hits:
        return ""
    context = ["## Relevant Code (from indexed search):\n"]
    context.extend(format_hit(hit) for hit in hits)
    return "\n".join(context)
