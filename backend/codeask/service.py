"""Codebase service: indexing, retrieval and context selection behind one object."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .config import load_config, validate_config
from .context import ContextAssembler
from .core import Embedder, IndexResult, SearchHit, make_embedder
from .errors import RetrievalFailure
from .indexing import DefaultIndexer
from .search import DefaultSearcher, format_hits
from .storage import VectorStore, make_vector_store
from .utils import normalize_root

logger = logging.getLogger(__name__)


class CodebaseService:
    """Holds the process-wide indexing state for one server.

    The indexed-root set and the busy flag live on the indexer owned by
    this instance. Neither is persisted: a restart forgets which roots were
    indexed even if the vector store still has their points.
    """

    def __init__(
        self,
        cfg: Optional[Dict] = None,
        embedder: Optional[Embedder] = None,
        store: Optional[VectorStore] = None,
    ):
        self.cfg = cfg if cfg is not None else load_config()
        validate_config(self.cfg)

        self.embedder = embedder if embedder is not None else make_embedder(self.cfg)
        self.store = store if store is not None else make_vector_store(self.cfg)

        search_cfg = self.cfg.get("search", {})
        self.default_limit = int(search_cfg.get("default_limit", 10))
        self.context_limit = int(search_cfg.get("context_limit", 5))

        self.indexer = DefaultIndexer(self.embedder, self.store, self.cfg)
        self.searcher = DefaultSearcher(
            self.embedder,
            self.store,
            score_threshold=float(search_cfg.get("score_threshold", 0.7)),
        )
        self.assembler = ContextAssembler(self.cfg)

    def is_indexed(self, root: str) -> bool:
        return normalize_root(root) in self.indexer.indexed_roots

    async def index_codebase(self, root: str) -> IndexResult:
        return await self.indexer.index_codebase(root)

    async def search(self, query: str, root: Optional[str] = None, limit: Optional[int] = None) -> List[SearchHit]:
        return await self.searcher.search(query, root, limit or self.default_limit)

    async def get_indexed_context(self, query: str, root: str) -> str:
        """Indexed-search context for ``root``, or "" when there is none."""
        if not self.is_indexed(root):
            logger.info(f"Codebase not indexed: {root}")
            return ""
        try:
            hits = await self.searcher.search(query, root, self.context_limit)
        except RetrievalFailure as e:
            logger.warning(f"Could not get indexed context: {e}")
            return ""
        return format_hits(hits)

    async def get_context(self, query: str, root: Optional[str], use_indexed_search: bool = False) -> str:
        """Pick the context for a question about ``root``.

        Indexed search is tried only when requested and the root is indexed;
        anything else, including an empty result, falls back to raw files.
        """
        if not root:
            return ""
        root = normalize_root(root)

        context = ""
        if use_indexed_search:
            context = await self.get_indexed_context(query, root)
        if not context:
            context = await self.assembler.assemble_async(root)
        return context

    async def clear_index(self, root: str) -> None:
        await self.indexer.clear(root)

    def get_status(self) -> Dict:
        progress = self.indexer.progress
        return {
            "is_indexing": self.indexer.is_indexing,
            "indexed_roots": sorted(self.indexer.indexed_roots),
            "embedding_configured": self.embedder.is_configured,
            "progress": {
                "root": progress.root,
                "processed_files": progress.processed_files,
                "total_files": progress.total_files,
                "total_chunks": progress.total_chunks,
            },
        }

    async def close(self) -> None:
        await self.store.close()
