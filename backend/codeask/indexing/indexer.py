"""Code indexing logic."""

from __future__ import annotations

import asyncio
import dataclasses
import datetime as _dt
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from ..config import CODE_EXTENSIONS
from ..core import ChunkRecord, DefaultChunker, Embedder, IndexProgress, IndexResult, LineEstimator
from ..core.fingerprint import chunk_fingerprint
from ..errors import AlreadyIndexing, EmbeddingRequestFailed, EmbeddingUnavailable, InvalidArgument, VectorStoreError
from ..storage import VectorStore
from ..utils import is_binary_file, normalize_root, read_text
from .base import Indexer
from .walker import iter_code_files

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class FileOutcome:
    chunks: int = 0
    failed: int = 0
    skipped: bool = False


class DefaultIndexer(Indexer):
    """Walk, chunk, embed and upsert one codebase at a time.

    Only one run may be in flight per instance, whatever the root. Files are
    processed in sequential batches; files inside a batch run concurrently.
    """

    def __init__(
        self,
        embedder: Embedder,
        store: VectorStore,
        cfg: Optional[Dict] = None,
        extensions: Optional[Iterable[str]] = None,
    ):
        indexing_cfg = (cfg or {}).get("indexing", {})
        self.embedder = embedder
        self.store = store
        self.extensions = list(extensions if extensions is not None else CODE_EXTENSIONS)
        self.max_file_size = int(indexing_cfg.get("max_file_size", 1024 * 1024))
        self.batch_size = int(indexing_cfg.get("batch_size", 10))
        self.embedding_batch_size = int(indexing_cfg.get("embedding_batch_size", 100))
        self.chunker = DefaultChunker(
            chunk_size=int(indexing_cfg.get("chunk_size", 1000)),
            overlap=int(indexing_cfg.get("chunk_overlap", 200)),
            line_estimator=LineEstimator(int(indexing_cfg.get("chars_per_line", 50))),
        )

        self.indexed_roots: Set[str] = set()
        self.is_indexing = False
        self.progress = IndexProgress()

    async def index_codebase(self, root: str) -> IndexResult:
        root = normalize_root(root)
        if self.is_indexing:
            raise AlreadyIndexing("Indexing already in progress")
        if not self.embedder.is_configured:
            raise EmbeddingUnavailable(
                "An embedding API key is required for indexing. Set embedding.api_key or OPENAI_API_KEY."
            )
        if not os.path.isdir(root):
            raise InvalidArgument(f"Codebase path is not a directory: {root}")

        self.is_indexing = True
        try:
            logger.info(f"Starting indexing of: {root}")
            await self.store.ensure_collection(self.embedder.dimension)

            files = await asyncio.to_thread(iter_code_files, root, self.extensions)
            logger.info(f"Found {len(files)} code files to index")

            result = IndexResult(total_files=len(files))
            self.progress = IndexProgress(root=root, total_files=len(files))

            for i in range(0, len(files), self.batch_size):
                batch = files[i:i + self.batch_size]
                outcomes = await asyncio.gather(*(self._index_file(fp, root) for fp in batch))

                for outcome in outcomes:
                    result.processed_files += 1
                    result.total_chunks += outcome.chunks
                    result.failed_chunks += outcome.failed
                    if outcome.skipped:
                        result.skipped_files += 1

                    self.progress.processed_files = result.processed_files
                    self.progress.total_chunks = result.total_chunks
                    if result.processed_files % 10 == 0:
                        logger.info(
                            f"Progress: {result.processed_files}/{len(files)} files, "
                            f"{result.total_chunks} chunks indexed"
                        )

            self.indexed_roots.add(root)
            logger.info(
                f"Indexing complete! Indexed {result.total_chunks} chunks from {result.processed_files} files "
                f"({result.failed_chunks} chunks failed, {result.skipped_files} files skipped)"
            )
            return result
        except Exception as e:
            logger.error(f"Indexing failed: {e}")
            raise
        finally:
            self.is_indexing = False

    async def _index_file(self, file_path: str, root: str) -> FileOutcome:
        path = Path(file_path)
        try:
            size = (await asyncio.to_thread(path.stat)).st_size
        except OSError as e:
            logger.warning(f"Skipping unreadable file {file_path}: {e}")
            return FileOutcome(skipped=True)

        if size > self.max_file_size:
            logger.warning(f"Skipping large file: {file_path} ({size} bytes)")
            return FileOutcome(skipped=True)
        if await asyncio.to_thread(is_binary_file, path):
            logger.debug(f"Skipping binary file: {file_path}")
            return FileOutcome(skipped=True)

        try:
            text = await asyncio.to_thread(read_text, path)
        except OSError as e:
            logger.warning(f"Skipping unreadable file {file_path}: {e}")
            return FileOutcome(skipped=True)

        rel = path.relative_to(root).as_posix()
        chunks = self.chunker.chunk(text)
        if not chunks:
            return FileOutcome()

        vectors = await self._embed_chunks(rel, [c[2] for c in chunks])
        timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat()

        records: List[ChunkRecord] = []
        failed = 0
        for (sline, eline, ctext), vector in zip(chunks, vectors):
            if vector is None:
                failed += 1
                continue
            records.append(
                ChunkRecord(
                    chunk_id=chunk_fingerprint(rel, sline, ctext),
                    path=rel,
                    start_line=sline,
                    end_line=eline,
                    text=ctext,
                    codebase_path=root,
                    timestamp=timestamp,
                    emb=vector,
                )
            )

        stored = await self._upsert_records(rel, records)
        failed += len(records) - stored
        return FileOutcome(chunks=stored, failed=failed)

    async def _embed_chunks(self, rel: str, texts: List[str]) -> List[Optional[List[float]]]:
        """Embed a file's chunks in requests of at most ``embedding_batch_size`` inputs."""
        vectors: List[Optional[List[float]]] = []
        for offset in range(0, len(texts), self.embedding_batch_size):
            batch = texts[offset:offset + self.embedding_batch_size]
            vectors.extend(await self._embed_batch(rel, offset, batch))
        return vectors

    async def _embed_batch(self, rel: str, offset: int, texts: List[str]) -> List[Optional[List[float]]]:
        """One request for the batch; on failure fall back to one request per chunk."""
        try:
            return list(await self.embedder.embed(texts))
        except EmbeddingRequestFailed as e:
            if len(texts) == 1:
                logger.warning(f"Failed to embed chunk {offset} of {rel}: {e}")
                return [None]
            logger.warning(f"Batch embedding failed for {rel}, retrying chunk by chunk: {e}")

        vectors: List[Optional[List[float]]] = []
        for i, text in enumerate(texts, start=offset):
            try:
                vectors.append(await self.embedder.embed_one(text))
            except EmbeddingRequestFailed as e:
                logger.warning(f"Failed to embed chunk {i} of {rel}: {e}")
                vectors.append(None)
        return vectors

    async def _upsert_records(self, rel: str, records: List[ChunkRecord]) -> int:
        if not records:
            return 0
        try:
            await self.store.upsert(records)
            return len(records)
        except VectorStoreError as e:
            if len(records) == 1:
                logger.warning(f"Failed to store chunk of {rel}: {e}")
                return 0
            logger.warning(f"Batch upsert failed for {rel}, retrying chunk by chunk: {e}")

        stored = 0
        for record in records:
            try:
                await self.store.upsert([record])
                stored += 1
            except VectorStoreError as e:
                logger.warning(f"Failed to store chunk {record.path}:{record.start_line}: {e}")
        return stored

    async def clear(self, root: str) -> None:
        root = normalize_root(root)
        await self.store.delete_by_filter(root)
        self.indexed_roots.discard(root)
