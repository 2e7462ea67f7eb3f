"""Qdrant vector database backend."""

from __future__ import annotations

import logging
from typing import List, Optional

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import (
    Distance,
    FieldCondition,
    Filter,
    FilterSelector,
    MatchValue,
    PayloadSchemaType,
    PointStruct,
    VectorParams,
)

from ..core.fingerprint import fingerprint_to_point_id
from ..core.models import ChunkRecord, SearchHit
from ..errors import VectorStoreError
from .base import VectorStore

logger = logging.getLogger(__name__)

CODEBASE_KEY = "codebasePath"
FILE_KEY = "filePath"


def _match(key: str, value: str) -> FieldCondition:
    return FieldCondition(key=key, match=MatchValue(value=value))


class QdrantVectorStore(VectorStore):

    def __init__(
        self,
        collection_name: str,
        url: Optional[str] = "http://localhost:6333",
        api_key: Optional[str] = None,
        location: Optional[str] = None,
    ):
        self.collection_name = collection_name
        self.url = url
        if location:
            self.client = AsyncQdrantClient(location=location)
        else:
            self.client = AsyncQdrantClient(url=url, api_key=api_key)
        self._ready = False

    async def ensure_collection(self, vector_dim: int) -> None:
        if self._ready:
            return
        try:
            if not await self.client.collection_exists(self.collection_name):
                await self.client.create_collection(
                    collection_name=self.collection_name,
                    vectors_config=VectorParams(size=vector_dim, distance=Distance.COSINE),
                )
                logger.info(f"Created Qdrant collection: {self.collection_name}")
                await self.client.create_payload_index(
                    collection_name=self.collection_name,
                    field_name=CODEBASE_KEY,
                    field_schema=PayloadSchemaType.KEYWORD,
                )
            else:
                info = await self.client.get_collection(collection_name=self.collection_name)
                existing_dim = info.config.params.vectors.size
                if existing_dim != vector_dim:
                    raise VectorStoreError(
                        f"Collection '{self.collection_name}' exists with dimension {existing_dim}, "
                        f"but the embedder produces dimension {vector_dim}. "
                        f"Please delete the collection and re-index."
                    )
        except VectorStoreError:
            raise
        except Exception as e:
            raise VectorStoreError(f"Failed to initialize Qdrant collection '{self.collection_name}': {e}") from e
        self._ready = True

    async def upsert(self, records: List[ChunkRecord]) -> None:
        if not records:
            return
        points = [
            PointStruct(
                id=fingerprint_to_point_id(record.codebase_path, record.chunk_id),
                vector=record.emb,
                payload=record.to_payload(),
            )
            for record in records
        ]
        try:
            await self.client.upsert(collection_name=self.collection_name, points=points, wait=True)
        except Exception as e:
            raise VectorStoreError(f"Failed to upsert {len(points)} points: {e}") from e
        logger.debug(f"Upserted {len(points)} points into '{self.collection_name}'")

    async def search(
        self,
        query_vector: List[float],
        limit: int,
        codebase_filter: Optional[str] = None,
        score_threshold: Optional[float] = None,
    ) -> List[SearchHit]:
        """Search using Qdrant's vector search."""
        search_filter = None
        if codebase_filter:
            search_filter = Filter(must=[_match(CODEBASE_KEY, codebase_filter)])

        try:
            results = await self.client.query_points(
                collection_name=self.collection_name,
                query=query_vector,
                query_filter=search_filter,
                limit=limit,
                score_threshold=score_threshold,
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            logger.error(f"Error searching in collection '{self.collection_name}': {e}")
            raise VectorStoreError(f"Search failed: {e}") from e

        return [SearchHit.from_payload(point.score, point.payload) for point in results.points]

    async def delete_by_filter(self, codebase_path: str) -> None:
        """Delete records matching the codebase filter."""
        try:
            if not await self.client.collection_exists(self.collection_name):
                logger.info(f"Collection '{self.collection_name}' does not exist, nothing to delete")
                return
            await self.client.delete(
                collection_name=self.collection_name,
                points_selector=FilterSelector(filter=Filter(must=[_match(CODEBASE_KEY, codebase_path)])),
                wait=True,
            )
        except Exception as e:
            logger.error(f"Error deleting records for {codebase_path}: {e}")
            raise VectorStoreError(f"Delete failed: {e}") from e
        logger.info(f"Deleted records for codebase: {codebase_path}")

    async def count(self, codebase_path: Optional[str] = None, file_path: Optional[str] = None) -> int:
        """Count records in the collection."""
        conditions = []
        if codebase_path:
            conditions.append(_match(CODEBASE_KEY, codebase_path))
        if file_path:
            conditions.append(_match(FILE_KEY, file_path))
        try:
            result = await self.client.count(
                collection_name=self.collection_name,
                count_filter=Filter(must=conditions) if conditions else None,
                exact=True,
            )
        except Exception as e:
            raise VectorStoreError(f"Count failed: {e}") from e
        return result.count

    async def close(self) -> None:
        await self.client.close()
