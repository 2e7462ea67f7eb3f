"""Factory for creating vector store instances (Qdrant only)."""

from __future__ import annotations

from typing import Dict

from ..errors import ConfigurationError
from .base import VectorStore
from .qdrant import QdrantVectorStore


def make_vector_store(cfg: Dict) -> VectorStore:
    vector_store_cfg = cfg.get("vector_store", {})
    backend = str(vector_store_cfg.get("backend", "qdrant")).strip().lower()
    if backend != "qdrant":
        raise ConfigurationError(f"Invalid vector_store.backend: {backend!r}")

    qdrant_cfg = vector_store_cfg.get("qdrant", {})
    return QdrantVectorStore(
        collection_name=vector_store_cfg.get("collection_name", "codeask-codebase"),
        url=qdrant_cfg.get("url", "http://localhost:6333"),
        api_key=qdrant_cfg.get("api_key"),
        location=qdrant_cfg.get("location"),
    )
