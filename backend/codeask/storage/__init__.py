"""Vector storage backends (Qdrant only)."""

from .base import VectorStore
from .factory import make_vector_store
from .qdrant import QdrantVectorStore

__all__ = [
    "VectorStore",
    "QdrantVectorStore",
    "make_vector_store",
]
