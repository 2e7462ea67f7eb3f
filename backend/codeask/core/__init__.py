"""Core functionality for codeask."""

from .models import ChunkRecord, IndexProgress, IndexResult, SearchHit
from .chunking import Chunker, DefaultChunker, LineEstimator, split_into_chunks
from .embeddings import Embedder, OpenAIEmbedder, SentenceTransformersEmbedder, make_embedder
from .fingerprint import chunk_fingerprint, fingerprint_to_point_id

__all__ = [
    "ChunkRecord",
    "IndexProgress",
    "IndexResult",
    "SearchHit",
    "Chunker",
    "DefaultChunker",
    "LineEstimator",
    "split_into_chunks",
    "Embedder",
    "OpenAIEmbedder",
    "SentenceTransformersEmbedder",
    "make_embedder",
    "chunk_fingerprint",
    "fingerprint_to_point_id",
]
