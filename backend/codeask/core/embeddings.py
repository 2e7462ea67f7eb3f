"""Embedding models for semantic search."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

import requests

from ..errors import ConfigurationError, EmbeddingRequestFailed, EmbeddingUnavailable

logger = logging.getLogger(__name__)

OPENAI_EMBEDDINGS_URL = "https://api.openai.com/v1/embeddings"


class Embedder:
    """Abstract base class for embedding models."""

    dimension: int = 0

    @property
    def is_configured(self) -> bool:
        return True

    async def embed(self, texts: List[str]) -> List[List[float]]:
        """Embed multiple texts into vectors, same length and order as ``texts``."""
        raise NotImplementedError

    async def embed_one(self, text: str) -> List[float]:
        """Embed a single text into a vector."""
        return (await self.embed([text]))[0]


class OpenAIEmbedder(Embedder):
    """Embedder backed by the OpenAI embeddings endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "text-embedding-3-small",
        dimension: int = 1536,
        timeout: int = 60,
        url: str = OPENAI_EMBEDDINGS_URL,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.dimension = dimension
        self.timeout = timeout
        self.url = url

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _request(self, texts: List[str]) -> List[List[float]]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {"model": self.model, "input": texts, "encoding_format": "float"}
        try:
            response = requests.post(self.url, headers=headers, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise EmbeddingRequestFailed(f"Failed to create embeddings: {e}") from e

        items = data.get("data") if isinstance(data, dict) else None
        if not isinstance(items, list) or len(items) != len(texts):
            raise EmbeddingRequestFailed(
                f"Embedding response holds {len(items) if isinstance(items, list) else 'no'} "
                f"vectors for {len(texts)} inputs"
            )
        if not all(isinstance(item, dict) and isinstance(item.get("embedding"), list) for item in items):
            raise EmbeddingRequestFailed("Embedding response item without an 'embedding' vector")
        items = sorted(items, key=lambda item: item.get("index", 0))
        return [item["embedding"] for item in items]

    async def embed(self, texts: List[str]) -> List[List[float]]:
        if not self.is_configured:
            raise EmbeddingUnavailable(
                "No embedding API key configured. Set embedding.api_key or OPENAI_API_KEY."
            )
        if not texts:
            return []
        return await asyncio.to_thread(self._request, list(texts))


class SentenceTransformersEmbedder(Embedder):
    """Embedder using SentenceTransformers library."""

    def __init__(self, model_name: str) -> None:
        from sentence_transformers import SentenceTransformer  # type: ignore
        self.model = SentenceTransformer(model_name)
        self.dimension = int(self.model.get_sentence_embedding_dimension())

    def _encode(self, texts: List[str]) -> List[List[float]]:
        arr = self.model.encode(texts, normalize_embeddings=True, show_progress_bar=False)
        return [row.tolist() for row in arr]

    async def embed(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        try:
            return await asyncio.to_thread(self._encode, list(texts))
        except Exception as e:
            raise EmbeddingRequestFailed(f"Local embedding failed: {e}") from e


def make_embedder(cfg: Dict) -> Embedder:
    """Create embedder from config.

    Args:
        cfg: Configuration dictionary

    Returns:
        Embedder instance

    Raises:
        ConfigurationError: If backend is invalid or its model cannot be loaded
    """
    emb_cfg = cfg.get("embedding", {})
    backend = str(emb_cfg.get("backend", "openai")).strip().lower()

    if backend == "openai":
        return OpenAIEmbedder(
            api_key=emb_cfg.get("api_key"),
            model=emb_cfg.get("model", "text-embedding-3-small"),
            dimension=int(emb_cfg.get("dimension", 1536)),
        )

    if backend == "sentence_transformers":
        model_name = emb_cfg.get("sentence_transformers_model", "all-MiniLM-L6-v2")
        try:
            return SentenceTransformersEmbedder(model_name)
        except Exception as e:
            raise ConfigurationError(
                "Could not load sentence-transformers model "
                f"{model_name!r}. Install it with: pip install 'codeask[local]'"
            ) from e

    raise ConfigurationError(f"Invalid embedding.backend: {backend!r}")
