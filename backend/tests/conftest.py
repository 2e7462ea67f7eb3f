"""Shared fixtures: deterministic embedders and an in-process Qdrant store."""

import asyncio
import copy
from typing import List

import pytest

from codeask.config import DEFAULT_CONFIG
from codeask.core import Embedder
from codeask.errors import EmbeddingRequestFailed
from codeask.service import CodebaseService
from codeask.storage import QdrantVectorStore

VOCAB = ["login", "auth", "password", "database", "query", "render", "button", "console"]


class KeywordEmbedder(Embedder):
    """Bag-of-keywords vectors, so similarity is predictable in tests."""

    dimension = len(VOCAB) + 1

    def __init__(self):
        self.calls: List[List[str]] = []

    def vector(self, text: str) -> List[float]:
        lowered = text.lower()
        return [float(lowered.count(word)) for word in VOCAB] + [0.01]

    async def embed(self, texts):
        self.calls.append(list(texts))
        return [self.vector(t) for t in texts]


class GatedEmbedder(KeywordEmbedder):
    """Blocks inside embed() until released, to hold an indexing run open."""

    def __init__(self):
        super().__init__()
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def embed(self, texts):
        self.started.set()
        await self.release.wait()
        return await super().embed(texts)


class FlakyEmbedder(KeywordEmbedder):
    """Fails for any request that contains a chunk with the marker."""

    marker = "BOOM"

    async def embed(self, texts):
        if any(self.marker in t for t in texts):
            raise EmbeddingRequestFailed("provider rejected input")
        return await super().embed(texts)


class UnconfiguredEmbedder(KeywordEmbedder):
    @property
    def is_configured(self) -> bool:
        return False


@pytest.fixture
def cfg():
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["vector_store"]["qdrant"]["location"] = ":memory:"
    config["vector_store"]["collection_name"] = "test-codebase"
    return config


@pytest.fixture
def store():
    return QdrantVectorStore(collection_name="test-codebase", location=":memory:")


@pytest.fixture
def embedder():
    return KeywordEmbedder()


@pytest.fixture
def service(cfg, embedder, store):
    return CodebaseService(cfg, embedder=embedder, store=store)


@pytest.fixture
def make_tree(tmp_path):
    """Create files from a {relative_path: content} mapping under a new root."""
    counter = {"n": 0}

    def _make(files, name=None):
        counter["n"] += 1
        root = tmp_path / (name or f"repo{counter['n']}")
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make
