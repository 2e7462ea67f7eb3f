"""Tests for the indexing pipeline against an in-process Qdrant."""

import asyncio
import copy
import logging

import pytest

from codeask.errors import (
    AlreadyIndexing,
    EmbeddingUnavailable,
    InvalidArgument,
    VectorStoreError,
)
from codeask.indexing import DefaultIndexer
from codeask.storage import QdrantVectorStore

from conftest import FlakyEmbedder, GatedEmbedder, UnconfiguredEmbedder


def _sample(length):
    return "".join(chr(97 + i % 26) for i in range(length))


async def test_index_reference_file(make_tree, embedder, store, cfg):
    root = make_tree({"big.txt": _sample(2500)})
    indexer = DefaultIndexer(embedder, store, cfg)

    result = await indexer.index_codebase(str(root))

    assert result.total_chunks == 3
    assert result.processed_files == 1
    assert result.failed_chunks == 0
    assert str(root) in indexer.indexed_roots
    assert await store.count(str(root), "big.txt") == 3

    hits = await store.search(embedder.vector(""), limit=10, codebase_filter=str(root))
    assert sorted((h.start_line, h.end_line) for h in hits) == [(1, 21), (17, 37), (33, 51)]
    assert {h.path for h in hits} == {"big.txt"}


async def test_reindex_is_idempotent(make_tree, embedder, store, cfg):
    root = make_tree({"big.txt": _sample(2500), "src/auth.py": "def login(): pass\n"})
    indexer = DefaultIndexer(embedder, store, cfg)

    first = await indexer.index_codebase(str(root))
    count_after_first = await store.count(str(root))
    second = await indexer.index_codebase(str(root))

    assert first.total_chunks == second.total_chunks == 4
    assert await store.count(str(root)) == count_after_first == 4


async def test_payload_uses_relative_posix_path(make_tree, embedder, store, cfg):
    text = "def login(user, password):\n    return auth(user, password)\n"
    root = make_tree({"src/auth.py": text})
    await DefaultIndexer(embedder, store, cfg).index_codebase(str(root))

    hits = await store.search(embedder.vector("login"), limit=5, codebase_filter=str(root))
    assert len(hits) == 1
    assert hits[0].path == "src/auth.py"
    assert hits[0].text == text
    assert hits[0].codebase_path == str(root)


async def test_root_is_normalized(make_tree, embedder, store, cfg, monkeypatch):
    root = make_tree({"a.py": "x = 1\n"})
    monkeypatch.chdir(root.parent)
    indexer = DefaultIndexer(embedder, store, cfg)

    await indexer.index_codebase(f"./{root.name}/")

    assert indexer.indexed_roots == {str(root)}


async def test_oversized_and_binary_files_are_skipped(make_tree, embedder, store, cfg, caplog):
    cfg = copy.deepcopy(cfg)
    cfg["indexing"]["max_file_size"] = 100
    root = make_tree({"small.py": "print('ok')\n", "huge.py": "x" * 500})
    (root / "blob.json").write_bytes(b"{\x00\x01}")

    with caplog.at_level(logging.WARNING):
        result = await DefaultIndexer(embedder, store, cfg).index_codebase(str(root))

    assert result.total_files == 3
    assert result.processed_files == 3
    assert result.skipped_files == 2
    assert result.total_chunks == 1
    assert "Skipping large file" in caplog.text
    assert await store.count(str(root)) == 1


async def test_empty_file_yields_no_chunks(make_tree, embedder, store, cfg):
    root = make_tree({"empty.py": ""})
    result = await DefaultIndexer(embedder, store, cfg).index_codebase(str(root))
    assert result.processed_files == 1
    assert result.total_chunks == 0


async def test_failed_chunks_are_counted(make_tree, store, cfg):
    cfg = copy.deepcopy(cfg)
    cfg["indexing"].update(chunk_size=50, chunk_overlap=0)
    embedder = FlakyEmbedder()
    root = make_tree({"mixed.py": "x" * 50 + "BOOM" + "y" * 46, "fine.py": "login\n"})
    indexer = DefaultIndexer(embedder, store, cfg)

    result = await indexer.index_codebase(str(root))

    assert result.total_chunks == 2
    assert result.failed_chunks == 1
    assert str(root) in indexer.indexed_roots
    assert await store.count(str(root), "mixed.py") == 1


async def test_single_flight(make_tree, store, cfg):
    embedder = GatedEmbedder()
    root_a = make_tree({"a.py": "login\n"})
    root_b = make_tree({"b.py": "query\n"})
    indexer = DefaultIndexer(embedder, store, cfg)

    task = asyncio.create_task(indexer.index_codebase(str(root_a)))
    await asyncio.wait_for(embedder.started.wait(), timeout=5)

    assert indexer.is_indexing
    with pytest.raises(AlreadyIndexing):
        await indexer.index_codebase(str(root_b))
    with pytest.raises(AlreadyIndexing):
        await indexer.index_codebase(str(root_a))

    embedder.release.set()
    await task

    assert not indexer.is_indexing
    result = await indexer.index_codebase(str(root_b))
    assert result.total_chunks == 1
    assert indexer.indexed_roots == {str(root_a), str(root_b)}


class BrokenOnceStore(QdrantVectorStore):

    def __init__(self):
        super().__init__(collection_name="broken", location=":memory:")
        self.failures = 1

    async def ensure_collection(self, vector_dim):
        if self.failures:
            self.failures -= 1
            raise VectorStoreError("connection refused")
        await super().ensure_collection(vector_dim)


async def test_busy_flag_released_after_failure(make_tree, embedder, cfg):
    root = make_tree({"a.py": "login\n"})
    indexer = DefaultIndexer(embedder, BrokenOnceStore(), cfg)

    with pytest.raises(VectorStoreError):
        await indexer.index_codebase(str(root))

    assert not indexer.is_indexing
    assert str(root) not in indexer.indexed_roots
    result = await indexer.index_codebase(str(root))
    assert result.total_chunks == 1


@pytest.mark.parametrize("root", ["", "   ", None])
async def test_empty_root_is_rejected(embedder, store, cfg, root):
    with pytest.raises(InvalidArgument):
        await DefaultIndexer(embedder, store, cfg).index_codebase(root)


async def test_missing_root_is_rejected(tmp_path, embedder, store, cfg):
    indexer = DefaultIndexer(embedder, store, cfg)
    with pytest.raises(InvalidArgument):
        await indexer.index_codebase(str(tmp_path / "does-not-exist"))
    assert not indexer.is_indexing


async def test_unconfigured_embedder_is_rejected(make_tree, store, cfg):
    root = make_tree({"a.py": "x"})
    indexer = DefaultIndexer(UnconfiguredEmbedder(), store, cfg)
    with pytest.raises(EmbeddingUnavailable):
        await indexer.index_codebase(str(root))
    assert not indexer.is_indexing


async def test_clear_removes_points_and_root(make_tree, embedder, store, cfg):
    root_a = make_tree({"a.py": "login\n"})
    root_b = make_tree({"a.py": "login\n"})
    indexer = DefaultIndexer(embedder, store, cfg)
    await indexer.index_codebase(str(root_a))
    await indexer.index_codebase(str(root_b))

    await indexer.clear(str(root_a))

    assert indexer.indexed_roots == {str(root_b)}
    assert await store.count(str(root_a)) == 0
    assert await store.count(str(root_b)) == 1



async def test_clear_before_any_index_is_a_noop(tmp_path, embedder, store, cfg):
    indexer = DefaultIndexer(embedder, store, cfg)
    await indexer.clear(str(tmp_path / "never-indexed"))
    assert indexer.indexed_roots == set()


async def test_file_embedding_is_split_into_requests(make_tree, embedder, store, cfg):
    cfg = copy.deepcopy(cfg)
    cfg["indexing"].update(chunk_size=50, chunk_overlap=0, embedding_batch_size=2)
    root = make_tree({"long.txt": _sample(250)})

    result = await DefaultIndexer(embedder, store, cfg).index_codebase(str(root))

    assert result.total_chunks == 5
    assert [len(call) for call in embedder.calls] == [2, 2, 1]
    assert await store.count(str(root), "long.txt") == 5
