"""
Tests for the exact and HNSW vector stores.
"""

import asyncio
import json

import faiss
import pytest

from hr_rag.exceptions import VectorStoreIOError
from hr_rag.ingestion.models import Chunk
from hr_rag.retriever import HNSWVectorStore, InMemoryVectorStore, RetrievalConfig, create_vector_store
from hr_rag.retriever.hnsw_store import DOCSTORE_FILENAME, INDEX_FILENAME
from hr_rag.retriever.vector_store import rank_by_score


class TestRankByScore:
    def test_ties_broken_by_insertion_order(self):
        ranked = rank_by_score([0.5, 0.9, 0.5, 0.9], [0, 1, 2, 3], k=3)
        assert ranked == [(1, 0.9), (3, 0.9), (0, 0.5)]


class TestInMemoryVectorStore:
    """Tests for InMemoryVectorStore."""

    async def test_empty_store_returns_nothing(self, memory_store):
        assert await memory_store.similarity_search("vacation", 4) == []
        assert memory_store.get_document_count() == 0

    async def test_count_increases_by_batch_size(self, memory_store, policy_chunks):
        await memory_store.add_documents(policy_chunks[:2])
        assert memory_store.get_document_count() == 2

        await memory_store.add_documents(policy_chunks[2:])
        assert memory_store.get_document_count() == 5

    async def test_results_ranked_and_clamped(self, memory_store, policy_chunks):
        await memory_store.add_documents(policy_chunks)

        results = await memory_store.similarity_search_with_score("vacation days per year", 10)

        assert len(results) == 5
        scores = [score for _, score in results]
        assert scores == sorted(scores, reverse=True)
        assert results[0][0].source == "vacation_policy.md"

    async def test_search_is_deterministic(self, memory_store, policy_chunks):
        await memory_store.add_documents(policy_chunks)

        first = await memory_store.similarity_search("expenses receipts", 3)
        second = await memory_store.similarity_search("expenses receipts", 3)

        assert first == second

    async def test_duplicate_chunks_keep_insertion_order(self, memory_store):
        chunks = [Chunk(content="same text", metadata={"source": f"doc{i}.txt"}) for i in range(3)]
        await memory_store.add_documents(chunks)

        results = await memory_store.similarity_search("same text", 3)

        assert [c.source for c in results] == ["doc0.txt", "doc1.txt", "doc2.txt"]

    async def test_non_positive_k(self, memory_store, policy_chunks):
        await memory_store.add_documents(policy_chunks)
        assert await memory_store.similarity_search("vacation", 0) == []


class TestHNSWVectorStore:
    """Tests for HNSWVectorStore."""

    @pytest.fixture
    async def hnsw_store(self, embedder, tmp_path):
        store = HNSWVectorStore(embedder, persist_path=tmp_path / "vectors")
        await store.initialize()
        return store

    async def test_initialize_creates_files(self, hnsw_store, tmp_path):
        assert (tmp_path / "vectors" / INDEX_FILENAME).exists()
        assert (tmp_path / "vectors" / DOCSTORE_FILENAME).exists()
        assert hnsw_store.get_document_count() == 0
        assert hnsw_store.dimension == 64
        assert await hnsw_store.similarity_search("vacation", 3) == []

    async def test_add_and_search(self, hnsw_store, policy_chunks):
        await hnsw_store.add_documents(policy_chunks)

        results = await hnsw_store.similarity_search_with_score(policy_chunks[3].content, 2)

        assert hnsw_store.get_document_count() == 5
        assert len(results) == 2
        assert results[0][0] == policy_chunks[3]
        assert results[0][1] >= results[1][1]

    async def test_reload_restores_documents(self, hnsw_store, embedder, policy_chunks, tmp_path):
        """A new store over the same directory sees every persisted chunk."""
        await hnsw_store.add_documents(policy_chunks[:3])
        await hnsw_store.add_documents(policy_chunks[3:])

        reloaded = HNSWVectorStore(embedder, persist_path=tmp_path / "vectors")
        await reloaded.initialize()

        assert reloaded.get_document_count() == 5
        results = await reloaded.similarity_search(policy_chunks[2].content, 1)
        assert results == [policy_chunks[2]]

    async def test_inconsistent_persisted_state_fails_fast(self, hnsw_store, embedder, policy_chunks, tmp_path):
        """An index and document store that disagree are refused."""
        await hnsw_store.add_documents(policy_chunks)
        docstore_path = tmp_path / "vectors" / DOCSTORE_FILENAME
        data = json.loads(docstore_path.read_text(encoding="utf-8"))
        dropped = data["ids"].pop()
        del data["documents"][dropped]
        docstore_path.write_text(json.dumps(data), encoding="utf-8")

        reloaded = HNSWVectorStore(embedder, persist_path=tmp_path / "vectors")
        with pytest.raises(VectorStoreIOError):
            await reloaded.initialize()

    async def test_concurrent_adds_are_serialized(self, hnsw_store, embedder, tmp_path):
        """Parallel batches all land in the index, the ids and the document store."""
        batches = [
            [Chunk(content=f"Policy {b} clause {i}.", metadata={"source": f"p{b}.md"}) for i in range(b + 2)]
            for b in range(4)
        ]

        await asyncio.gather(*(hnsw_store.add_documents(batch) for batch in batches))

        expected = sum(len(batch) for batch in batches)
        assert hnsw_store.get_document_count() == expected

        data = json.loads((tmp_path / "vectors" / DOCSTORE_FILENAME).read_text(encoding="utf-8"))
        assert len(data["ids"]) == expected
        assert set(data["ids"]) == set(data["documents"])
        assert faiss.read_index(str(tmp_path / "vectors" / INDEX_FILENAME)).ntotal == expected

        reloaded = HNSWVectorStore(embedder, persist_path=tmp_path / "vectors")
        await reloaded.initialize()
        assert reloaded.get_document_count() == expected


class TestStoreFactory:
    def test_known_backends(self, embedder, tmp_path):
        assert isinstance(create_vector_store(RetrievalConfig(vector_store_type="memory"), embedder), InMemoryVectorStore)
        config = RetrievalConfig(vector_store_type="hnswlib", persist_path=tmp_path)
        assert isinstance(create_vector_store(config, embedder), HNSWVectorStore)

    def test_unknown_backend(self, embedder):
        with pytest.raises(ValueError):
            create_vector_store(RetrievalConfig(vector_store_type="pinecone"), embedder)
