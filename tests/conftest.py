"""
Shared fixtures: deterministic embeddings, an empty exact store and sample policy chunks.
"""

import pytest

from hr_rag.ingestion.models import Chunk
from hr_rag.retriever import EmbeddingProvider, InMemoryVectorStore
from tests.fakes import FakeEmbedding


@pytest.fixture
def embedder():
    return EmbeddingProvider(FakeEmbedding(), max_attempts=1)


@pytest.fixture
async def memory_store(embedder):
    store = InMemoryVectorStore(embedder)
    await store.initialize()
    return store


@pytest.fixture
def policy_chunks():
    """Five one-topic chunks from three policy documents."""
    texts = [
        ("vacation_policy.md", "Employees receive 25 vacation days per year. Unused vacation days expire in March."),
        ("vacation_policy.md", "Vacation requests must be approved by the manager two weeks in advance."),
        ("remote_work.md", "Remote work is allowed up to three days per week with manager approval."),
        ("expenses.md", "Travel expenses are reimbursed within 30 days when receipts are submitted."),
        ("expenses.md", "Meal expenses during business travel are capped at 50 USD per day."),
    ]
    return [
        Chunk(content=text, metadata={"source": source, "format": "markdown", "chunk_index": i, "start_index": 0})
        for i, (source, text) in enumerate(texts)
    ]
