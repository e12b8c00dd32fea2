import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from ..exceptions import EmbeddingError
from ..ingestion.models import Chunk
from .embeddings import EmbeddingProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VectorRecord:
    """An embedded chunk as held by a store."""

    id: str
    embedding: np.ndarray
    chunk: Chunk


def normalize(vectors: np.ndarray) -> np.ndarray:
    """L2-normalize rows (or a single vector). Zero vectors are left as-is."""
    vectors = np.asarray(vectors, dtype=np.float32)
    norms = np.linalg.norm(vectors, axis=-1, keepdims=True)
    norms[norms == 0] = 1.0
    return vectors / norms


def rank_by_score(scores: Sequence[float], positions: Sequence[int], k: int) -> List[Tuple[int, float]]:
    """Top-k (position, score) pairs by descending score, ties broken by insertion position."""
    pairs = sorted(zip(positions, scores), key=lambda p: (-p[1], p[0]))
    return [(int(pos), float(score)) for pos, score in pairs[:k]]


class VectorStore(ABC):
    """
    Add/query interface over embedded chunks.

    Implementations must keep the document count equal to the number of
    chunks ever added, clamp k to the count and return [] when empty.
    """

    def __init__(self, embedder: EmbeddingProvider):
        self.embedder = embedder

    @abstractmethod
    async def initialize(self) -> None:
        pass

    @abstractmethod
    async def add_documents(self, chunks: Sequence[Chunk]) -> None:
        pass

    @abstractmethod
    async def similarity_search_with_score(self, query: str, k: int) -> List[Tuple[Chunk, float]]:
        """Chunks most similar to the query with their cosine similarity, best first."""
        pass

    @abstractmethod
    def get_document_count(self) -> int:
        pass

    async def similarity_search(self, query: str, k: int) -> List[Chunk]:
        results = await self.similarity_search_with_score(query, k)
        return [chunk for chunk, _ in results]

    async def _embed_chunks(self, chunks: Sequence[Chunk]) -> np.ndarray:
        embeddings = await self.embedder.aembed_documents([chunk.content for chunk in chunks])
        matrix = np.asarray(embeddings, dtype=np.float32)
        if matrix.ndim != 2 or matrix.shape[0] != len(chunks):
            raise EmbeddingError(f"Unexpected embedding shape {matrix.shape} for {len(chunks)} chunks")
        return normalize(matrix)

    async def _embed_query(self, query: str) -> np.ndarray:
        return normalize(np.asarray(await self.embedder.aembed_query(query), dtype=np.float32))


class InMemoryVectorStore(VectorStore):
    """
    Exact cosine search over an in-memory matrix.

    Brute force, O(n) per query. Nothing is persisted; the store is empty at
    every process start.
    """

    def __init__(self, embedder: EmbeddingProvider):
        super().__init__(embedder)
        self._records: List[VectorRecord] = []
        self._matrix: np.ndarray = np.zeros((0, 0), dtype=np.float32)
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        logger.info("Initializing InMemoryVectorStore")
        self._records = []
        self._matrix = np.zeros((0, 0), dtype=np.float32)

    async def add_documents(self, chunks: Sequence[Chunk]) -> None:
        if not chunks:
            return

        logger.info(f"Adding {len(chunks)} chunks to InMemoryVectorStore")
        async with self._lock:
            vectors = await self._embed_chunks(chunks)
            if self._records and vectors.shape[1] != self._matrix.shape[1]:
                raise EmbeddingError(
                    f"Embedding dimension {vectors.shape[1]} does not match store dimension {self._matrix.shape[1]}"
                )

            records = [
                VectorRecord(id=uuid.uuid4().hex, embedding=vector, chunk=chunk)
                for chunk, vector in zip(chunks, vectors)
            ]
            self._matrix = vectors if not self._records else np.vstack([self._matrix, vectors])
            self._records.extend(records)

        logger.info(f"Total document count: {self.get_document_count()}")

    async def similarity_search_with_score(self, query: str, k: int) -> List[Tuple[Chunk, float]]:
        count = self.get_document_count()
        if count == 0 or k <= 0:
            return []
        k = min(k, count)

        query_vector = await self._embed_query(query)
        records, matrix = self._records, self._matrix
        scores = matrix @ query_vector
        ranked = rank_by_score(scores.tolist(), range(len(records)), k)
        return [(records[pos].chunk, score) for pos, score in ranked]

    def get_document_count(self) -> int:
        return len(self._records)
