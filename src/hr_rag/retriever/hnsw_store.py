"""
Persisted approximate nearest-neighbor store.

Uses a FAISS HNSW graph over L2-normalized vectors (inner product == cosine)
and a JSON document store keyed by chunk id. Layout of ``persist_path``:

    hnsw.index      FAISS index; label i is the i-th chunk ever added
    docstore.json   {"ids": [chunk ids by label], "documents": {id: chunk}}

Every add re-writes both files (append-then-flush). Files are written under a
temporary name and renamed into place.
"""

import asyncio
import json
import logging
import os
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

import faiss
import numpy as np

from ..exceptions import EmbeddingError, VectorStoreIOError
from ..ingestion.models import Chunk
from .embeddings import EmbeddingProvider
from .vector_store import VectorStore, rank_by_score

logger = logging.getLogger(__name__)

INDEX_FILENAME = "hnsw.index"
DOCSTORE_FILENAME = "docstore.json"


class HNSWVectorStore(VectorStore):
    """Approximate cosine search, persisted to disk after every add."""

    def __init__(
        self,
        embedder: EmbeddingProvider,
        persist_path: Union[str, Path],
        dimension: Optional[int] = None,
        m: int = 32,
        ef_construction: int = 200,
        ef_search: int = 64,
    ):
        """
        Args:
            embedder: Embedding capability
            persist_path: Directory holding the index and document store
            dimension: Embedding size; probed from the embedder when None
            m: HNSW graph degree
            ef_construction: Candidate list size while building the graph
            ef_search: Candidate list size while querying (raised to k if smaller)
        """
        super().__init__(embedder)
        self.persist_path = Path(persist_path)
        self.dimension = dimension
        self.m = m
        self.ef_construction = ef_construction
        self.ef_search = ef_search

        self._index: Optional[faiss.Index] = None
        self._ids: List[str] = []
        self._documents: Dict[str, Chunk] = {}
        self._write_lock = asyncio.Lock()

    @property
    def index_path(self) -> Path:
        return self.persist_path / INDEX_FILENAME

    @property
    def docstore_path(self) -> Path:
        return self.persist_path / DOCSTORE_FILENAME

    async def initialize(self) -> None:
        logger.info(f"Initializing HNSWVectorStore with persist_path: {self.persist_path}")

        if self.index_path.exists():
            logger.info(f"Loading existing HNSW index from {self.persist_path}")
            await asyncio.to_thread(self._load)
            logger.info(f"Loaded {self.get_document_count()} documents from disk")
            return

        logger.info("No existing index found. Creating new HNSW store.")
        if self.dimension is None:
            probe = await self.embedder.aembed_query("dimension probe")
            self.dimension = len(probe)
            logger.info(f"Probed embedding dimension: {self.dimension}")

        self._index = self._new_index(self.dimension)
        self._ids = []
        self._documents = {}
        await asyncio.to_thread(self._persist, self._ids.copy(), self._documents.copy())

    def _new_index(self, dimension: int) -> faiss.Index:
        index = faiss.IndexHNSWFlat(dimension, self.m, faiss.METRIC_INNER_PRODUCT)
        index.hnsw.efConstruction = self.ef_construction
        index.hnsw.efSearch = self.ef_search
        return index

    def _load(self) -> None:
        try:
            index = faiss.read_index(str(self.index_path))
            with open(self.docstore_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, RuntimeError, ValueError) as e:
            raise VectorStoreIOError(f"Failed to load persisted index from {self.persist_path}: {e}") from e

        ids = list(data.get("ids", []))
        documents = {chunk_id: Chunk.from_dict(doc) for chunk_id, doc in data.get("documents", {}).items()}

        # A crash between the two writes leaves them out of step; refuse to serve from it.
        if index.ntotal != len(ids) or set(ids) != set(documents):
            raise VectorStoreIOError(
                f"Persisted index at {self.persist_path} is inconsistent: "
                f"{index.ntotal} vectors, {len(ids)} ids, {len(documents)} documents. "
                "Delete the directory and re-ingest."
            )

        if self.dimension is not None and index.d != self.dimension:
            raise VectorStoreIOError(
                f"Persisted index dimension {index.d} does not match configured dimension {self.dimension}"
            )

        self._index = index
        self._ids = ids
        self._documents = documents
        self.dimension = index.d

    def _persist(self, ids: List[str], documents: Dict[str, Chunk]) -> None:
        """Write index and document store. Runs in a worker thread."""
        try:
            self.persist_path.mkdir(parents=True, exist_ok=True)

            tmp_index = self.index_path.with_suffix(".index.tmp")
            faiss.write_index(self._index, str(tmp_index))

            tmp_docstore = self.docstore_path.with_suffix(".json.tmp")
            payload = {"ids": ids, "documents": {cid: documents[cid].to_dict() for cid in ids}}
            with open(tmp_docstore, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False)

            os.replace(tmp_index, self.index_path)
            os.replace(tmp_docstore, self.docstore_path)
        except (OSError, RuntimeError) as e:
            raise VectorStoreIOError(f"Failed to persist index to {self.persist_path}: {e}") from e

    async def add_documents(self, chunks: Sequence[Chunk]) -> None:
        if not chunks:
            return
        if self._index is None:
            raise VectorStoreIOError("HNSWVectorStore used before initialize()")

        logger.info(f"Adding {len(chunks)} chunks to HNSW index")
        async with self._write_lock:
            vectors = await self._embed_chunks(chunks)
            if vectors.shape[1] != self._index.d:
                raise EmbeddingError(
                    f"Embedding dimension {vectors.shape[1]} does not match index dimension {self._index.d}"
                )

            # Graph mutation stays on the event loop so searches never see a partial add.
            new_ids = [uuid.uuid4().hex for _ in chunks]
            self._index.add(np.ascontiguousarray(vectors, dtype=np.float32))
            self._ids.extend(new_ids)
            self._documents.update(zip(new_ids, chunks))

            await asyncio.to_thread(self._persist, self._ids.copy(), dict(self._documents))

        logger.info(f"Saved to disk. Total document count: {self.get_document_count()}")

    async def similarity_search_with_score(self, query: str, k: int) -> List[Tuple[Chunk, float]]:
        count = self.get_document_count()
        if count == 0 or k <= 0 or self._index is None:
            return []
        k = min(k, count)

        query_vector = await self._embed_query(query)
        self._index.hnsw.efSearch = max(self.ef_search, k)
        scores, labels = self._index.search(query_vector.reshape(1, -1), k)

        hits = [(int(label), float(score)) for label, score in zip(labels[0], scores[0]) if label >= 0]
        ranked = rank_by_score([s for _, s in hits], [label for label, _ in hits], k)
        return [(self._documents[self._ids[label]], score) for label, score in ranked]

    def get_document_count(self) -> int:
        return len(self._ids)
