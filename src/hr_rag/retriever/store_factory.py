"""
Vector store factory.

Selects the backend from ``RetrievalConfig.vector_store_type``:
"memory" for exact in-process search, "hnsw" (or "hnswlib") for the
persisted approximate index.
"""

import logging
from typing import Callable, Dict

from .config import RetrievalConfig
from .embeddings import EmbeddingProvider
from .hnsw_store import HNSWVectorStore
from .vector_store import InMemoryVectorStore, VectorStore

logger = logging.getLogger(__name__)


def _memory_store(config: RetrievalConfig, embedder: EmbeddingProvider) -> VectorStore:
    return InMemoryVectorStore(embedder)


def _hnsw_store(config: RetrievalConfig, embedder: EmbeddingProvider) -> VectorStore:
    return HNSWVectorStore(
        embedder,
        persist_path=config.persist_path,
        dimension=config.embedding_dimension,
        m=config.hnsw_m,
        ef_construction=config.hnsw_ef_construction,
        ef_search=config.hnsw_ef_search,
    )


VECTOR_STORES: Dict[str, Callable[[RetrievalConfig, EmbeddingProvider], VectorStore]] = {
    "memory": _memory_store,
    "hnsw": _hnsw_store,
    "hnswlib": _hnsw_store,
}


def create_vector_store(config: RetrievalConfig, embedder: EmbeddingProvider) -> VectorStore:
    """
    Build the configured vector store. The caller must await ``initialize()``.

    Raises:
        ValueError: If the store type is not registered
    """
    store_type = config.vector_store_type.lower()
    factory = VECTOR_STORES.get(store_type)
    if factory is None:
        raise ValueError(
            f"Unknown vector store type: {config.vector_store_type}. "
            f"Must be one of: {', '.join(sorted(VECTOR_STORES))}"
        )

    logger.info(f"Creating {store_type} vector store")
    return factory(config, embedder)
