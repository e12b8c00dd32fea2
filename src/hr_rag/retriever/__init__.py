from .config import RetrievalConfig
from .embeddings import EmbeddingProvider, create_embedding_provider
from .hnsw_store import HNSWVectorStore
from .models import RetrievedChunk
from .similarity import SimilarityRetriever
from .store_factory import create_vector_store
from .vector_store import InMemoryVectorStore, VectorStore

__all__ = [
    "RetrievalConfig",
    "EmbeddingProvider",
    "create_embedding_provider",
    "VectorStore",
    "InMemoryVectorStore",
    "HNSWVectorStore",
    "create_vector_store",
    "RetrievedChunk",
    "SimilarityRetriever",
]
