"""Configuration for retrieval system."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class RetrievalConfig:
    """Configuration for embeddings, vector store and retrieval behavior."""

    # Retrieval settings
    default_top_k: int = 4

    # Vector store: "memory" (exact, volatile) or "hnsw" (approximate, persisted)
    vector_store_type: str = "memory"
    persist_path: Path = Path("./vector-data")

    # HNSW graph parameters
    hnsw_m: int = 32
    hnsw_ef_construction: int = 200
    hnsw_ef_search: int = 64

    # Embeddings: "local" (HuggingFace) or "openai"
    embedding_provider: str = "local"
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    embedding_api_key: Optional[str] = None
    embedding_cache_path: Path = Path("./storage/models")
    embedding_dimension: Optional[int] = None  # probed from the model when unset
    embedding_max_attempts: int = 3

    @classmethod
    def from_env(cls) -> "RetrievalConfig":
        """Build config from environment variables."""
        dimension = os.getenv("EMBEDDING_DIMENSION")
        return cls(
            default_top_k=int(os.getenv("RAG_TOP_K", "4")),
            vector_store_type=os.getenv("VECTOR_STORE", "memory"),
            persist_path=Path(os.getenv("VECTOR_STORE_PERSIST_PATH", "./vector-data")),
            embedding_provider=os.getenv("EMBEDDING_PROVIDER", "local"),
            embedding_model=os.getenv("EMBEDDING_MODEL", "sentence-transformers/all-MiniLM-L6-v2"),
            embedding_api_key=os.getenv("EMBEDDING_API_KEY") or os.getenv("LLM_API_KEY") or None,
            embedding_cache_path=Path(os.getenv("EMBEDDING_CACHE_PATH", "./storage/models")),
            embedding_dimension=int(dimension) if dimension else None,
        )
