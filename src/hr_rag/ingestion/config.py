import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class IngestionConfig:
    """Configuration for ingestion pipeline."""

    docs_dir: Path = Path("./documents")
    uploads_dir: Path = Path("./storage/uploads")
    chunk_size: int = 1000
    chunk_overlap: int = 200

    @classmethod
    def from_env(cls) -> "IngestionConfig":
        """Build config from RAG_* environment variables."""
        return cls(
            docs_dir=Path(os.getenv("RAG_DOCUMENTS_PATH", "./documents")),
            uploads_dir=Path(os.getenv("RAG_UPLOADS_PATH", "./storage/uploads")),
            chunk_size=int(os.getenv("RAG_CHUNK_SIZE", "1000")),
            chunk_overlap=int(os.getenv("RAG_CHUNK_OVERLAP", "200")),
        )
