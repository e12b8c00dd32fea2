import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from ..exceptions import EmbeddingError, IngestionError
from ..retriever.vector_store import VectorStore
from .config import IngestionConfig
from .loaders import LoaderFactory
from .text_processing import RecursiveTextSplitter

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    """Summary of a directory ingestion."""

    total_chunks: int = 0
    files: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


class IngestionPipeline:
    """Load -> split -> store pipeline for HR documents."""

    def __init__(
        self,
        config: IngestionConfig,
        vector_store: VectorStore,
        loader_factory: Optional[LoaderFactory] = None,
        splitter: Optional[RecursiveTextSplitter] = None,
    ):
        self.config = config
        self.vector_store = vector_store
        self.loader_factory = loader_factory or LoaderFactory()
        self.splitter = splitter or RecursiveTextSplitter(
            chunk_size=config.chunk_size, chunk_overlap=config.chunk_overlap
        )

        logger.info(
            f"Initializing IngestionPipeline (chunk_size={config.chunk_size}, chunk_overlap={config.chunk_overlap})"
        )
        logger.info(f"Docs directory: {self.config.docs_dir}")

    async def _ingest_path(self, file_path: Path) -> int:
        loader = self.loader_factory.get_loader(file_path)
        documents = await asyncio.to_thread(loader.load, file_path)
        logger.info(f"Loaded {len(documents)} documents from {file_path}")

        chunks = self.splitter.split_documents(documents)
        await self.vector_store.add_documents(chunks)
        return len(chunks)

    async def ingest_all(self) -> IngestionResult:
        """
        Ingest every supported file in the documents directory.

        Files that fail to load or embed are logged and skipped. Splitter and
        vector store I/O errors are not recoverable and propagate.
        """
        logger.info("=" * 80)
        logger.info("Starting document ingestion")
        logger.info("=" * 80)

        docs_dir = Path(self.config.docs_dir)
        if not docs_dir.is_dir():
            logger.warning(f"Documents directory not found: {docs_dir}")
            return IngestionResult()

        entries = sorted(p for p in docs_dir.iterdir() if p.is_file())
        files = [p for p in entries if self.loader_factory.is_supported(p)]
        logger.info(f"Found {len(entries)} files, {len(files)} with supported extensions")

        result = IngestionResult()
        for file_path in files:
            logger.info(f"Processing file: {file_path}")
            try:
                count = await self._ingest_path(file_path)
            except (IngestionError, EmbeddingError) as e:
                logger.error(f"Failed to ingest {file_path.name}: {e}")
                result.failed.append(file_path.name)
                continue

            result.total_chunks += count
            result.files.append(file_path.name)
            logger.info(f"Ingested {file_path.name}: {count} chunks")

        logger.info("=" * 80)
        logger.info(f"Ingestion complete: {result.total_chunks} chunks from {len(result.files)} files")
        if result.failed:
            logger.warning(f"Skipped {len(result.failed)} files: {', '.join(result.failed)}")
        logger.info("=" * 80)
        return result

    async def ingest_file(self, file_path: Union[str, Path]) -> int:
        """
        Ingest a single file through the same load -> split -> store path.

        Returns:
            Number of chunks added

        Raises:
            UnsupportedFormatError, LoadError, EmbeddingError, VectorStoreIOError
        """
        file_path = Path(file_path)
        logger.info(f"Ingesting file: {file_path}")
        count = await self._ingest_path(file_path)
        logger.info(f"File ingested: {file_path.name}, chunks created: {count}")
        return count
