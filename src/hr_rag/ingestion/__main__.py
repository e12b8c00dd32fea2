import asyncio
import logging
import argparse
from pathlib import Path

from dotenv import load_dotenv

from ..retriever import RetrievalConfig, create_embedding_provider, create_vector_store
from .config import IngestionConfig
from .pipeline import IngestionPipeline

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


async def main(ingestion_config: IngestionConfig, retrieval_config: RetrievalConfig) -> None:
    embedder = create_embedding_provider(retrieval_config)
    store = create_vector_store(retrieval_config, embedder)
    await store.initialize()

    pipeline = IngestionPipeline(config=ingestion_config, vector_store=store)
    result = await pipeline.ingest_all()

    logger.info(f"Store now holds {store.get_document_count()} chunks")
    if result.failed:
        logger.warning(f"Failed files: {', '.join(result.failed)}")


if __name__ == "__main__":
    load_dotenv()

    parser = argparse.ArgumentParser(description="Ingest HR documents into the vector store.")
    parser.add_argument("--docs-dir", type=Path, default=None, help="Directory of .txt/.md/.pdf files")
    parser.add_argument("--store", type=str, default=None, help="Vector store backend (memory, hnsw)")
    parser.add_argument("--persist-path", type=Path, default=None, help="Directory for the persisted index")
    args = parser.parse_args()

    ingestion_config = IngestionConfig.from_env()
    retrieval_config = RetrievalConfig.from_env()
    if args.docs_dir:
        ingestion_config.docs_dir = args.docs_dir
    if args.store:
        retrieval_config.vector_store_type = args.store
    if args.persist_path:
        retrieval_config.persist_path = args.persist_path

    if retrieval_config.vector_store_type == "memory":
        logger.warning("Ingesting into the in-memory store; nothing will be kept after exit")

    asyncio.run(main(ingestion_config, retrieval_config))
