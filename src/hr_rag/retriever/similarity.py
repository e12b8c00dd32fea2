import logging
from typing import List, Optional

from ..ingestion.models import Chunk
from .config import RetrievalConfig
from .models import RetrievedChunk
from .vector_store import VectorStore

logger = logging.getLogger(__name__)


class SimilarityRetriever:
    """
    Top-k retriever over a vector store.

    Resolves k from the argument or the configured default and delegates to
    the store. Holds no state of its own.
    """

    def __init__(self, vector_store: VectorStore, config: Optional[RetrievalConfig] = None):
        self.vector_store = vector_store
        self.config = config or RetrievalConfig()

    def _resolve_k(self, top_k: Optional[int]) -> int:
        return top_k if top_k is not None else self.config.default_top_k

    async def retrieve(self, query: str, top_k: Optional[int] = None) -> List[Chunk]:
        """
        Retrieve the chunks most similar to the query.

        Args:
            query: Search query
            top_k: Number of chunks to return (defaults to config.default_top_k)

        Returns:
            Chunks ordered by descending similarity
        """
        k = self._resolve_k(top_k)
        logger.info(f"Retrieving chunks for query: '{query}' with top_k={k}")
        return await self.vector_store.similarity_search(query, k)

    async def retrieve_with_scores(self, query: str, top_k: Optional[int] = None) -> List[RetrievedChunk]:
        k = self._resolve_k(top_k)
        logger.info(f"Retrieving scored chunks for query: '{query}' with top_k={k}")
        results = await self.vector_store.similarity_search_with_score(query, k)
        return [RetrievedChunk(chunk=chunk, score=score) for chunk, score in results]

    def get_document_count(self) -> int:
        count = self.vector_store.get_document_count()
        logger.debug(f"Current document count: {count}")
        return count
