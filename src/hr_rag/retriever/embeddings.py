"""
Embedding capability.

Wraps a llama_index embedding model behind a small async interface and maps
the configured provider name to a model constructor.
"""

import logging
from typing import Callable, Dict, List

from llama_index.core.base.embeddings.base import BaseEmbedding
from llama_index.embeddings.huggingface import HuggingFaceEmbedding
from llama_index.embeddings.openai import OpenAIEmbedding
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from ..exceptions import EmbeddingError
from .config import RetrievalConfig

logger = logging.getLogger(__name__)


class EmbeddingProvider:
    """Async text -> vector interface over a llama_index embedding model."""

    def __init__(self, model: BaseEmbedding, max_attempts: int = 3):
        """
        Args:
            model: Any llama_index embedding model
            max_attempts: Attempts per call before giving up (exponential backoff)
        """
        self.model = model
        self.max_attempts = max_attempts

    @property
    def model_name(self) -> str:
        return getattr(self.model, "model_name", type(self.model).__name__)

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        )

    async def aembed_documents(self, texts: List[str]) -> List[List[float]]:
        """Embed a batch of texts. One vector per input, same order."""
        if not texts:
            return []
        try:
            async for attempt in self._retrying():
                with attempt:
                    vectors = await self.model.aget_text_embedding_batch(texts)
        except Exception as e:
            raise EmbeddingError(f"Embedding {len(texts)} texts with {self.model_name} failed: {e}") from e

        if len(vectors) != len(texts):
            raise EmbeddingError(f"Expected {len(texts)} embeddings, got {len(vectors)}")
        return [list(v) for v in vectors]

    async def aembed_query(self, text: str) -> List[float]:
        try:
            async for attempt in self._retrying():
                with attempt:
                    vector = await self.model.aget_query_embedding(text)
        except Exception as e:
            raise EmbeddingError(f"Embedding query with {self.model_name} failed: {e}") from e
        return list(vector)


def _local_model(config: RetrievalConfig) -> BaseEmbedding:
    config.embedding_cache_path.mkdir(parents=True, exist_ok=True)
    logger.info(f"Using local embeddings with model: {config.embedding_model} (cache: {config.embedding_cache_path})")
    return HuggingFaceEmbedding(model_name=config.embedding_model, cache_folder=str(config.embedding_cache_path))


def _openai_model(config: RetrievalConfig) -> BaseEmbedding:
    logger.info(f"Using OpenAI embeddings with model: {config.embedding_model}")
    return OpenAIEmbedding(model=config.embedding_model, api_key=config.embedding_api_key)


EMBEDDING_PROVIDERS: Dict[str, Callable[[RetrievalConfig], BaseEmbedding]] = {
    "local": _local_model,
    "openai": _openai_model,
}


def create_embedding_provider(config: RetrievalConfig) -> EmbeddingProvider:
    """Build the embedding provider named in the config."""
    factory = EMBEDDING_PROVIDERS.get(config.embedding_provider.lower())
    if factory is None:
        raise ValueError(
            f"Unknown embedding provider: {config.embedding_provider}. "
            f"Must be one of: {', '.join(sorted(EMBEDDING_PROVIDERS))}"
        )
    return EmbeddingProvider(factory(config), max_attempts=config.embedding_max_attempts)
