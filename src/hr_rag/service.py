"""
HR Assistant service.

Wires the ingestion pipeline, vector store, retriever and chat agent together
and exposes the boundary operations used by the UI: chat, search, file upload
ingestion and session clearing.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from .agent import AgentConfig, ChatModelProvider, HRChatAgent, SessionMemoryManager, ToolRegistry
from .exceptions import UnsupportedFormatError
from .ingestion import IngestionConfig, LoaderFactory
from .ingestion.pipeline import IngestionPipeline, IngestionResult
from .retriever import (
    EmbeddingProvider,
    RetrievalConfig,
    SimilarityRetriever,
    VectorStore,
    create_embedding_provider,
    create_vector_store,
)
from .schemas import ChatRequest, ChatResponse, IngestFileResponse, SearchRequest, SearchResponse, SearchResult

logger = logging.getLogger(__name__)


class HRAssistantService:
    """
    Composition root of the assistant.

    Usage:
        service = HRAssistantService.from_env()
        await service.startup()
        response = await service.chat(ChatRequest(message="What is the remote work policy?"))
    """

    def __init__(
        self,
        ingestion_config: Optional[IngestionConfig] = None,
        retrieval_config: Optional[RetrievalConfig] = None,
        agent_config: Optional[AgentConfig] = None,
        embedder: Optional[EmbeddingProvider] = None,
        chat_model_provider: Optional[ChatModelProvider] = None,
        vector_store: Optional[VectorStore] = None,
    ):
        self.ingestion_config = ingestion_config or IngestionConfig()
        self.retrieval_config = retrieval_config or RetrievalConfig()
        self.agent_config = agent_config or AgentConfig()

        if vector_store is None:
            embedder = embedder or create_embedding_provider(self.retrieval_config)
            vector_store = create_vector_store(self.retrieval_config, embedder)
        self.vector_store = vector_store

        self.loader_factory = LoaderFactory()
        self.pipeline = IngestionPipeline(self.ingestion_config, self.vector_store, loader_factory=self.loader_factory)
        self.retriever = SimilarityRetriever(self.vector_store, self.retrieval_config)
        self.sessions = SessionMemoryManager(capacity=self.agent_config.session_window)
        self.agent = HRChatAgent(
            retriever=self.retriever,
            tools=ToolRegistry(),
            llm_provider=chat_model_provider,
            sessions=self.sessions,
            config=self.agent_config,
        )
        self.ready = False

    @classmethod
    def from_env(cls) -> "HRAssistantService":
        return cls(
            ingestion_config=IngestionConfig.from_env(),
            retrieval_config=RetrievalConfig.from_env(),
            agent_config=AgentConfig.from_env(),
        )

    async def startup(self) -> IngestionResult:
        """Initialize the store and ingest the documents directory. Must finish before serving requests."""
        await self.vector_store.initialize()
        result = await self.pipeline.ingest_all()
        self.ready = True
        logger.info(f"HR Assistant ready with {self.vector_store.get_document_count()} chunks indexed")
        return result

    async def chat(self, request: ChatRequest) -> ChatResponse:
        return await self.agent.chat(request.message, session_id=request.session_id)

    async def search(self, request: SearchRequest) -> SearchResponse:
        """Top-k chunks for the query with 200-character previews and scores."""
        hits = await self.retriever.retrieve_with_scores(request.query, top_k=request.k)
        return SearchResponse(
            query=request.query,
            results=[SearchResult(content=hit.preview(200), source=hit.source, score=hit.score) for hit in hits],
            total_documents=self.retriever.get_document_count(),
        )

    async def ingest_upload(self, filename: str, content: bytes) -> IngestFileResponse:
        """
        Save an uploaded file into the uploads directory and ingest it.

        Raises:
            UnsupportedFormatError: If the extension has no loader (nothing is saved)
            LoadError, EmbeddingError, VectorStoreIOError: From ingestion
        """
        name = Path(filename).name
        if not name or not self.loader_factory.is_supported(name):
            raise UnsupportedFormatError(
                f"Unsupported file type: {filename}. Supported: {', '.join(self.loader_factory.supported_extensions())}",
                filename,
            )

        uploads_dir = Path(self.ingestion_config.uploads_dir)
        target = uploads_dir / name
        await asyncio.to_thread(uploads_dir.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(target.write_bytes, content)
        logger.info(f"Saved upload {name} ({len(content)} bytes) to {target}")

        chunks = await self.pipeline.ingest_file(target)
        return IngestFileResponse(filename=name, chunks=chunks)

    def clear_session(self, session_id: str) -> bool:
        return self.sessions.clear(session_id)
