"""
Tests for the HR Assistant service boundary.
"""

import pytest
from langchain_core.messages import AIMessage
from pydantic import ValidationError

from hr_rag.agent import AgentConfig
from hr_rag.exceptions import UnsupportedFormatError
from hr_rag.ingestion import IngestionConfig
from hr_rag.retriever import InMemoryVectorStore, RetrievalConfig
from hr_rag.schemas import ChatRequest, ChatResponse, SearchRequest
from hr_rag.service import HRAssistantService
from tests.fakes import FakeChatModel, StaticChatProvider

POLICIES = {
    "vacation.md": "Employees receive 25 vacation days per year.",
    "remote.md": "Remote work is allowed up to three days per week.",
    "expenses.md": "Travel expenses are reimbursed within 30 days.",
    "benefits.txt": "Health insurance covers the employee and family.",
    "conduct.txt": "Treat colleagues with respect at all times.",
}


@pytest.fixture
def chat_model():
    return FakeChatModel(responses=[AIMessage(content="You have 25 vacation days per year.")])


@pytest.fixture
async def service(tmp_path, embedder, chat_model):
    docs = tmp_path / "documents"
    docs.mkdir()
    for name, text in POLICIES.items():
        (docs / name).write_text(text, encoding="utf-8")

    service = HRAssistantService(
        ingestion_config=IngestionConfig(docs_dir=docs, uploads_dir=tmp_path / "uploads"),
        retrieval_config=RetrievalConfig(default_top_k=4),
        agent_config=AgentConfig(),
        vector_store=InMemoryVectorStore(embedder),
        chat_model_provider=StaticChatProvider(chat_model),
    )
    result = await service.startup()
    assert result.total_chunks == 5
    return service


class TestHRAssistantService:
    """Tests for HRAssistantService."""

    async def test_startup_ingests_documents(self, service):
        assert service.ready
        assert service.vector_store.get_document_count() == 5

    async def test_search_returns_k_results(self, service):
        """A 5-chunk store queried with k=2 returns two results by descending score."""
        response = await service.search(SearchRequest(query="vacation days", k=2))

        assert response.query == "vacation days"
        assert len(response.results) == 2
        assert response.results[0].score >= response.results[1].score
        assert response.results[0].source.endswith("vacation.md")
        assert response.total_documents == 5

    async def test_search_response_is_camel_case(self, service):
        response = await service.search(SearchRequest(query="remote"))
        payload = response.model_dump(by_alias=True)

        assert payload["totalDocuments"] == 5
        assert len(payload["results"]) == 4

    async def test_chat(self, service):
        response = await service.chat(ChatRequest(message="How many vacation days do I get?"))

        assert isinstance(response, ChatResponse)
        assert response.answer == "You have 25 vacation days per year."
        assert response.sources
        payload = response.model_dump(by_alias=True)
        assert {"answer", "sessionId", "sources", "toolsUsed", "timestamp"} <= set(payload)

    async def test_ingest_upload(self, service, tmp_path):
        response = await service.ingest_upload("../../parking.md", b"# Parking\n\nThe garage opens at 7am.")

        assert response.filename == "parking.md"
        assert response.chunks == 1
        assert (tmp_path / "uploads" / "parking.md").exists()
        assert service.vector_store.get_document_count() == 6

    async def test_unsupported_upload_is_not_saved(self, service, tmp_path):
        with pytest.raises(UnsupportedFormatError):
            await service.ingest_upload("payroll.xlsx", b"PK")

        assert not (tmp_path / "uploads" / "payroll.xlsx").exists()

    async def test_clear_session(self, service):
        response = await service.chat(ChatRequest(message="Hi", sessionId="s-1"))

        assert response.session_id == "s-1"
        assert service.clear_session("s-1") is True
        assert service.clear_session("s-1") is False


class TestSchemas:
    def test_empty_message_rejected(self):
        with pytest.raises(ValidationError):
            ChatRequest(message="   ")

    def test_accepts_camel_case(self):
        request = ChatRequest.model_validate({"message": "hi", "sessionId": "abc"})
        assert request.session_id == "abc"

    def test_search_k_must_be_positive(self):
        with pytest.raises(ValidationError):
            SearchRequest(query="x", k=0)
