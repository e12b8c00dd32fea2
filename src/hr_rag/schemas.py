"""
Request and response models of the assistant's boundary operations.

Fields are snake_case in Python and camelCase on the wire
(``model_dump(by_alias=True)``); either spelling is accepted on input.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatRequest(CamelModel):
    message: str = Field(..., description="User question")
    session_id: Optional[str] = Field(None, description="Conversation to continue")

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be empty")
        return v


class ChatResponse(CamelModel):
    answer: str
    session_id: str
    sources: List[str] = Field(default_factory=list)
    tools_used: List[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class SearchRequest(CamelModel):
    query: str
    k: Optional[int] = Field(None, ge=1, description="Number of results (defaults to the configured top-k)")


class SearchResult(CamelModel):
    content: str = Field(..., description="Preview of the chunk text")
    source: str
    score: float


class SearchResponse(CamelModel):
    query: str
    results: List[SearchResult]
    total_documents: int


class IngestFileResponse(CamelModel):
    filename: str
    chunks: int
