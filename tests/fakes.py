"""
Deterministic stand-ins for the embedding and chat model capabilities.
"""

import re
import zlib
from typing import Any, List, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from llama_index.core.base.embeddings.base import BaseEmbedding
from pydantic import Field

from hr_rag.agent.config import AgentConfig
from hr_rag.agent.llm import ChatModelProvider

DIMENSION = 64


class FakeEmbedding(BaseEmbedding):
    """Bag-of-words embedding: each lowercase word is hashed into one of 64 buckets."""

    model_name: str = "fake-bow"

    def _embed(self, text: str) -> List[float]:
        vector = [0.0] * DIMENSION
        for word in re.findall(r"\w+", text.lower()):
            vector[zlib.crc32(word.encode("utf-8")) % DIMENSION] += 1.0
        return vector

    def _get_query_embedding(self, query: str) -> List[float]:
        return self._embed(query)

    async def _aget_query_embedding(self, query: str) -> List[float]:
        return self._embed(query)

    def _get_text_embedding(self, text: str) -> List[float]:
        return self._embed(text)


class FakeChatModel(BaseChatModel):
    """Returns scripted responses in order; an Exception in the script is raised instead."""

    responses: List[Any] = Field(default_factory=list)
    received: List[List[BaseMessage]] = Field(default_factory=list)

    @property
    def _llm_type(self) -> str:
        return "fake-scripted"

    def bind_tools(self, tools, **kwargs):
        return self

    def _generate(
        self,
        messages: List[BaseMessage],
        stop: Optional[List[str]] = None,
        run_manager: Any = None,
        **kwargs: Any,
    ) -> ChatResult:
        self.received.append(list(messages))
        if not self.responses:
            raise RuntimeError("FakeChatModel ran out of responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return ChatResult(generations=[ChatGeneration(message=response)])


class StaticChatProvider(ChatModelProvider):
    """Hands out a prepared chat model."""

    def __init__(self, model: BaseChatModel, config: Optional[AgentConfig] = None):
        super().__init__(config or AgentConfig())
        self.model = model

    def create_chat_model(self) -> BaseChatModel:
        return self.model


def tool_call(name: str, args: dict, call_id: str = "call_1") -> AIMessage:
    return AIMessage(content="", tool_calls=[{"name": name, "args": args, "id": call_id}])
