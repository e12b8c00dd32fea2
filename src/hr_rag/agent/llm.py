"""
Chat model providers.

A provider turns AgentConfig into a LangChain chat model that supports tool
binding. Providers are registered statically by name.
"""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, Type

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_openai import ChatOpenAI

from ..exceptions import AuthConfigError
from .config import AgentConfig

logger = logging.getLogger(__name__)

AUTH_ERROR_NAMES = {"AuthenticationError", "PermissionDeniedError"}
TRANSIENT_ERROR_NAMES = {"RateLimitError", "APIConnectionError", "APITimeoutError", "InternalServerError"}


class ChatModelProvider(ABC):
    """Creates the chat model used by the agent loop."""

    def __init__(self, config: AgentConfig):
        self.config = config

    @abstractmethod
    def create_chat_model(self) -> BaseChatModel:
        """Raises AuthConfigError when no credential is available."""

    def _api_key(self, env_var: str) -> str:
        api_key = self.config.api_key or os.getenv(env_var, "")
        if not api_key:
            raise AuthConfigError(f"No API key configured for {self.config.llm_provider} (set LLM_API_KEY)")
        return api_key


class OpenAIChatProvider(ChatModelProvider):
    def create_chat_model(self) -> BaseChatModel:
        return ChatOpenAI(
            model=self.config.model_name,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
            api_key=self._api_key("OPENAI_API_KEY"),
        )


class AnthropicChatProvider(ChatModelProvider):
    def create_chat_model(self) -> BaseChatModel:
        return ChatAnthropic(
            model=self.config.model_name,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
            api_key=self._api_key("ANTHROPIC_API_KEY"),
        )


LLM_PROVIDERS: Dict[str, Type[ChatModelProvider]] = {
    "openai": OpenAIChatProvider,
    "anthropic": AnthropicChatProvider,
}


def create_llm_provider(config: AgentConfig) -> ChatModelProvider:
    provider_cls = LLM_PROVIDERS.get(config.llm_provider.lower())
    if provider_cls is None:
        raise ValueError(
            f"Unknown LLM provider: {config.llm_provider}. Must be one of: {', '.join(sorted(LLM_PROVIDERS))}"
        )
    logger.info(f"Using {config.llm_provider} chat model: {config.model_name}")
    return provider_cls(config)


def is_auth_error(exc: BaseException) -> bool:
    """True for missing or rejected credentials, whichever SDK raised them."""
    if isinstance(exc, AuthConfigError):
        return True
    if type(exc).__name__ in AUTH_ERROR_NAMES:
        return True
    message = str(exc).lower()
    return "api key" in message or "api_key" in message


def is_transient_error(exc: BaseException) -> bool:
    """True for rate limits, dropped connections and timeouts worth retrying."""
    return isinstance(exc, asyncio.TimeoutError) or type(exc).__name__ in TRANSIENT_ERROR_NAMES
