"""Configuration for the HR Assistant agent."""

import os
from dataclasses import dataclass


@dataclass
class AgentConfig:
    """Configuration for the HR chat agent."""

    # LLM settings
    llm_provider: str = "openai"
    model_name: str = "gpt-4o-mini"
    api_key: str = ""
    temperature: float = 0.0
    max_tokens: int = 1024

    # Agent loop: hard cap on model calls per chat request
    max_iterations: int = 8

    # Session memory: turns (single user or assistant messages) kept per session
    session_window: int = 10

    # Retry settings for transient model errors
    max_retries: int = 3
    retry_min_wait: float = 1.0
    retry_max_wait: float = 10.0

    # Observability
    enable_langfuse: bool = False

    @classmethod
    def from_env(cls) -> "AgentConfig":
        """Build config from LLM_* and agent environment variables."""
        return cls(
            llm_provider=os.getenv("LLM_PROVIDER", "openai"),
            model_name=os.getenv("LLM_MODEL", "gpt-4o-mini"),
            api_key=os.getenv("LLM_API_KEY", ""),
            max_iterations=int(os.getenv("AGENT_MAX_ITERATIONS", "8")),
            session_window=int(os.getenv("SESSION_WINDOW", "10")),
            enable_langfuse=bool(os.getenv("LANGFUSE_PUBLIC_KEY")),
        )
