"""Agent module for HR Assistant.

Provides:
- HRChatAgent: retrieval-augmented, tool-calling chat agent
- SessionMemoryManager: per-session conversation windows
- ToolRegistry: schema-validated HR tools
- ChatModelProvider: pluggable chat model backends
"""

from .config import AgentConfig
from .llm import ChatModelProvider, create_llm_provider
from .memory import ConversationTurn, SessionMemory, SessionMemoryManager
from .prompt import AUTH_CONFIG_MESSAGE, GENERIC_ERROR_MESSAGE, ITERATION_LIMIT_MESSAGE, SYSTEM_PROMPT
from .state import AgentState, DeclineReason, LoopOutcome, LoopStatus, ToolInvocation
from .tools import ToolRegistry, create_hr_tools
from .workflow import HRChatAgent

__all__ = [
    # Agent
    "HRChatAgent",
    # State
    "AgentState",
    "LoopOutcome",
    "LoopStatus",
    "DeclineReason",
    "ToolInvocation",
    # Config
    "AgentConfig",
    # Models
    "ChatModelProvider",
    "create_llm_provider",
    # Tools
    "ToolRegistry",
    "create_hr_tools",
    # Prompts
    "SYSTEM_PROMPT",
    "AUTH_CONFIG_MESSAGE",
    "GENERIC_ERROR_MESSAGE",
    "ITERATION_LIMIT_MESSAGE",
    # Memory
    "SessionMemory",
    "SessionMemoryManager",
    "ConversationTurn",
]
