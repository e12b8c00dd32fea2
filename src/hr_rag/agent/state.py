import operator
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, TypedDict

from langchain_core.messages import BaseMessage


class LoopStatus(Enum):
    """How the agent loop ended."""

    ANSWERED = "answered"
    DECLINED = "declined"


class DeclineReason(Enum):
    AUTH_CONFIG = "auth_config"  # Missing or rejected model credentials
    EXECUTION_ERROR = "execution_error"  # Model or tool failure
    ITERATION_LIMIT = "iteration_limit"  # Ran out of model calls


@dataclass
class ToolInvocation:
    """One (action, observation) pair on the scratchpad."""

    name: str
    arguments: Dict[str, Any]
    result: str
    call_id: str


@dataclass
class LoopOutcome:
    """Tagged result of one agent loop run."""

    status: LoopStatus
    answer: Optional[str] = None
    reason: Optional[DeclineReason] = None
    error: Optional[BaseException] = None

    @classmethod
    def answered(cls, answer: str) -> "LoopOutcome":
        return cls(status=LoopStatus.ANSWERED, answer=answer)

    @classmethod
    def declined(cls, reason: DeclineReason, error: Optional[BaseException] = None) -> "LoopOutcome":
        return cls(status=LoopStatus.DECLINED, reason=reason, error=error)

    @property
    def is_answered(self) -> bool:
        return self.status is LoopStatus.ANSWERED


class AgentState(TypedDict):
    """State that flows through the agent loop graph."""

    # Conversation up to and including the new user message
    messages: List[BaseMessage]

    # Tool request from the last model call, cleared once executed
    pending_tool_call: Optional[Dict[str, Any]]

    scratchpad: Annotated[List[ToolInvocation], operator.add]
    tools_used: Annotated[List[str], operator.add]

    iterations: int
    outcome: Optional[LoopOutcome]
