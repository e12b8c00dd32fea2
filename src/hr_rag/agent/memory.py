"""
Multi-turn Session Memory

Keeps the recent conversation of each chat session so follow-up questions
("and how many did I use?") reach the model with their context.

Memory is process-scoped: sessions live until cleared or the process exits.
"""

import asyncio
import logging
import uuid
from collections import deque
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import AsyncIterator, Deque, Dict, List, Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

logger = logging.getLogger(__name__)


@dataclass
class ConversationTurn:
    """A single turn in the conversation."""

    role: str  # "user" or "assistant"
    content: str
    timestamp: datetime = field(default_factory=datetime.now)


class SessionMemory:
    """
    Sliding window over the turns of one session.

    Usage:
        memory = SessionMemory("abc", capacity=10)
        memory.add_exchange("How many vacation days do I have?", "You have 12 days left.")
        messages = memory.as_messages()
    """

    def __init__(self, session_id: str, capacity: int = 10):
        """
        Args:
            session_id: Session identifier
            capacity: Maximum turns to keep; the oldest is evicted first
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.session_id = session_id
        self.capacity = capacity
        self.history: Deque[ConversationTurn] = deque(maxlen=capacity)
        self.created_at = datetime.now()

    def add_user_message(self, content: str) -> None:
        self.history.append(ConversationTurn(role="user", content=content))

    def add_assistant_message(self, content: str) -> None:
        self.history.append(ConversationTurn(role="assistant", content=content))

    def add_exchange(self, user_message: str, answer: str) -> None:
        """Record a completed chat exchange."""
        self.add_user_message(user_message)
        self.add_assistant_message(answer)

    def get_history_for_llm(self) -> List[Dict[str, str]]:
        """Get conversation history as role/content dicts, oldest first."""
        return [{"role": turn.role, "content": turn.content} for turn in self.history]

    def as_messages(self) -> List[BaseMessage]:
        """Get conversation history as LangChain messages, oldest first."""
        messages: List[BaseMessage] = []
        for turn in self.history:
            if turn.role == "user":
                messages.append(HumanMessage(content=turn.content))
            else:
                messages.append(AIMessage(content=turn.content))
        return messages

    def clear(self) -> None:
        self.history.clear()

    @property
    def turn_count(self) -> int:
        """Number of turns in history."""
        return len(self.history)


class SessionMemoryManager:
    """
    Maps session ids to SessionMemory windows.

    Each session has its own asyncio.Lock; ``session()`` holds it so that
    reading the history and appending the new exchange happen as one unit.
    """

    def __init__(self, capacity: int = 10):
        self.capacity = capacity
        self._sessions: Dict[str, SessionMemory] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    def get_or_create(self, session_id: Optional[str] = None) -> SessionMemory:
        """
        Return the session for ``session_id``, creating it if unknown.

        A missing id gets a freshly generated UUID.
        """
        session_id = session_id or str(uuid.uuid4())
        memory = self._sessions.get(session_id)
        if memory is None:
            memory = SessionMemory(session_id, capacity=self.capacity)
            self._sessions[session_id] = memory
            logger.info(f"Created session {session_id}")
        return memory

    def get(self, session_id: str) -> Optional[SessionMemory]:
        return self._sessions.get(session_id)

    def clear(self, session_id: str) -> bool:
        """Remove a session entirely. Returns whether it existed."""
        existed = self._sessions.pop(session_id, None) is not None
        self._release_lock(session_id)
        if existed:
            logger.info(f"Cleared session {session_id}")
        return existed

    def lock_for(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    def _release_lock(self, session_id: str) -> None:
        # A lock is dropped only once no holder or waiter references it.
        if self._lock_users.get(session_id, 0) == 0 and session_id not in self._sessions:
            self._locks.pop(session_id, None)
            self._lock_users.pop(session_id, None)

    @asynccontextmanager
    async def session(self, session_id: Optional[str] = None) -> AsyncIterator[SessionMemory]:
        """Hold the session's lock for the duration of the block."""
        session_id = session_id or str(uuid.uuid4())
        lock = self.lock_for(session_id)
        self._lock_users[session_id] = self._lock_users.get(session_id, 0) + 1
        try:
            async with lock:
                yield self.get_or_create(session_id)
        finally:
            self._lock_users[session_id] -= 1
            self._release_lock(session_id)

    @property
    def session_count(self) -> int:
        return len(self._sessions)
