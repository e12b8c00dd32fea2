"""
Tests for session memory.
"""

import asyncio

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from hr_rag.agent.memory import SessionMemory, SessionMemoryManager


class TestSessionMemory:
    """Tests for SessionMemory."""

    def test_window_never_exceeds_capacity(self):
        memory = SessionMemory("s1", capacity=4)

        for i in range(5):
            memory.add_exchange(f"question {i}", f"answer {i}")

        assert memory.turn_count == 4
        assert [t["content"] for t in memory.get_history_for_llm()] == [
            "question 3",
            "answer 3",
            "question 4",
            "answer 4",
        ]

    def test_eviction_is_oldest_first(self):
        memory = SessionMemory("s1", capacity=3)
        memory.add_user_message("one")
        memory.add_assistant_message("two")
        memory.add_user_message("three")
        memory.add_assistant_message("four")

        assert [t.content for t in memory.history] == ["two", "three", "four"]

    def test_as_messages(self):
        memory = SessionMemory("s1")
        memory.add_exchange("How many days left?", "You have 12 days left.")

        messages = memory.as_messages()

        assert isinstance(messages[0], HumanMessage)
        assert isinstance(messages[1], AIMessage)
        assert messages[1].content == "You have 12 days left."

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            SessionMemory("s1", capacity=0)


class TestSessionMemoryManager:
    """Tests for SessionMemoryManager."""

    def test_generates_session_id(self):
        manager = SessionMemoryManager()

        memory = manager.get_or_create()

        assert memory.session_id
        assert manager.get(memory.session_id) is memory

    def test_unknown_id_creates_session(self):
        manager = SessionMemoryManager(capacity=6)

        memory = manager.get_or_create("abc")

        assert memory.session_id == "abc"
        assert memory.capacity == 6
        assert manager.get_or_create("abc") is memory
        assert manager.session_count == 1

    def test_clear_then_recreate_is_empty(self):
        manager = SessionMemoryManager()
        manager.get_or_create("abc").add_exchange("hi", "hello")

        assert manager.clear("abc") is True
        assert manager.clear("abc") is False
        assert manager.get_or_create("abc").turn_count == 0

    async def test_same_session_is_serialized(self):
        """Concurrent requests on one session never interleave their read and write."""
        manager = SessionMemoryManager(capacity=10)

        async def exchange(i: int):
            async with manager.session("shared") as memory:
                seen = memory.turn_count
                await asyncio.sleep(0.01)
                memory.add_exchange(f"q{i}", f"a{i} after {seen}")

        await asyncio.gather(*(exchange(i) for i in range(3)))

        answers = [t.content for t in manager.get("shared").history if t.role == "assistant"]
        assert answers == ["a0 after 0", "a1 after 2", "a2 after 4"]

    async def test_distinct_sessions_run_concurrently(self):
        manager = SessionMemoryManager()
        entered = asyncio.Event()

        async def first():
            async with manager.session("a"):
                await asyncio.wait_for(entered.wait(), timeout=1)

        async def second():
            async with manager.session("b"):
                entered.set()

        await asyncio.gather(first(), second())
        assert manager.session_count == 2

    async def test_clear_keeps_lock_with_waiters(self):
        """Clearing a session while a request waits on it never admits two holders."""
        manager = SessionMemoryManager()
        active = 0
        peak = 0

        async def worker():
            nonlocal active, peak
            async with manager.session("s"):
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.01)
                active -= 1

        async with manager.session("s"):
            waiting = asyncio.create_task(worker())
            await asyncio.sleep(0)
        manager.clear("s")
        late = asyncio.create_task(worker())

        await asyncio.gather(waiting, late)

        assert peak == 1
