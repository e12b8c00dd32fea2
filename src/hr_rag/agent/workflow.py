"""
HR chat agent.

Per request: retrieve context, build the prompt from the context and the
session history, then run a bounded tool-calling loop (a LangGraph state
graph alternating model calls and tool executions) and answer.

Failures inside the loop never escape ``chat``: the loop ends with a declined
outcome and the reply carries an explanatory message instead.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage
from langfuse import observe
from langfuse.langchain import CallbackHandler
from langgraph.graph import END, START, StateGraph
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from ..exceptions import GenericExecutionError
from ..ingestion.models import Chunk
from ..retriever import SimilarityRetriever
from ..schemas import ChatResponse
from .config import AgentConfig
from .llm import ChatModelProvider, create_llm_provider, is_auth_error, is_transient_error
from .memory import SessionMemoryManager
from .prompt import AUTH_CONFIG_MESSAGE, GENERIC_ERROR_MESSAGE, ITERATION_LIMIT_MESSAGE, build_system_prompt
from .state import AgentState, DeclineReason, LoopOutcome, ToolInvocation
from .tools import ToolRegistry

logger = logging.getLogger(__name__)

DECLINE_MESSAGES = {
    DeclineReason.AUTH_CONFIG: AUTH_CONFIG_MESSAGE,
    DeclineReason.EXECUTION_ERROR: GENERIC_ERROR_MESSAGE,
    DeclineReason.ITERATION_LIMIT: ITERATION_LIMIT_MESSAGE,
}


def _message_text(message: BaseMessage) -> str:
    """Plain text of a model message (some providers return content blocks)."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def render_scratchpad(scratchpad: Sequence[ToolInvocation]) -> List[BaseMessage]:
    """Replay each (action, observation) pair as a tool call and its result."""
    messages: List[BaseMessage] = []
    for step in scratchpad:
        messages.append(
            AIMessage(content="", tool_calls=[{"name": step.name, "args": step.arguments, "id": step.call_id}])
        )
        messages.append(ToolMessage(content=step.result, tool_call_id=step.call_id))
    return messages


def distinct_sources(chunks: Sequence[Chunk]) -> List[str]:
    """Source identifiers of the chunks, first occurrence wins."""
    return list(dict.fromkeys(chunk.source for chunk in chunks))


class HRChatAgent:
    """
    Retrieval-augmented tool-calling agent for HR questions.

    Usage:
        agent = HRChatAgent(retriever)
        response = await agent.chat("How many vacation days does EMP001 have left?")
    """

    def __init__(
        self,
        retriever: SimilarityRetriever,
        tools: Optional[ToolRegistry] = None,
        llm_provider: Optional[ChatModelProvider] = None,
        sessions: Optional[SessionMemoryManager] = None,
        config: Optional[AgentConfig] = None,
    ):
        self.config = config or AgentConfig()
        self.retriever = retriever
        self.tools = tools or ToolRegistry()
        self.llm_provider = llm_provider or create_llm_provider(self.config)
        self.sessions = sessions or SessionMemoryManager(capacity=self.config.session_window)

        # Created on first use so a missing credential degrades a request instead of startup
        self._llm = None

        self.graph = self._build_graph()
        logger.info(f"HRChatAgent initialized with tools: {', '.join(self.tools.names)}")

    def _get_model(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = self.llm_provider.create_chat_model().bind_tools(self.tools.tools)
        return self._llm

    def _build_graph(self):
        """Build the LangGraph tool-calling loop."""
        graph = StateGraph(AgentState)

        graph.add_node("call_model", self.call_model)
        graph.add_node("execute_tool", self.execute_tool)

        graph.add_edge(START, "call_model")

        def route_after_model(state: AgentState) -> str:
            if state.get("outcome"):
                return END
            return "execute_tool"

        def route_after_tool(state: AgentState) -> str:
            if state.get("outcome"):
                return END
            return "call_model"

        graph.add_conditional_edges("call_model", route_after_model, {"execute_tool": "execute_tool", END: END})
        graph.add_conditional_edges("execute_tool", route_after_tool, {"call_model": "call_model", END: END})

        return graph.compile()

    async def _invoke_model(self, model: BaseChatModel, messages: List[BaseMessage]) -> AIMessage:
        """Call the model, retrying rate limits, dropped connections and timeouts."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.config.max_retries),
            wait=wait_exponential(multiplier=1, min=self.config.retry_min_wait, max=self.config.retry_max_wait),
            retry=retry_if_exception(is_transient_error),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                response = await model.ainvoke(messages)
        return response

    def _decline(self, error: BaseException) -> LoopOutcome:
        if is_auth_error(error):
            logger.error(f"Model authentication/configuration error: {error}")
            return LoopOutcome.declined(DeclineReason.AUTH_CONFIG, error)
        logger.error(f"Agent loop failed: {error}", exc_info=error)
        return LoopOutcome.declined(DeclineReason.EXECUTION_ERROR, error)

    async def call_model(self, state: AgentState) -> Dict[str, Any]:
        """Ask the model for a final answer or a single tool call."""
        iterations = state.get("iterations", 0)
        if iterations >= self.config.max_iterations:
            logger.warning(f"Agent loop stopped after {iterations} model calls")
            return {"outcome": LoopOutcome.declined(DeclineReason.ITERATION_LIMIT)}

        messages = list(state["messages"]) + render_scratchpad(state.get("scratchpad", []))
        try:
            response = await self._invoke_model(self._get_model(), messages)
        except Exception as e:
            return {"outcome": self._decline(e), "iterations": iterations + 1}

        if response.tool_calls:
            if len(response.tool_calls) > 1:
                names = [call["name"] for call in response.tool_calls]
                logger.warning(f"Model requested {len(names)} tools {names}; executing only the first")
            return {"pending_tool_call": response.tool_calls[0], "iterations": iterations + 1}

        return {"outcome": LoopOutcome.answered(_message_text(response)), "iterations": iterations + 1}

    async def execute_tool(self, state: AgentState) -> Dict[str, Any]:
        """Run the pending tool call and record it on the scratchpad."""
        call = state["pending_tool_call"]
        name = call["name"]
        arguments = call.get("args") or {}
        call_id = call.get("id") or f"call_{uuid.uuid4().hex[:12]}"

        try:
            result = await self.tools.execute(name, arguments)
        except Exception as e:
            error = GenericExecutionError(f"Tool {name} failed: {e}")
            error.__cause__ = e
            return {"pending_tool_call": None, "outcome": self._decline(error)}

        logger.info(f"Tool {name} returned {len(result)} characters")
        invocation = ToolInvocation(name=name, arguments=arguments, result=result, call_id=call_id)
        return {"pending_tool_call": None, "scratchpad": [invocation], "tools_used": [name]}

    async def run_loop(self, messages: List[BaseMessage]) -> AgentState:
        """Run the tool-calling loop to completion. Always returns a state with an outcome."""
        initial_state: AgentState = {
            "messages": messages,
            "pending_tool_call": None,
            "scratchpad": [],
            "tools_used": [],
            "iterations": 0,
            "outcome": None,
        }

        # Each iteration visits at most two nodes
        run_config: Dict[str, Any] = {"recursion_limit": 2 * self.config.max_iterations + 5}
        if self.config.enable_langfuse:
            run_config["callbacks"] = [CallbackHandler()]

        # Streamed so a failure still reports the tools that already ran
        result: AgentState = initial_state
        try:
            async for result in self.graph.astream(initial_state, config=run_config, stream_mode="values"):
                pass
        except Exception as e:
            error = GenericExecutionError(f"Agent graph failed: {e}")
            error.__cause__ = e
            return {**result, "outcome": self._decline(error)}

        if result.get("outcome") is None:
            result = {**result, "outcome": LoopOutcome.declined(DeclineReason.EXECUTION_ERROR)}
        return result

    @observe(as_type="agent")
    async def chat(self, message: str, session_id: Optional[str] = None) -> ChatResponse:
        """
        Answer one user message within a session.

        Args:
            message: The user's question
            session_id: Conversation to continue; a new one is started when omitted

        Returns:
            ChatResponse with the answer, sources and tools used
        """
        session_id = session_id or str(uuid.uuid4())

        async with self.sessions.session(session_id) as memory:
            try:
                chunks = await self.retriever.retrieve(message)
            except Exception as e:
                logger.error(f"Retrieval failed for session {session_id}: {e}", exc_info=True)
                return ChatResponse(answer=GENERIC_ERROR_MESSAGE, session_id=session_id, sources=[], tools_used=[])

            sources = distinct_sources(chunks)
            logger.info(f"Retrieved {len(chunks)} chunks from {len(sources)} sources")

            messages: List[BaseMessage] = [
                SystemMessage(content=build_system_prompt(chunks)),
                *memory.as_messages(),
                HumanMessage(content=message),
            ]
            state = await self.run_loop(messages)
            outcome: LoopOutcome = state["outcome"]

            if outcome.is_answered:
                answer = outcome.answer
                memory.add_exchange(message, answer)
            else:
                answer = DECLINE_MESSAGES[outcome.reason]
                logger.warning(f"Session {session_id} declined ({outcome.reason.value}): {outcome.error}")

            return ChatResponse(
                answer=answer,
                session_id=session_id,
                sources=sources,
                tools_used=list(state.get("tools_used", [])),
            )
