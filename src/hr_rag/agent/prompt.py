"""System prompts and canned answers for the HR Assistant agent."""

from typing import Sequence

from ..ingestion.models import Chunk

SYSTEM_PROMPT = """You are an AI HR assistant for a company. Answer employee questions using the provided context and available tools.

Context from company documents:
{context}

Guidelines:
- Use the context above to answer policy and document-related questions, and cite the source document.
- Use the available tools for employee-specific data (vacation balance, salary info, schedule, directory search).
- Present data fetched with tools clearly.
- If you don't have enough information, say so clearly.
- Be helpful, professional, and concise."""

NO_CONTEXT_PROMPT = (
    "No relevant documents were found for this question. "
    "Answer based on the tools or suggest the employee contact HR directly."
)

AUTH_CONFIG_MESSAGE = "LLM API key is not configured. Please set a valid LLM_API_KEY in your .env file."

GENERIC_ERROR_MESSAGE = "Sorry, I encountered an error processing your request. Please try again."

ITERATION_LIMIT_MESSAGE = (
    "Sorry, I could not finish working on your request within the allowed number of steps. "
    "Please try asking a more specific question."
)


def format_context(chunks: Sequence[Chunk]) -> str:
    """Number retrieved chunks for citation: [1] text, [2] text, ..."""
    return "\n\n".join(f"[{i}] (source: {chunk.source})\n{chunk.content}" for i, chunk in enumerate(chunks, 1))


def build_system_prompt(chunks: Sequence[Chunk]) -> str:
    context = format_context(chunks) if chunks else NO_CONTEXT_PROMPT
    # str.format would trip over braces inside document text
    return SYSTEM_PROMPT.replace("{context}", context)
