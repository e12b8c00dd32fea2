"""
Chainlit chatbot app for HR Assistant.

Provides a chat interface for employees to ask HR questions and upload
documents (.txt, .md, .pdf) that are ingested on the fly.

Run with: chainlit run src/hr_rag/chainlit_app.py -w
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import chainlit as cl
from dotenv import load_dotenv

from hr_rag.exceptions import HRAssistantError
from hr_rag.schemas import ChatRequest
from hr_rag.service import HRAssistantService

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

_service: Optional[HRAssistantService] = None
_startup_lock = asyncio.Lock()


async def get_service() -> HRAssistantService:
    """Create the shared service and run startup ingestion once per process."""
    global _service
    async with _startup_lock:
        if _service is None:
            service = HRAssistantService.from_env()
            await service.startup()
            _service = service
    return _service


@cl.on_chat_start
async def on_chat_start():
    """Handle chat session start."""
    logger.info("New chat session started")

    try:
        service = await get_service()
    except HRAssistantError as e:
        logger.error(f"Error starting HR Assistant: {e}", exc_info=True)
        await cl.Message(
            content=f"Error starting HR Assistant: {e}\n\nPlease check the documents directory and vector store settings."
        ).send()
        return

    cl.user_session.set("session_id", None)

    await cl.Message(
        content=f"""Welcome to the HR Assistant! 👋

{service.vector_store.get_document_count()} document chunks are indexed.

I can help you with:
- Company policies (leave, remote work, expenses, code of conduct)
- Vacation balances, salary info and schedules (use your employee ID, e.g. EMP001)
- Finding colleagues in the directory

You can also attach .txt, .md or .pdf files to add them to the knowledge base."""
    ).send()


async def ingest_attachments(service: HRAssistantService, message: cl.Message) -> None:
    """Ingest files attached to the message."""
    for element in message.elements or []:
        path = getattr(element, "path", None)
        if not path:
            continue
        try:
            content = await asyncio.to_thread(Path(path).read_bytes)
            result = await service.ingest_upload(element.name, content)
        except HRAssistantError as e:
            logger.error(f"Failed to ingest upload {element.name}: {e}")
            await cl.Message(content=f"Could not ingest **{element.name}**: {e}").send()
            continue

        await cl.Message(content=f"Ingested **{result.filename}** ({result.chunks} chunks).").send()


@cl.on_message
async def on_message(message: cl.Message):
    """Handle incoming chat message."""
    service = await get_service()
    await ingest_attachments(service, message)

    if not message.content.strip():
        return

    session_id = cl.user_session.get("session_id")
    logger.info(f"Processing message for session {session_id}: {message.content}")

    # Create a message to show thinking
    msg = cl.Message(content="")
    await msg.send()

    response = await service.chat(ChatRequest(message=message.content, session_id=session_id))
    cl.user_session.set("session_id", response.session_id)

    content = response.answer
    if response.sources:
        content += "\n\n---\n**Sources:**\n" + "\n".join(f"- `{Path(s).name}`" for s in response.sources)
    if response.tools_used:
        content += "\n\n**Tools Used:** " + ", ".join(f"`{t}`" for t in response.tools_used)

    msg.content = content
    await msg.update()
    logger.info("Message processed successfully")


@cl.on_chat_end
async def on_chat_end():
    """Handle chat session end."""
    session_id = cl.user_session.get("session_id")
    if session_id and _service is not None:
        _service.clear_session(session_id)
        logger.info(f"Session {session_id} cleared")
