"""Chat endpoints for discussing a fact with the assistant."""

import json
from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from onefact.api.dependencies import get_chat_service
from onefact.api.schemas import ChatRequest
from onefact.core.exceptions import LLMError
from onefact.core.logging import get_logger
from onefact.services.chat import ChatMessage, FactChatService

logger = get_logger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

ChatService = Annotated[FactChatService, Depends(get_chat_service)]


@router.post("", response_model=ChatMessage)
async def chat(body: ChatRequest, service: ChatService) -> ChatMessage:
    """Reply to the conversation about a fact."""
    return await service.reply(body.fact_id, body.messages)


@router.post("/stream")
async def chat_stream(body: ChatRequest, service: ChatService) -> StreamingResponse:
    """Stream the reply as server-sent events.

    Each event carries ``{"content": chunk}``; the stream ends with
    ``{"done": true}`` or ``{"error": message}``.
    """
    chunks = await service.stream(body.fact_id, body.messages)

    async def events() -> AsyncIterator[str]:
        try:
            async for chunk in chunks:
                yield f"data: {json.dumps({'content': chunk})}\n\n"
        except LLMError as e:
            logger.warning("Chat stream aborted", error=str(e))
            yield f"data: {json.dumps({'error': str(e)})}\n\n"
            return
        yield f"data: {json.dumps({'done': True})}\n\n"

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
