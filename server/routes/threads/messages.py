"""
Thread message endpoints.
"""

from fastapi import APIRouter, HTTPException, Query

from core import NotFoundError, get_thread_message, list_thread_messages

from ...state import get_persistence


router = APIRouter()


@router.get("/threads/{threadId}/messages")
async def list_thread_messages_route(
    threadId: str,
    stopped: str | None = Query(None),
) -> list[dict]:
    """List a thread's messages with duplicate stopped responses removed."""
    stopped_ids = {s.strip() for s in stopped.split(",") if s.strip()} if stopped else set()
    messages = await list_thread_messages(threadId, get_persistence(), stopped_ids)
    return [message.model_dump() for message in messages]


@router.get("/threads/{threadId}/messages/{messageId}")
async def get_thread_message_route(threadId: str, messageId: str) -> dict:
    """Get one message, including its cost metadata."""
    try:
        message = await get_thread_message(threadId, messageId, get_persistence())
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return message.model_dump()
