"""
Chat endpoint with streaming.
"""

import json
import logging
import os
from typing import AsyncGenerator

from fastapi import APIRouter, Header, HTTPException
from sse_starlette.sse import EventSourceResponse

from agent.tools.search import SearchTools
from config import get_config
from config.defaults import OPENROUTER_API_KEY_ENV, PARALLEL_API_KEY_ENV
from core import CoreError, RequestContext, format_provider_error, stream_chat_response

from ...requests import ChatRequest
from ...state import get_agent_factory, get_persistence, get_pricing

logger = logging.getLogger(__name__)


router = APIRouter()


def resolve_key(client_key: str | None, env_var: str) -> str | None:
    """Prefer the key sent by the client, falling back to the server's."""
    return client_key or os.environ.get(env_var) or None


@router.post("/chat")
async def chat_route(
    request: ChatRequest, x_user_id: str = Header("anonymous")
) -> EventSourceResponse:
    """Generate a response to the conversation and stream it via SSE."""
    openrouter_key = resolve_key(request.openrouterClientKey, OPENROUTER_API_KEY_ENV)
    if not openrouter_key:
        raise HTTPException(
            status_code=400,
            detail="No API key configured. Provide a browser key or store one on the server.",
        )

    config = get_config()
    search_tools = None
    if request.searchEnabled:
        parallel_key = resolve_key(request.parallelClientKey, PARALLEL_API_KEY_ENV)
        if not parallel_key:
            raise HTTPException(
                status_code=400,
                detail="Web search is enabled but no Parallel API key configured. "
                "Provide a browser key or store one on the server.",
            )
        search_tools = SearchTools(
            parallel_key,
            base_url=config.search.base_url,
            timeout=config.search.timeout,
            max_results=config.search.max_results,
        )

    model_id = request.modelId or config.default_model
    try:
        agent = get_agent_factory()(
            model_id, openrouter_key, search_tools, request.customInstructions
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    context = RequestContext(
        model_id=model_id,
        user_id=x_user_id,
        thread_id=request.threadId,
        search_enabled=request.searchEnabled,
        reasoning_level=request.reasoningLevel,
        is_regeneration=request.isRegeneration,
    )

    async def stream_response() -> AsyncGenerator[dict, None]:
        try:
            async for event in stream_chat_response(
                request.messages,
                context,
                agent,
                get_persistence(),
                pricing=get_pricing(),
                tools=search_tools,
            ):
                yield {
                    "event": event.type,
                    "data": json.dumps(
                        {"type": event.type, "properties": event.properties}
                    ),
                }
        except CoreError as e:
            logger.warning("Chat request failed in thread %s: %s", request.threadId, e)
            yield {
                "event": "error",
                "data": json.dumps({"error": str(e)}),
            }
        except Exception as e:
            # Can't raise HTTPException once streaming, yield error event
            logger.exception("Error during chat streaming for thread %s", request.threadId)
            yield {
                "event": "error",
                "data": json.dumps({"error": format_provider_error(e)}),
            }

    return EventSourceResponse(stream_response())
