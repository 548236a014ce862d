"""
Message operations.

Provides the chat generation flow (stream a response, persist the result),
stopping an in-flight generation, and loading reconciled thread history.
"""

import asyncio
import logging
import time
from typing import AsyncGenerator, AsyncIterator, Collection, Protocol, Sequence

from .context import RequestContext
from .events import Event
from .exceptions import (
    InvalidOperationError,
    NotFoundError,
    StreamError,
    format_provider_error,
)
from .models import Message, StreamEvent
from .persistence import PersistenceGateway
from .pricing import PricingTable
from .reconcile import reconcile_messages
from .state import active_signals, register_signal, release_signal
from .stream import StreamCoordinator, StreamHandlers, ToolRunner

logger = logging.getLogger(__name__)


class ChatAgent(Protocol):
    """Protocol for model backends producing wire events."""

    def stream_events(
        self, messages: Sequence[Message], context: RequestContext
    ) -> AsyncIterator[StreamEvent]:
        """Stream the response to the conversation as wire events."""
        ...


async def stream_chat_response(
    messages: Sequence[Message],
    context: RequestContext,
    agent: ChatAgent,
    persistence: PersistenceGateway,
    pricing: PricingTable | None = None,
    tools: ToolRunner | None = None,
    handlers: StreamHandlers | None = None,
) -> AsyncGenerator[Event, None]:
    """
    Generate an assistant response and stream it as events.

    The incoming user message is saved before generation unless the request
    regenerates an existing turn. The finalized or stopped assistant message
    is saved once the stream ends. A provider failure yields an ``error``
    event; the partial message is saved if it has any content. If the consumer
    is cancelled or closes the stream, the partial message is saved as stopped.

    Args:
        messages: Conversation so far, ending with the user's turn
        context: Request-scoped settings and abort signal
        agent: Model backend
        persistence: Message store
        pricing: Price table for metadata
        tools: Tool runner for calls the backend does not execute itself
        handlers: Optional lifecycle callbacks

    Yields:
        Events as the message is processed

    Raises:
        InvalidOperationError: If there is nothing to respond to
    """
    if not messages:
        raise InvalidOperationError("Cannot generate a response without messages")

    thread_id = context.thread_id
    last_message = messages[-1]
    if thread_id and last_message.role == "user" and not context.is_regeneration:
        await persistence.save(thread_id, context.user_id, last_message)
        yield Event(type="message.saved", properties={"id": last_message.id})

    logger.info(
        "Generating response in thread %s with model=%s search=%s",
        thread_id,
        context.model_id,
        context.search_enabled,
    )
    started = time.perf_counter()
    coordinator = StreamCoordinator(context, pricing=pricing, tools=tools, handlers=handlers)

    if thread_id:
        register_signal(thread_id, context.signal)
    events = coordinator.stream(agent.stream_events(messages, context))
    try:
        async for event in events:
            yield event
    except StreamError as e:
        yield Event(
            type="error",
            properties={"messageID": coordinator.message.id, "error": format_provider_error(e)},
        )
    except (asyncio.CancelledError, GeneratorExit):
        # Consumer went away (client disconnect): keep what was generated
        await events.aclose()
        coordinator.mark_stopped()
        logger.info("Response %s cancelled by consumer", coordinator.message.id)
        await _save_response(coordinator.message, context, persistence)
        raise
    finally:
        if thread_id:
            release_signal(thread_id, context.signal)

    message = coordinator.message
    if await _save_response(message, context, persistence):
        yield Event(type="message.saved", properties={"id": message.id})

    logger.info(
        "Response %s %s (%.1fms)",
        message.id,
        "stopped" if message.stoppedByUser else "complete",
        (time.perf_counter() - started) * 1000,
    )


async def _save_response(
    message: Message, context: RequestContext, persistence: PersistenceGateway
) -> bool:
    """Persist an assistant message that has content. Returns True if saved."""
    if not context.thread_id or not (message.parts or message.metadata):
        return False
    await persistence.save(context.thread_id, context.user_id, message)
    return True


def stop_generation(thread_id: str, reason: str = "Stopped by user") -> bool:
    """
    Fire the abort signal of a thread's in-flight generation.

    Returns:
        True if a generation was running
    """
    signal = active_signals.get(thread_id)
    if signal is None:
        return False
    logger.info("Stopping generation in thread %s", thread_id)
    signal.abort(reason)
    return True


async def save_stopped_message(
    thread_id: str,
    user_id: str,
    message: Message,
    persistence: PersistenceGateway,
) -> Message:
    """
    Persist the client's copy of a stopped assistant message.

    Raises:
        InvalidOperationError: If the message is not an assistant message
    """
    if message.role != "assistant":
        raise InvalidOperationError("Only assistant messages can be stopped")

    stopped = message.model_copy(update={"stoppedByUser": True})
    await persistence.save(thread_id, user_id, stopped)
    return stopped


async def list_thread_messages(
    thread_id: str,
    persistence: PersistenceGateway,
    stopped_ids: Collection[str] = (),
) -> list[Message]:
    """Load a thread's history with duplicate stopped turns removed."""
    messages = await persistence.load(thread_id)
    return list(reconcile_messages(messages, stopped_ids))


async def get_thread_message(
    thread_id: str, message_id: str, persistence: PersistenceGateway
) -> Message:
    """
    Load one message of a thread.

    Raises:
        NotFoundError: If the thread has no message with that id
    """
    for message in await persistence.load(thread_id):
        if message.id == message_id:
            return message
    raise NotFoundError("Message", message_id)
