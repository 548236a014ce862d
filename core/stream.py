"""
Stream coordinator.

Consumes the ordered wire events of one model response and assembles the
assistant Message: parts as they stream, the sources discovered along the
way, and cost/latency metadata at completion. Nothing here persists; the
caller receives the finalized (or stopped) Message.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, AsyncGenerator, AsyncIterator, Callable, Protocol

from .context import RequestContext
from .events import Event
from .exceptions import AbortedError, StreamError
from .metrics import calculate_response_metadata
from .models import (
    FinishEvent,
    Message,
    Metadata,
    ReasoningDeltaEvent,
    ReasoningPart,
    Source,
    SourceEvent,
    TextDeltaEvent,
    TextPart,
    TextStartEvent,
    ToolCallEvent,
    ToolError,
    ToolPart,
    ToolResult,
    ToolResultEvent,
    gen_id,
    parse_tool_result,
)
from .pricing import FREE, PricingTable

logger = logging.getLogger(__name__)

# Tools whose successful results are citations
SOURCE_TOOLS = ("search", "extract")


class ToolRunner(Protocol):
    """Executes tool calls on behalf of the coordinator."""

    def __contains__(self, tool_name: object) -> bool:
        ...

    async def invoke(
        self, tool_name: str, tool_input: dict[str, Any], signal: Any = None
    ) -> ToolResult:
        ...


@dataclass
class StreamHandlers:
    """Lifecycle callbacks fired while a response streams."""

    on_first_token: Callable[[], None] | None = None
    on_source: Callable[[Source], None] | None = None
    on_finish: Callable[[Message], None] | None = None


def _now_ms() -> float:
    return time.perf_counter() * 1000


async def _next_event(iterator: AsyncIterator[Any]) -> Any | None:
    try:
        return await iterator.__anext__()
    except StopAsyncIteration:
        return None


class StreamCoordinator:
    """
    Builds one assistant Message from a model event stream.

    Events are handled strictly in arrival order. Tool calls that the
    upstream did not execute itself are run through ``tools`` and awaited
    before the next event is pulled.
    """

    def __init__(
        self,
        context: RequestContext,
        pricing: PricingTable | None = None,
        tools: ToolRunner | None = None,
        handlers: StreamHandlers | None = None,
        clock: Callable[[], float] | None = None,
        message_id: str | None = None,
    ) -> None:
        self.context = context
        self.pricing = pricing or PricingTable()
        self.tools = tools
        self.handlers = handlers or StreamHandlers()
        self._clock = clock or _now_ms

        self.message = Message(
            id=message_id or gen_id("msg_"),
            role="assistant",
            createdAt=time.time(),
            searchEnabled=context.search_enabled,
            reasoningLevel=context.reasoning_level,
        )
        self._sources: dict[str, Source] = {}
        self._tool_parts: dict[str, ToolPart] = {}
        self._start_timestamp: float | None = None
        self._first_token_timestamp: float | None = None
        self._finalized = False

    @property
    def sources(self) -> list[Source]:
        return list(self._sources.values())

    @property
    def finalized(self) -> bool:
        return self._finalized

    async def run(self, events: AsyncIterator[Any]) -> Message:
        """Consume the whole stream and return the resulting message."""
        async for _ in self.stream(events):
            pass
        return self.message

    async def stream(self, events: AsyncIterator[Any]) -> AsyncGenerator[Event, None]:
        """
        Consume wire events and yield domain events for the transport.

        Raises:
            StreamError: If the event source itself fails. The message is
                left frozen without metadata.
        """
        self._start_timestamp = self._clock()
        iterator = events.__aiter__()
        signal = self.context.signal

        yield Event(
            type="message.created",
            properties={"info": {"id": self.message.id, "role": "assistant"}},
        )

        try:
            while not self._finalized:
                try:
                    event = await signal.guard(_next_event(iterator))
                except AbortedError:
                    break
                except asyncio.CancelledError:
                    self.mark_stopped()
                    raise
                except Exception as e:
                    logger.exception("Model stream failed for message %s", self.message.id)
                    self.mark_stopped()
                    raise StreamError(str(e) or type(e).__name__, cause=e) from e

                if event is None:
                    break

                async for out in self._handle(event):
                    yield out
        finally:
            aclose = getattr(iterator, "aclose", None)
            if aclose is not None:
                await aclose()

        if self._finalized:
            return

        if signal.aborted:
            self.mark_stopped()
            logger.info("Generation stopped for message %s", self.message.id)
            yield Event(type="message.stopped", properties={"message": self.message.model_dump()})
            self._notify_finish()
            return

        logger.warning("Stream for message %s ended without a finish event", self.message.id)
        async for out in self._finish(FinishEvent()):
            yield out

    def create_metadata(self, event: Any) -> Metadata | None:
        """Return the message metadata for a processed ``finish`` event."""
        if isinstance(event, FinishEvent) and self._finalized:
            return self.message.metadata
        return None

    async def _handle(self, event: Any) -> AsyncGenerator[Event, None]:
        if self._finalized:
            logger.warning("Ignoring %s event after finalization", getattr(event, "type", event))
            return

        if isinstance(event, TextStartEvent):
            self._mark_first_token()

        elif isinstance(event, TextDeltaEvent):
            if event.delta:
                self._mark_first_token()
                yield self._append_delta(TextPart, event.delta)

        elif isinstance(event, ReasoningDeltaEvent):
            if event.delta:
                yield self._append_delta(ReasoningPart, event.delta)

        elif isinstance(event, SourceEvent):
            source = Source.from_url(event.url, event.title)
            for out in self._add_source(source):
                yield out

        elif isinstance(event, ToolCallEvent):
            async for out in self._handle_tool_call(event):
                yield out

        elif isinstance(event, ToolResultEvent):
            for out in self._handle_tool_result(event):
                yield out

        elif isinstance(event, FinishEvent):
            async for out in self._finish(event):
                yield out

        else:
            logger.debug("Unhandled stream event: %r", event)

    def _mark_first_token(self) -> None:
        if self._first_token_timestamp is not None:
            return
        self._first_token_timestamp = self._clock()
        if self.handlers.on_first_token:
            self.handlers.on_first_token()

    def _part_event(self, part: Any) -> Event:
        return Event(
            type="part.updated",
            properties={
                "messageID": self.message.id,
                "index": next(i for i, p in enumerate(self.message.parts) if p is part),
                "part": part.model_dump(),
            },
        )

    def _close_reasoning(self) -> None:
        for part in self.message.parts:
            if isinstance(part, ReasoningPart) and part.state == "streaming":
                part.state = "done"

    def _append_delta(self, kind: type[TextPart] | type[ReasoningPart], delta: str) -> Event:
        parts = self.message.parts
        last = parts[-1] if parts else None
        if isinstance(last, kind):
            last.text += delta
            return self._part_event(last)

        self._close_reasoning()
        part = kind(text=delta)
        parts.append(part)
        return self._part_event(part)

    def _add_source(self, source: Source) -> list[Event]:
        existing = self._sources.get(source.id)
        if existing is not None:
            if source.title and source.title != existing.title:
                self._sources[source.id] = existing.model_copy(update={"title": source.title})
            return []

        self._sources[source.id] = source
        if self.handlers.on_source:
            self.handlers.on_source(source)
        return [Event(type="source.added", properties={"source": source.model_dump()})]

    def _open_tool_part(self, tool_call_id: str, tool_name: str, tool_input: dict[str, Any]) -> ToolPart:
        self._close_reasoning()
        part = ToolPart(toolName=tool_name, toolCallId=tool_call_id, input=tool_input)
        self.message.parts.append(part)
        self._tool_parts[tool_call_id] = part
        return part

    async def _handle_tool_call(self, event: ToolCallEvent) -> AsyncGenerator[Event, None]:
        if event.toolName not in SOURCE_TOOLS:
            logger.warning("Ignoring call to unknown tool %s", event.toolName)
            return
        if event.toolCallId in self._tool_parts:
            logger.warning("Duplicate tool call %s", event.toolCallId)
            return

        part = self._open_tool_part(event.toolCallId, event.toolName, event.input)
        logger.info("Tool call: %s (%s)", event.toolName, event.toolCallId)
        yield self._part_event(part)

        if event.providerExecuted or self.tools is None or event.toolName not in self.tools:
            return

        result = await self.tools.invoke(event.toolName, event.input, self.context.signal)
        for out in self._complete_tool(part, result):
            yield out

    def _handle_tool_result(self, event: ToolResultEvent) -> list[Event]:
        part = self._tool_parts.get(event.toolCallId)
        if part is None:
            if event.toolName not in SOURCE_TOOLS:
                logger.warning("Ignoring result of unknown tool %s", event.toolName)
                return []
            part = self._open_tool_part(event.toolCallId, event.toolName, {})
        return self._complete_tool(part, parse_tool_result(event.output))

    def _complete_tool(self, part: ToolPart, result: ToolResult) -> list[Event]:
        part.output = result
        if isinstance(result, ToolError):
            part.state = "output-error"
            part.errorText = result.message
            logger.warning("Tool %s failed: %s", part.toolName, result.message)
            return [self._part_event(part)]

        part.state = "output-available"
        events = [self._part_event(part)]
        for item in result.results:
            events.extend(self._add_source(Source.from_url(item.url, item.title)))
        return events

    def _compute_metadata(self, event: FinishEvent, end_timestamp: float) -> Metadata:
        start = self._start_timestamp if self._start_timestamp is not None else end_timestamp
        pricing = self.pricing.get_token_costs(self.context.model_id)
        kwargs: dict[str, Any] = dict(
            input_tokens=event.inputTokens,
            output_tokens=event.outputTokens,
            total_time_ms=end_timestamp - start,
            first_token_timestamp=self._first_token_timestamp,
            start_timestamp=start,
            model_id=self.context.model_id,
            search_enabled=self.context.search_enabled,
            sources=self.sources,
            ocr_cost=self.context.ocr_cost,
            pricing=self.pricing,
        )
        try:
            return calculate_response_metadata(
                input_cost_per_million=pricing.input_cost_per_million,
                output_cost_per_million=pricing.output_cost_per_million,
                **kwargs,
            )
        except (ValueError, ArithmeticError) as e:
            logger.warning("Metrics failed for message %s, using zero cost: %s", self.message.id, e)
            kwargs.update(ocr_cost=0.0, search_enabled=True, sources=[])
            return calculate_response_metadata(
                input_cost_per_million=FREE.input_cost_per_million,
                output_cost_per_million=FREE.output_cost_per_million,
                **kwargs,
            )

    async def _finish(self, event: FinishEvent) -> AsyncGenerator[Event, None]:
        self._close_reasoning()
        metadata = self._compute_metadata(event, self._clock())
        self.message.metadata = metadata
        self._finalized = True

        logger.info(
            "Message %s complete: %d in / %d out tokens, $%.6f",
            self.message.id,
            metadata.inputTokens,
            metadata.outputTokens,
            metadata.costBreakdown.total,
        )
        yield Event(type="message.metadata", properties={"metadata": metadata.model_dump()})
        yield Event(type="message.finished", properties={"message": self.message.model_dump()})
        self._notify_finish()

    def mark_stopped(self) -> None:
        """Freeze the message as stopped by the user unless already finalized."""
        if self._finalized:
            return
        self._close_reasoning()
        self.message.stoppedByUser = True
        self.message.stoppedModelId = self.context.model_id
        self._finalized = True

    def _notify_finish(self) -> None:
        if self.handlers.on_finish:
            self.handlers.on_finish(self.message)
