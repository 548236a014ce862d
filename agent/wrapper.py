"""
Wrapper that adapts Pydantic AI streaming to the wire event protocol.

Uses run_stream_events() so tool calls and results arrive as events while
the response streams. Tools run inside the agent, so tool calls are emitted
with ``providerExecuted`` set and the coordinator only records them.
"""
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Sequence

from pydantic_ai import Agent, AgentRunResultEvent, DocumentUrl, ImageUrl
from pydantic_ai.messages import (
    FunctionToolCallEvent,
    FunctionToolResultEvent,
    ModelMessage,
    ModelRequest,
    ModelResponse,
    PartDeltaEvent,
    PartStartEvent,
    RetryPromptPart,
    TextPart,
    TextPartDelta,
    ThinkingPart,
    ThinkingPartDelta,
    UserPromptPart,
)

from config import DEFAULT_MODEL
from core.context import RequestContext
from core.exceptions import InvalidOperationError
from core.models import (
    FilePart,
    FinishEvent,
    Message,
    ReasoningDeltaEvent,
    StreamEvent,
    TextDeltaEvent,
    TextStartEvent,
    ToolCallEvent,
    ToolResultEvent,
)
from core.normalize import extract_message_text
from .agent import ToolDeps, create_agent, get_model_settings
from .tools.search import SearchTools

logger = logging.getLogger(__name__)


def _user_content(message: Message) -> str | list[Any]:
    """Build the prompt content of a user message, attachments included."""
    text = extract_message_text(message.parts)
    files = [part for part in message.parts if isinstance(part, FilePart)]
    if not files:
        return text

    content: list[Any] = [text] if text else []
    for part in files:
        if part.mediaType.startswith("image/"):
            content.append(ImageUrl(url=part.url))
        else:
            content.append(DocumentUrl(url=part.url))
    return content


def build_history(messages: Sequence[Message]) -> tuple[str | list[Any], list[ModelMessage]]:
    """
    Split a conversation into the current prompt and prior model history.

    Only text and attachments are replayed; tool parts and reasoning of
    earlier turns are not sent back to the model.

    Raises:
        InvalidOperationError: If the conversation does not end with a user turn
    """
    if not messages or messages[-1].role != "user":
        raise InvalidOperationError("Conversation must end with a user message")

    history: list[ModelMessage] = []
    for message in messages[:-1]:
        if message.role == "user":
            history.append(ModelRequest(parts=[UserPromptPart(content=_user_content(message))]))
        else:
            text = extract_message_text(message.parts)
            if text:
                history.append(ModelResponse(parts=[TextPart(content=text)]))

    return _user_content(messages[-1]), history


def translate_event(event: Any) -> list[StreamEvent]:
    """Translate one Pydantic AI stream event into wire events."""
    if isinstance(event, PartStartEvent):
        if isinstance(event.part, TextPart):
            events: list[StreamEvent] = [TextStartEvent()]
            if event.part.content:
                events.append(TextDeltaEvent(delta=event.part.content))
            return events
        if isinstance(event.part, ThinkingPart) and event.part.content:
            return [ReasoningDeltaEvent(delta=event.part.content)]
        return []

    if isinstance(event, PartDeltaEvent):
        if isinstance(event.delta, TextPartDelta) and event.delta.content_delta:
            return [TextDeltaEvent(delta=event.delta.content_delta)]
        if isinstance(event.delta, ThinkingPartDelta) and event.delta.content_delta:
            return [ReasoningDeltaEvent(delta=event.delta.content_delta)]
        # Tool call argument deltas arrive complete in FunctionToolCallEvent
        return []

    if isinstance(event, FunctionToolCallEvent):
        try:
            args = event.part.args_as_dict()
        except ValueError:
            logger.warning("Unparseable arguments for tool %s", event.part.tool_name)
            args = {}
        return [
            ToolCallEvent(
                toolCallId=event.part.tool_call_id,
                toolName=event.part.tool_name,
                input=args,
                providerExecuted=True,
            )
        ]

    if isinstance(event, FunctionToolResultEvent):
        result = event.result
        if result.tool_name is None:
            return []
        if isinstance(result, RetryPromptPart):
            message = result.content if isinstance(result.content, str) else "Invalid tool arguments"
            output: Any = {"error": True, "message": message}
        else:
            output = result.content
        return [
            ToolResultEvent(
                toolCallId=result.tool_call_id,
                toolName=result.tool_name,
                output=output,
            )
        ]

    if isinstance(event, AgentRunResultEvent):
        usage = event.result.usage()
        return [
            FinishEvent(
                inputTokens=usage.input_tokens or 0,
                outputTokens=usage.output_tokens or 0,
                finishReason="stop",
            )
        ]

    return []


@dataclass
class AgentWrapper:
    """
    Wraps a Pydantic AI Agent to provide the ``stream_events`` interface
    consumed by the stream coordinator.
    """

    agent: Agent[ToolDeps, str]
    tools: SearchTools | None = None

    async def stream_events(
        self, messages: Sequence[Message], context: RequestContext
    ) -> AsyncIterator[StreamEvent]:
        """
        Stream the agent's response as wire events.

        Args:
            messages: Conversation ending with the user's turn
            context: Request settings; its abort signal is passed to tools

        Yields:
            Text, reasoning, tool and finish events in model order
        """
        prompt, history = build_history(messages)
        deps = ToolDeps(tools=self.tools, signal=context.signal)
        tool_call_count = 0

        logger.debug(
            "Starting agent stream with model=%s, reasoning=%s, %d history messages",
            context.model_id,
            context.reasoning_level,
            len(history),
        )

        async for event in self.agent.run_stream_events(
            prompt,
            message_history=history,
            deps=deps,
            model_settings=get_model_settings(context.reasoning_level),
        ):
            for out in translate_event(event):
                if isinstance(out, ToolCallEvent):
                    tool_call_count += 1
                yield out

        logger.debug("Agent stream complete: %d tool calls", tool_call_count)


def create_wrapper(
    model_id: str = DEFAULT_MODEL,
    api_key: str | None = None,
    search_tools: SearchTools | None = None,
    custom_instructions: str | None = None,
) -> AgentWrapper:
    """
    Create an AgentWrapper for one request.

    Search tools are registered on the agent only when ``search_tools`` is
    given.

    Args:
        model_id: OpenRouter model identifier
        api_key: OpenRouter API key
        search_tools: Search adapter configured with the Parallel key
        custom_instructions: User instructions added to the system prompt

    Returns:
        AgentWrapper ready to stream
    """
    agent = create_agent(
        model_id=model_id,
        api_key=api_key,
        search_enabled=search_tools is not None,
        custom_instructions=custom_instructions,
    )
    return AgentWrapper(agent=agent, tools=search_tools)
