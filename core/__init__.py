"""
Core business logic package.

This package contains the transport-agnostic streaming, metrics and
reconciliation logic. The server package provides HTTP bindings around it.
"""

from .abort import AbortSignal
from .context import RequestContext
from .events import Event
from .exceptions import (
    AbortedError,
    CoreError,
    InvalidOperationError,
    NotFoundError,
    StreamError,
    format_provider_error,
)
from .messages import (
    ChatAgent,
    get_thread_message,
    list_thread_messages,
    save_stopped_message,
    stop_generation,
    stream_chat_response,
)
from .metrics import calculate_chat_cost, calculate_response_metadata
from .models import (
    CostBreakdown,
    FilePart,
    FinishEvent,
    Message,
    Metadata,
    Part,
    ReasoningDeltaEvent,
    ReasoningPart,
    SearchResultItem,
    SearchResults,
    Source,
    SourceEvent,
    StreamEvent,
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
from .normalize import (
    NormalizedSearchResult,
    extract_message_text,
    has_reasoning_content,
    has_search_content,
    normalize_reasoning_text,
    normalize_search_tool_part,
)
from .persistence import InMemoryPersistence, PersistenceGateway
from .pricing import ModelPricing, PricingTable, fetch_openrouter_pricing, strip_model_suffix
from .reconcile import message_signatures, reconcile_messages
from .stream import StreamCoordinator, StreamHandlers, ToolRunner

__all__ = [
    # Exceptions
    "CoreError",
    "NotFoundError",
    "InvalidOperationError",
    "AbortedError",
    "StreamError",
    "format_provider_error",
    # Request scope
    "AbortSignal",
    "RequestContext",
    "Event",
    # Models
    "Message",
    "Metadata",
    "CostBreakdown",
    "Source",
    "Part",
    "TextPart",
    "ReasoningPart",
    "FilePart",
    "ToolPart",
    "SearchResultItem",
    "SearchResults",
    "ToolError",
    "ToolResult",
    "parse_tool_result",
    "gen_id",
    # Stream events
    "StreamEvent",
    "TextStartEvent",
    "TextDeltaEvent",
    "ReasoningDeltaEvent",
    "ToolCallEvent",
    "ToolResultEvent",
    "SourceEvent",
    "FinishEvent",
    # Pricing and metrics
    "ModelPricing",
    "PricingTable",
    "fetch_openrouter_pricing",
    "strip_model_suffix",
    "calculate_chat_cost",
    "calculate_response_metadata",
    # Streaming
    "StreamCoordinator",
    "StreamHandlers",
    "ToolRunner",
    # Reconciliation
    "message_signatures",
    "reconcile_messages",
    # Normalization
    "NormalizedSearchResult",
    "normalize_reasoning_text",
    "normalize_search_tool_part",
    "extract_message_text",
    "has_reasoning_content",
    "has_search_content",
    # Persistence
    "PersistenceGateway",
    "InMemoryPersistence",
    # Message operations
    "ChatAgent",
    "stream_chat_response",
    "stop_generation",
    "save_stopped_message",
    "list_thread_messages",
    "get_thread_message",
]
