"""
Domain models for the chat streaming core.

These are the core data structures used throughout the application.
"""

from .message import Message
from .metadata import CostBreakdown, Metadata
from .part import FilePart, Part, ReasoningPart, TextPart, ToolPart
from .source import Source
from .stream_event import (
    FinishEvent,
    ReasoningDeltaEvent,
    SourceEvent,
    StreamEvent,
    TextDeltaEvent,
    TextStartEvent,
    ToolCallEvent,
    ToolResultEvent,
)
from .tool_result import (
    SearchResultItem,
    SearchResults,
    ToolError,
    ToolResult,
    parse_tool_result,
)
from .utils import gen_id

__all__ = [
    # Utils
    "gen_id",
    # Message models
    "Message",
    "Metadata",
    "CostBreakdown",
    "Source",
    # Part models
    "TextPart",
    "ReasoningPart",
    "FilePart",
    "ToolPart",
    "Part",
    # Tool results
    "SearchResultItem",
    "SearchResults",
    "ToolError",
    "ToolResult",
    "parse_tool_result",
    # Stream events
    "TextStartEvent",
    "TextDeltaEvent",
    "ReasoningDeltaEvent",
    "ToolCallEvent",
    "ToolResultEvent",
    "SourceEvent",
    "FinishEvent",
    "StreamEvent",
]
