"""ToolResult models."""

import logging
from typing import Any, Literal

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

MALFORMED_OUTPUT_MESSAGE = "Malformed tool output"


class SearchResultItem(BaseModel):
    url: str
    title: str = ""


class SearchResults(BaseModel):
    results: list[SearchResultItem]


class ToolError(BaseModel):
    error: Literal[True] = True
    message: str


ToolResult = SearchResults | ToolError


def parse_tool_result(raw: Any) -> ToolResult:
    """
    Validate a raw tool output into a ToolResult.

    Anything that is neither ``{"results": [...]}`` nor
    ``{"error": true, "message": ...}`` degrades to a ToolError.
    """
    if isinstance(raw, (SearchResults, ToolError)):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    if not isinstance(raw, dict):
        logger.warning("Unexpected tool output type: %s", type(raw).__name__)
        return ToolError(message=MALFORMED_OUTPUT_MESSAGE)

    if raw.get("error") is True:
        message = raw.get("message")
        return ToolError(message=message if isinstance(message, str) and message else "Tool failed")

    try:
        return SearchResults.model_validate(raw)
    except ValidationError as e:
        logger.warning("Invalid tool output: %s", e.error_count())
        return ToolError(message=MALFORMED_OUTPUT_MESSAGE)
