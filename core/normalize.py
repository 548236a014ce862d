"""
Display normalization for message parts.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable

from .models import Part, ReasoningPart, SearchResults, Source, TextPart, ToolError, ToolPart

_REDACTED_AFTER_NEWLINE = re.compile(r"\n\s*\[REDACTED\]")
_REDACTED = re.compile(r"\[REDACTED\]")
_BLANK_LINES = re.compile(r"\n\s*\n")


@dataclass
class NormalizedSearchResult:
    sources: list[Source] = field(default_factory=list)
    error: str | None = None
    complete: bool = False


def normalize_reasoning_text(text: str | None) -> str | None:
    """
    Clean provider reasoning text for display.

    Strips ``[REDACTED]`` markers with the whitespace before them, turns
    literal ``\\n`` sequences into newlines and collapses blank lines.
    Returns None when nothing is left.
    """
    if not text:
        return None

    cleaned = _REDACTED_AFTER_NEWLINE.sub("", text)
    cleaned = _REDACTED.sub("", cleaned)
    cleaned = cleaned.replace("\\n", "\n")
    cleaned = _BLANK_LINES.sub("\n", cleaned)
    cleaned = cleaned.strip()
    return cleaned or None


def normalize_search_tool_part(part: ToolPart) -> NormalizedSearchResult:
    """Extract sources or the error of a search/extract part with URL keyed ids."""
    complete = part.state in ("output-available", "output-error")

    if part.state == "output-error" or isinstance(part.output, ToolError):
        message = part.errorText or (part.output.message if isinstance(part.output, ToolError) else None)
        return NormalizedSearchResult(error=message or "Search failed", complete=complete)

    if isinstance(part.output, SearchResults):
        sources = [
            Source(
                id=item.url or f"search-result-{item.title}",
                url=item.url,
                title=item.title,
            )
            for item in part.output.results
        ]
        return NormalizedSearchResult(sources=sources, complete=complete)

    return NormalizedSearchResult(complete=complete)


def extract_message_text(parts: Iterable[Part]) -> str:
    return "".join(part.text for part in parts if isinstance(part, TextPart))


def has_reasoning_content(part: ReasoningPart) -> bool:
    return normalize_reasoning_text(part.text) is not None


def has_search_content(part: Part) -> bool:
    if not isinstance(part, ToolPart):
        return False
    result = normalize_search_tool_part(part)
    return bool(result.sources) or result.error is not None
