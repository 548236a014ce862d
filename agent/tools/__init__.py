"""Tools for the agent."""

from .search import (
    ExtractInput,
    SearchInput,
    SearchTools,
)

__all__ = [
    "SearchTools",
    "SearchInput",
    "ExtractInput",
]
