"""
Domain events emitted while a response streams.

The server layer forwards these to clients as Server-Sent Events.
"""

from typing import Any

from pydantic import BaseModel, Field


class Event(BaseModel):
    """Domain event delivered to the transport."""

    type: str
    properties: dict[str, Any] = Field(default_factory=dict)
