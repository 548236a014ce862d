"""Message model."""

from typing import Literal

from pydantic import BaseModel, Field

from .metadata import Metadata
from .part import Part


class Message(BaseModel):
    id: str
    role: Literal["user", "assistant"]
    parts: list[Part] = Field(default_factory=list)
    metadata: Metadata | None = None
    stoppedByUser: bool = False
    stoppedModelId: str | None = None
    createdAt: float | None = None
    searchEnabled: bool | None = None
    reasoningLevel: str | None = None
