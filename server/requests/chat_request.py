"""ChatRequest model."""

from pydantic import BaseModel, Field

from core import Message


class ChatRequest(BaseModel):
    messages: list[Message] = Field(min_length=1)
    threadId: str | None = None
    modelId: str | None = None
    openrouterClientKey: str | None = None
    parallelClientKey: str | None = None
    searchEnabled: bool = False
    reasoningLevel: str | None = None
    isRegeneration: bool = False
    customInstructions: str | None = None
