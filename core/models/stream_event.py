"""Wire events of the model output stream."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field


class TextStartEvent(BaseModel):
    type: Literal["text-start"] = "text-start"
    id: str | None = None


class TextDeltaEvent(BaseModel):
    type: Literal["text-delta"] = "text-delta"
    delta: str


class ReasoningDeltaEvent(BaseModel):
    type: Literal["reasoning-delta"] = "reasoning-delta"
    delta: str


class ToolCallEvent(BaseModel):
    type: Literal["tool-call"] = "tool-call"
    toolCallId: str
    toolName: str
    input: dict[str, Any] = Field(default_factory=dict)
    providerExecuted: bool = False


class ToolResultEvent(BaseModel):
    type: Literal["tool-result"] = "tool-result"
    toolCallId: str
    toolName: str
    output: Any = None


class SourceEvent(BaseModel):
    type: Literal["source"] = "source"
    id: str | None = None
    sourceType: Literal["url"] = "url"
    url: str
    title: str | None = None


class FinishEvent(BaseModel):
    type: Literal["finish"] = "finish"
    inputTokens: int = 0
    outputTokens: int = 0
    finishReason: str | None = None


StreamEvent = Annotated[
    TextStartEvent
    | TextDeltaEvent
    | ReasoningDeltaEvent
    | ToolCallEvent
    | ToolResultEvent
    | SourceEvent
    | FinishEvent,
    Field(discriminator="type"),
]
