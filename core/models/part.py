"""Part models."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from .tool_result import ToolResult


class TextPart(BaseModel):
    type: Literal["text"] = "text"
    text: str = ""


class ReasoningPart(BaseModel):
    type: Literal["reasoning"] = "reasoning"
    text: str = ""
    state: Literal["streaming", "done"] = "streaming"


class FilePart(BaseModel):
    type: Literal["file"] = "file"
    id: str
    url: str
    filename: str | None = None
    mediaType: str
    storagePath: str | None = None


class ToolPart(BaseModel):
    type: Literal["tool"] = "tool"
    toolName: Literal["search", "extract"]
    toolCallId: str
    state: Literal["input-available", "output-available", "output-error"] = "input-available"
    input: dict[str, Any] = Field(default_factory=dict)
    output: ToolResult | None = None
    errorText: str | None = None


Part = Annotated[TextPart | ReasoningPart | FilePart | ToolPart, Field(discriminator="type")]
