"""Metadata models."""

from pydantic import BaseModel, Field

from .source import Source


class CostBreakdown(BaseModel):
    model: float = Field(default=0.0, ge=0)
    search: float = Field(default=0.0, ge=0)
    ocr: float = Field(default=0.0, ge=0)
    total: float = Field(default=0.0, ge=0)

    @classmethod
    def of(cls, model: float, search: float = 0.0, ocr: float = 0.0) -> "CostBreakdown":
        return cls(model=model, search=search, ocr=ocr, total=model + search + ocr)


class Metadata(BaseModel):
    """Cost and performance summary of a finalized assistant message."""

    inputTokens: int = Field(ge=0)
    outputTokens: int = Field(ge=0)
    costBreakdown: CostBreakdown
    model: str
    tokensPerSecond: float = Field(ge=0)
    timeToFirstTokenMs: int = Field(ge=0)
    sources: list[Source] | None = None
