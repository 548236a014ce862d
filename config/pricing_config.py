"""PricingConfig model."""

from pydantic import BaseModel, Field

from .defaults import (
    EXTRACT_COST_PER_URL,
    SEARCH_COST_PER_EXTRA_RESULT,
    SEARCH_COST_PER_REQUEST,
    SEARCH_RESULTS_PER_REQUEST,
)


class ModelPriceConfig(BaseModel):
    """Per-million token prices for one model."""

    input: float = Field(default=0.0, description="USD per million input tokens")
    output: float = Field(default=0.0, description="USD per million output tokens")


class PricingConfig(BaseModel):
    """Pricing overrides and search/extract prices."""

    fetch_remote: bool = Field(
        default=True,
        description="Load model prices from OpenRouter at startup",
    )
    models: dict[str, ModelPriceConfig] = Field(
        default_factory=dict,
        description="Per-model price overrides keyed by base model ID",
    )
    search_cost_per_request: float = Field(default=SEARCH_COST_PER_REQUEST)
    search_results_per_request: int = Field(default=SEARCH_RESULTS_PER_REQUEST)
    search_cost_per_extra_result: float = Field(default=SEARCH_COST_PER_EXTRA_RESULT)
    extract_cost_per_url: float = Field(default=EXTRACT_COST_PER_URL)
