"""Main Config model."""

from pydantic import BaseModel, Field

from .defaults import DEFAULT_MODEL
from .pricing_config import PricingConfig
from .search_config import SearchConfig


class Config(BaseModel):
    """Main configuration model."""

    default_model: str = Field(
        default=DEFAULT_MODEL,
        description="Model used when a request does not name one",
    )
    pricing: PricingConfig = Field(
        default_factory=PricingConfig,
        description="Pricing overrides and search/extract prices",
    )
    search: SearchConfig = Field(
        default_factory=SearchConfig,
        description="Web search provider settings",
    )
