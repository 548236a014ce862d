"""SearchConfig model."""

from pydantic import BaseModel, Field

from .defaults import PARALLEL_BASE_URL, SEARCH_MAX_RESULTS, SEARCH_TIMEOUT_SECONDS


class SearchConfig(BaseModel):
    """Web search provider settings."""

    base_url: str = Field(default=PARALLEL_BASE_URL, description="Parallel API base URL")
    timeout: float = Field(default=SEARCH_TIMEOUT_SECONDS, description="Request timeout in seconds")
    max_results: int = Field(default=SEARCH_MAX_RESULTS, description="Maximum results per search")
