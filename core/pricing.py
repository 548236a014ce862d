"""
Pricing table lookup.

Resolves a model identifier to per-million token prices and prices search
and extract operations. A PricingTable is read-only once built and is shared
across concurrent requests.
"""

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

import httpx

from config.defaults import (
    EXTRACT_COST_PER_URL,
    MODEL_VARIANT_SEPARATOR,
    OPENROUTER_MODELS_URL,
    PRICING_FETCH_TIMEOUT_SECONDS,
    SEARCH_COST_PER_EXTRA_RESULT,
    SEARCH_COST_PER_REQUEST,
    SEARCH_RESULTS_PER_REQUEST,
)
from config.pricing_config import PricingConfig

logger = logging.getLogger(__name__)

TOKENS_PER_MILLION = 1_000_000


def sanitize_price(value: Any) -> float:
    """Coerce a price to a finite non-negative float, falling back to 0."""
    if value is None:
        return 0.0
    try:
        price = float(value)
    except (TypeError, ValueError):
        price = math.nan
    if math.isnan(price) or math.isinf(price) or price < 0:
        logger.warning("Invalid price %r, using 0", value)
        return 0.0
    return price


def strip_model_suffix(model_id: str) -> str:
    """Strip a variant suffix such as ``:online`` from a model identifier."""
    return model_id.split(MODEL_VARIANT_SEPARATOR, 1)[0].strip()


@dataclass(frozen=True)
class ModelPricing:
    input_cost_per_million: float = 0.0
    output_cost_per_million: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "input_cost_per_million", sanitize_price(self.input_cost_per_million))
        object.__setattr__(self, "output_cost_per_million", sanitize_price(self.output_cost_per_million))


FREE = ModelPricing()


class PricingTable:
    """Read-only price lookup for models, search and extract."""

    def __init__(
        self,
        models: Mapping[str, ModelPricing] | None = None,
        search_cost_per_request: float = SEARCH_COST_PER_REQUEST,
        search_results_per_request: int = SEARCH_RESULTS_PER_REQUEST,
        search_cost_per_extra_result: float = SEARCH_COST_PER_EXTRA_RESULT,
        extract_cost_per_url: float = EXTRACT_COST_PER_URL,
    ) -> None:
        self._models = MappingProxyType(dict(models or {}))
        self.search_cost_per_request = sanitize_price(search_cost_per_request)
        self.search_results_per_request = max(1, int(search_results_per_request))
        self.search_cost_per_extra_result = sanitize_price(search_cost_per_extra_result)
        self.extract_cost_per_url = sanitize_price(extract_cost_per_url)

    @classmethod
    def from_config(
        cls, config: PricingConfig, remote: Mapping[str, ModelPricing] | None = None
    ) -> "PricingTable":
        """Build a table from fetched prices with configured overrides on top."""
        models = dict(remote or {})
        for model_id, price in config.models.items():
            models[strip_model_suffix(model_id)] = ModelPricing(price.input, price.output)
        return cls(
            models,
            search_cost_per_request=config.search_cost_per_request,
            search_results_per_request=config.search_results_per_request,
            search_cost_per_extra_result=config.search_cost_per_extra_result,
            extract_cost_per_url=config.extract_cost_per_url,
        )

    @property
    def models(self) -> Mapping[str, ModelPricing]:
        return self._models

    def get_token_costs(self, model_id: str | None) -> ModelPricing:
        """
        Get per-million token prices for a model.

        Variant suffixes are stripped so ``vendor/model:online`` resolves to
        ``vendor/model``. Unknown or malformed identifiers cost nothing.
        """
        if not model_id or not isinstance(model_id, str):
            logger.warning("Cannot price malformed model id: %r", model_id)
            return FREE

        base_model_id = strip_model_suffix(model_id)
        pricing = self._models.get(base_model_id)
        if pricing is None:
            logger.warning("No pricing for model %s, using zero cost", base_model_id)
            return FREE
        return pricing

    def price_per_search_batch(self, result_count: int) -> float:
        """Price one search returning ``result_count`` results."""
        if result_count <= 0:
            return 0.0
        extra = max(0, result_count - self.search_results_per_request)
        return self.search_cost_per_request + extra * self.search_cost_per_extra_result

    def price_per_extract(self, url_count: int) -> float:
        """
        Price one extract over ``url_count`` URLs.

        Lookup only: response metadata bills search results, not extracts.
        """
        if url_count <= 0:
            return 0.0
        return url_count * self.extract_cost_per_url


def parse_openrouter_models(payload: Any) -> dict[str, ModelPricing]:
    """
    Convert an OpenRouter ``/models`` payload into per-million prices.

    OpenRouter reports prices per token as decimal strings.
    """
    models: dict[str, ModelPricing] = {}
    if not isinstance(payload, dict):
        return models

    for entry in payload.get("data") or []:
        if not isinstance(entry, dict) or not entry.get("id"):
            continue
        pricing = entry.get("pricing") or {}
        models[entry["id"]] = ModelPricing(
            input_cost_per_million=sanitize_price(pricing.get("prompt")) * TOKENS_PER_MILLION,
            output_cost_per_million=sanitize_price(pricing.get("completion")) * TOKENS_PER_MILLION,
        )
    return models


async def fetch_openrouter_pricing(
    client: httpx.AsyncClient | None = None,
    url: str = OPENROUTER_MODELS_URL,
) -> dict[str, ModelPricing]:
    """
    Fetch model prices from OpenRouter.

    Failures are logged and produce an empty mapping so that pricing never
    blocks the service.

    Args:
        client: Optional HTTP client (a short-lived one is created otherwise)
        url: Models endpoint URL

    Returns:
        Mapping of model ID to ModelPricing
    """
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=PRICING_FETCH_TIMEOUT_SECONDS) as own_client:
                response = await own_client.get(url)
        else:
            response = await client.get(url)
        response.raise_for_status()
        models = parse_openrouter_models(response.json())
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Failed to fetch model pricing from %s: %s", url, e)
        return {}

    logger.info("Loaded pricing for %d models", len(models))
    return models
