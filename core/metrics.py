"""
Cost and performance metrics for a completed response.
"""

from typing import Sequence

from config.defaults import DEFAULT_SEARCH_RESULT_ESTIMATE
from .models import CostBreakdown, Metadata, Source
from .pricing import TOKENS_PER_MILLION, PricingTable, sanitize_price

_default_pricing = PricingTable()


def calculate_chat_cost(
    input_tokens: int,
    output_tokens: int,
    input_cost_per_million: float,
    output_cost_per_million: float,
) -> float:
    """Model cost in USD for the given token usage."""
    input_rate = sanitize_price(input_cost_per_million)
    output_rate = sanitize_price(output_cost_per_million)
    return (max(0, input_tokens) * input_rate + max(0, output_tokens) * output_rate) / TOKENS_PER_MILLION


def calculate_response_metadata(
    *,
    input_tokens: int,
    output_tokens: int,
    total_time_ms: float,
    first_token_timestamp: float | None,
    start_timestamp: float,
    model_id: str,
    input_cost_per_million: float,
    output_cost_per_million: float,
    search_enabled: bool = False,
    sources: Sequence[Source] | None = None,
    ocr_cost: float = 0.0,
    pricing: PricingTable | None = None,
) -> Metadata:
    """
    Calculate metadata for a completed chat response.

    The search cost uses the number of discovered sources when search was
    enabled and sources were collected; otherwise it falls back to the
    pre-completion estimate of ten results.

    Args:
        input_tokens: Prompt tokens reported by the provider
        output_tokens: Completion tokens reported by the provider
        total_time_ms: Wall time from request start to completion
        first_token_timestamp: Clock reading at the first token, if any
        start_timestamp: Clock reading at request start
        model_id: Model identifier recorded on the message
        input_cost_per_million: USD per million input tokens
        output_cost_per_million: USD per million output tokens
        search_enabled: Whether search tools were offered
        sources: Sources discovered during the stream
        ocr_cost: Cost incurred by document OCR
        pricing: Table used to price the search batch

    Returns:
        Metadata with tokens, cost breakdown, timing and sources
    """
    pricing = pricing or _default_pricing
    input_tokens = max(0, int(input_tokens or 0))
    output_tokens = max(0, int(output_tokens or 0))

    result_count = len(sources) if search_enabled and sources is not None else DEFAULT_SEARCH_RESULT_ESTIMATE
    search_cost = pricing.price_per_search_batch(result_count) if result_count > 0 else 0.0

    model_cost = calculate_chat_cost(
        input_tokens, output_tokens, input_cost_per_million, output_cost_per_million
    )

    if output_tokens > 0 and total_time_ms > 0:
        tokens_per_second = output_tokens / (total_time_ms / 1000)
    else:
        tokens_per_second = 0.0

    if first_token_timestamp is not None:
        time_to_first_token_ms = max(0, round(first_token_timestamp - start_timestamp))
    else:
        time_to_first_token_ms = 0

    return Metadata(
        inputTokens=input_tokens,
        outputTokens=output_tokens,
        costBreakdown=CostBreakdown.of(model_cost, search_cost, sanitize_price(ocr_cost)),
        model=model_id,
        tokensPerSecond=tokens_per_second,
        timeToFirstTokenMs=time_to_first_token_ms,
        sources=list(sources) if sources else None,
    )
