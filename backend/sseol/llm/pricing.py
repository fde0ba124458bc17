"""LLM pricing table and cost calculator.

Prices are USD per 1 million tokens.
"""

from __future__ import annotations

from dataclasses import dataclass

from sseol.models.placement import LLMCost


@dataclass(frozen=True)
class ModelPricing:
    input_per_million: float
    output_per_million: float
    cache_read_per_million: float | None = None
    cache_write_per_million: float | None = None
    # Long context pricing, e.g. >200K input tokens for Claude
    long_context_multiplier: float | None = None
    long_context_threshold: int | None = None


_CLAUDE_SONNET = ModelPricing(
    input_per_million=3.0,
    output_per_million=15.0,
    cache_read_per_million=0.3,
    cache_write_per_million=3.75,
    long_context_multiplier=1.5,
    long_context_threshold=200_000,
)

PRICING: dict[str, ModelPricing] = {
    "anthropic/claude-sonnet-4.5": _CLAUDE_SONNET,
    "claude-sonnet-4-5": _CLAUDE_SONNET,
    "gemini-2.5-flash": ModelPricing(
        input_per_million=0.3,
        output_per_million=2.5,
        cache_read_per_million=0.03,
    ),
    "default": ModelPricing(input_per_million=1.0, output_per_million=5.0),
}


def get_pricing(model: str) -> ModelPricing:
    if model in PRICING:
        return PRICING[model]
    # Dated snapshots, e.g. claude-sonnet-4-5-20250929
    for key, pricing in PRICING.items():
        if key != "default" and model.startswith(key):
            return pricing
    return PRICING["default"]


def calculate_cost(
    model: str,
    input_tokens: int,
    output_tokens: int,
    cached_tokens: int = 0,
) -> LLMCost:
    pricing = get_pricing(model)

    multiplier = 1.0
    if (
        pricing.long_context_threshold
        and pricing.long_context_multiplier
        and input_tokens > pricing.long_context_threshold
    ):
        multiplier = pricing.long_context_multiplier

    effective_input = input_tokens - cached_tokens
    input_cost = effective_input / 1_000_000 * pricing.input_per_million * multiplier
    output_cost = output_tokens / 1_000_000 * pricing.output_per_million * multiplier

    cache_cost = 0.0
    if pricing.cache_read_per_million:
        cache_cost = cached_tokens / 1_000_000 * pricing.cache_read_per_million

    cache_discount = 0.0
    if cached_tokens > 0:
        cache_discount = (
            cached_tokens / 1_000_000 * pricing.input_per_million * multiplier - cache_cost
        )

    return LLMCost(
        input=input_cost + cache_cost,
        output=output_cost,
        total=input_cost + cache_cost + output_cost,
        cache_discount=cache_discount if cache_discount > 0 else None,
    )


def format_cost(cost: float) -> str:
    if cost < 0.001:
        return "<$0.001"
    return f"${cost:.4f}"


def format_tokens(tokens: int) -> str:
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 10_000:
        return f"{tokens / 1_000:.1f}K"
    return f"{tokens:,}"
