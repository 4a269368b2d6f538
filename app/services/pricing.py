# =============================================================================
# Model Pricing — Cost Estimate per Drafted Appeal
# =============================================================================
#
# Maps model name → per-token costs in USD. The orchestrator sums the
# usage of the five section calls and stores the estimate on the appeal
# record so the admin view can show what each letter cost.
#
# estimate_cost() returns None for unknown models rather than 0.0: an
# unknown price is not a zero price.
#
# Prices are stored per TOKEN. Update when provider pricing changes.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelPricing:
    """Per-token costs for a model."""

    input_cost_per_token: float
    output_cost_per_token: float
    provider_label: str


PRICING_REGISTRY: dict[str, ModelPricing] = {
    # --- OpenAI ---
    "gpt-4o-mini": ModelPricing(0.15 / 1_000_000, 0.60 / 1_000_000, "OpenAI"),
    "gpt-4o": ModelPricing(2.50 / 1_000_000, 10.00 / 1_000_000, "OpenAI"),
    "gpt-4.1-mini": ModelPricing(0.40 / 1_000_000, 1.60 / 1_000_000, "OpenAI"),
    "gpt-4.1": ModelPricing(2.00 / 1_000_000, 8.00 / 1_000_000, "OpenAI"),

    # --- Anthropic ---
    "claude-haiku-4-5": ModelPricing(0.80 / 1_000_000, 4.00 / 1_000_000, "Anthropic"),
    "claude-sonnet-4-6": ModelPricing(3.00 / 1_000_000, 15.00 / 1_000_000, "Anthropic"),

    # --- DeepSeek ---
    "deepseek-chat": ModelPricing(0.14 / 1_000_000, 0.28 / 1_000_000, "DeepSeek"),
}


def _lookup(model: str) -> ModelPricing | None:
    pricing = PRICING_REGISTRY.get(model)
    if pricing is not None:
        return pricing
    # Dated snapshots ("gpt-4o-mini-2024-07-18") price like their base model.
    # Longest prefix first so "gpt-4o-mini-..." does not match "gpt-4o".
    for name in sorted(PRICING_REGISTRY, key=len, reverse=True):
        if model.startswith(f"{name}-"):
            return PRICING_REGISTRY[name]
    return None


def estimate_cost(model: str, input_tokens: int, output_tokens: int) -> float | None:
    """
    Estimated cost in USD, rounded to 6 decimal places.

    Returns None if the model is not in the registry.
    """
    pricing = _lookup(model)
    if pricing is None:
        return None

    cost = (
        pricing.input_cost_per_token * input_tokens
        + pricing.output_cost_per_token * output_tokens
    )
    return round(cost, 6)
