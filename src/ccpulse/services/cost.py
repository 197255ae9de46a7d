"""Model pricing table and cost estimation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ModelPricing(BaseModel):
    """Per-million-token rates (USD) for one model family."""

    model_config = ConfigDict(frozen=True)

    input: float
    output: float
    cache_read: float
    cache_write: float


# Prices per million tokens (USD), Claude 4.5 family
OPUS = ModelPricing(input=5.0, output=25.0, cache_read=0.50, cache_write=6.25)
SONNET = ModelPricing(input=3.0, output=15.0, cache_read=0.30, cache_write=3.75)
HAIKU = ModelPricing(input=1.0, output=5.0, cache_read=0.10, cache_write=1.25)

# Unknown models are billed at Sonnet rates
DEFAULT_PRICING = SONNET


def get_pricing(model: str) -> ModelPricing:
    """Get pricing for a model by family substring, falling back to Sonnet."""
    lowered = model.lower()
    if "opus" in lowered:
        return OPUS
    if "haiku" in lowered:
        return HAIKU
    return DEFAULT_PRICING


def estimate_cost(
    model: str,
    input_tokens: int = 0,
    output_tokens: int = 0,
    cache_read_tokens: int = 0,
    cache_write_tokens: int = 0,
) -> float:
    """Estimate the USD cost of a token breakdown for ``model``."""
    pricing = get_pricing(model)
    return (
        (input_tokens / 1_000_000) * pricing.input
        + (output_tokens / 1_000_000) * pricing.output
        + (cache_read_tokens / 1_000_000) * pricing.cache_read
        + (cache_write_tokens / 1_000_000) * pricing.cache_write
    )


def cache_savings(model: str, cache_read_tokens: int) -> float:
    """Cost avoided by reading ``cache_read_tokens`` from cache instead of input."""
    pricing = get_pricing(model)
    return cache_read_tokens * (pricing.input - pricing.cache_read) / 1_000_000


def model_display_name(model: str) -> str:
    """Map a model ID to a short display label."""
    if "opus" in model:
        return "Opus 4.5"
    if "sonnet" in model:
        return "Sonnet 4.5"
    if "haiku" in model:
        return "Haiku 4.5"
    cleaned = model.replace("claude-", "").replace("-", " ")
    return " ".join(word.capitalize() for word in cleaned.split(" "))
