"""Model pricing and tier tables."""

from dataclasses import dataclass

from ..config import DEFAULT_MODEL
from ..models import ModelTier


@dataclass(frozen=True)
class ModelPricing:
    """Per-model input/output pricing in USD per 1M tokens."""

    input_per_1m: float
    output_per_1m: float


MODEL_PRICING: dict[str, ModelPricing] = {
    "claude-3-5-haiku-20241022": ModelPricing(input_per_1m=0.25, output_per_1m=1.25),
    "claude-sonnet-4-5-20250929": ModelPricing(input_per_1m=3.0, output_per_1m=15.0),
    "claude-opus-4-5-20251101": ModelPricing(input_per_1m=15.0, output_per_1m=75.0),
}

TIER_TO_MODEL: dict[ModelTier, str] = {
    ModelTier.FAST: "claude-3-5-haiku-20241022",
    ModelTier.BALANCED: "claude-sonnet-4-5-20250929",
    ModelTier.POWERFUL: "claude-opus-4-5-20251101",
}


def get_pricing(model: str | None) -> ModelPricing:
    """Pricing for a model id; unknown ids use the default model's pricing."""
    if model and model in MODEL_PRICING:
        return MODEL_PRICING[model]
    return MODEL_PRICING[DEFAULT_MODEL]


def calculate_cost(model: str | None, input_tokens: int, output_tokens: int) -> float:
    """Cost in USD of one invocation."""
    pricing = get_pricing(model)
    return (
        (input_tokens / 1_000_000) * pricing.input_per_1m
        + (output_tokens / 1_000_000) * pricing.output_per_1m
    )


def model_for_tier(tier: ModelTier) -> str:
    return TIER_TO_MODEL[tier]
