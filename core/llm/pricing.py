"""Token cost estimation for chat completions."""
from typing import Dict, Optional

from core.config_loader import PricingRate

# USD per 1M tokens
MODEL_PRICING_USD: Dict[str, PricingRate] = {
    'gpt-4o-mini': PricingRate(input=0.15, output=0.60),
    'gpt-4.1': PricingRate(input=2.00, output=8.00),
    'gpt-4.1-mini': PricingRate(input=0.40, output=1.60),
}


def estimate_cost(
    prompt_tokens: int,
    completion_tokens: int,
    model: str,
    pricing_override: Optional[PricingRate] = None
) -> Optional[float]:
    """Return the USD cost rounded to 6 decimals, or None when the model has no known price."""
    pricing = pricing_override or MODEL_PRICING_USD.get(model)
    if pricing is None:
        return None

    input_cost = (prompt_tokens / 1_000_000) * pricing.input
    output_cost = (completion_tokens / 1_000_000) * pricing.output
    return round(input_cost + output_cost, 6)
