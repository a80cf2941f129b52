"""LLM cost estimation.

Prices are in cents per million tokens as (input, output).
"""

from decimal import ROUND_HALF_UP, Decimal

COST_PER_MILLION: dict[str, tuple[int, int]] = {
    "claude-sonnet-4-20250514": (300, 1500),
    "claude-3-5-sonnet-20241022": (300, 1500),
    "claude-3-haiku-20240307": (25, 125),
    "claude-opus-4-5-20251101": (1500, 7500),
    "gpt-4o": (250, 1000),
    "gpt-4o-mini": (15, 60),
    "gpt-4-turbo": (1000, 3000),
}

DEFAULT_COST_PER_MILLION: tuple[int, int] = (300, 1500)

_MILLION = Decimal(1_000_000)


def price_for(model: str | None) -> tuple[int, int]:
    """Return (input, output) cents per million tokens for a model."""
    if model is None:
        return DEFAULT_COST_PER_MILLION
    return COST_PER_MILLION.get(model, DEFAULT_COST_PER_MILLION)


def estimate_cost_cents(model: str | None, input_tokens: int, output_tokens: int) -> int:
    """Estimate the cost of one LLM call in whole cents.

    Exact decimal arithmetic, rounded half-up. Unknown models use the
    default price tier.

    Example:
        >>> estimate_cost_cents("gpt-4o-mini", 1000, 500)
        0
        >>> estimate_cost_cents("claude-opus-4-5-20251101", 100_000, 100_000)
        900
    """
    price_in, price_out = price_for(model)
    cost = (
        Decimal(max(input_tokens, 0)) / _MILLION * price_in
        + Decimal(max(output_tokens, 0)) / _MILLION * price_out
    )
    return int(cost.quantize(Decimal(1), rounding=ROUND_HALF_UP))
