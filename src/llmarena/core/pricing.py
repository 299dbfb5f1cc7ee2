"""Price table — USD per 1k tokens, keyed by model identifier.

Loaded once per process and read-only afterwards; concurrent matches
share one instance without locking.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class Price:
    """USD per 1k input / output tokens."""

    input: float = 0.0
    output: float = 0.0


FREE = Price()

# Rough list prices; used when a config does not override them
DEFAULT_PRICES: Mapping[str, Price] = MappingProxyType({
    "simulated": FREE,
    "openai:gpt-4o-mini": Price(input=0.00015, output=0.0006),
    "openai:gpt-4o": Price(input=0.0025, output=0.01),
    "openrouter:openai/gpt-4o-mini": Price(input=0.00015, output=0.0006),
    "openrouter:meta-llama/llama-3.1-70b-instruct": Price(input=0.00006, output=0.00024),
    "openrouter:qwen/qwen-2.5-32b-instruct": Price(input=0.00003, output=0.00012),
})


class PriceTable:
    """Immutable model -> Price lookup with a default for unknown models."""

    def __init__(
        self,
        prices: Mapping[str, Price] | None = None,
        default: Price = FREE,
    ) -> None:
        self._prices = MappingProxyType(dict(DEFAULT_PRICES if prices is None else prices))
        self._default = default

    @classmethod
    def from_records(
        cls, records: Mapping[str, Mapping], include_defaults: bool = True
    ) -> PriceTable:
        """Build from ``{model: {"in": x, "out": y}}`` config records."""
        prices = dict(DEFAULT_PRICES) if include_defaults else {}
        default = FREE
        for model, rec in records.items():
            price = Price(
                input=float(rec.get("in", 0.0)),
                output=float(rec.get("out", 0.0)),
            )
            if model == "default":
                default = price
            else:
                prices[model] = price
        return cls(prices, default=default)

    def lookup(self, model_id: str) -> Price:
        return self._prices.get(model_id, self._default)

    def cost(
        self,
        model_id: str,
        tokens_in: int,
        tokens_out: int,
        override: Price | None = None,
    ) -> float:
        """Cost of a token total; an explicit override beats the table."""
        price = override if override is not None else self.lookup(model_id)
        return (tokens_in / 1000) * price.input + (tokens_out / 1000) * price.output
