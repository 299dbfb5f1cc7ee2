"""Arena configuration loader."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from llmarena.core.pricing import Price, PriceTable
from llmarena.games import GAMES

DEFAULT_MODELS = [
    "simulated",
    "openrouter:openai/gpt-4o-mini",
    "openrouter:meta-llama/llama-3.1-70b-instruct",
    "openrouter:qwen/qwen-2.5-32b-instruct",
]


class ConfigError(ValueError):
    """Raised when an arena config file is malformed."""


@dataclass
class ModelConfig:
    name: str                        # model identifier, also the result key
    provider: str | None = None      # registry name; defaults to name
    api_key_env: str | None = None   # env var name for API key
    base_url: str | None = None      # custom API base URL
    price_in: float | None = None    # per-model override, USD per 1k tokens
    price_out: float | None = None

    @property
    def provider_name(self) -> str:
        return self.provider or self.name

    @property
    def price_override(self) -> Price | None:
        if self.price_in is None and self.price_out is None:
            return None
        return Price(input=self.price_in or 0.0, output=self.price_out or 0.0)


@dataclass
class ArenaConfig:
    name: str = "daily"
    seed: int | None = None          # None -> today's YYYYMMDD
    repeats: int = 1
    runs_dir: Path = Path("runs")
    show_cost: bool = False
    max_workers: int = 4
    models: list[ModelConfig] = field(default_factory=list)
    games: list[str] = field(default_factory=lambda: list(GAMES))
    prices: PriceTable = field(default_factory=PriceTable)


def _show_cost_from_env() -> bool:
    return os.environ.get("ARENA_SHOW_COST") == "1"


def default_config() -> ArenaConfig:
    """Config used when no file is given: default models, every game."""
    return ArenaConfig(
        models=[ModelConfig(name=m) for m in DEFAULT_MODELS],
        show_cost=_show_cost_from_env(),
    )


def load_config(path: Path) -> ArenaConfig:
    """Load arena config from YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    a = raw.get("arena", {})

    models = []
    for name, m in (raw.get("models") or {}).items():
        m = m or {}
        models.append(ModelConfig(
            name=name,
            provider=m.get("provider"),
            api_key_env=m.get("api_key_env"),
            base_url=m.get("base_url"),
            price_in=m.get("price_in"),
            price_out=m.get("price_out"),
        ))
    if not models:
        models = [ModelConfig(name=m) for m in DEFAULT_MODELS]

    games = raw.get("games") or list(GAMES)
    unknown = [g for g in games if g not in GAMES]
    if unknown:
        raise ConfigError(
            f"Unknown games {unknown}. Available: {sorted(GAMES)}"
        )

    repeats = a.get("repeats", 1)
    if repeats < 1:
        raise ConfigError(f"repeats must be >= 1, got {repeats}")

    return ArenaConfig(
        name=a.get("name", "daily"),
        seed=a.get("seed"),
        repeats=repeats,
        runs_dir=Path(a.get("runs_dir", "runs")),
        show_cost=a.get("show_cost", _show_cost_from_env()),
        max_workers=a.get("max_workers", 4),
        models=models,
        games=list(games),
        prices=PriceTable.from_records(raw.get("prices") or {}),
    )
