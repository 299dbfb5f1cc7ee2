"""Tests for arena config loading."""

from pathlib import Path

import pytest

from llmarena.config import (
    DEFAULT_MODELS,
    ConfigError,
    ModelConfig,
    default_config,
    load_config,
)
from llmarena.core.pricing import Price
from llmarena.games import GAMES

EXAMPLE_CONFIG = Path(__file__).resolve().parent.parent / "arena.yaml.example"


def _write(tmp_path, text):
    path = tmp_path / "arena.yaml"
    path.write_text(text)
    return path


class TestModelConfig:
    def test_provider_defaults_to_name(self):
        assert ModelConfig(name="simulated").provider_name == "simulated"

    def test_explicit_provider(self):
        mc = ModelConfig(name="garbage", provider="mock:garbage")
        assert mc.provider_name == "mock:garbage"

    def test_no_price_override_by_default(self):
        assert ModelConfig(name="m").price_override is None

    def test_price_override(self):
        mc = ModelConfig(name="m", price_in=0.2)
        assert mc.price_override == Price(input=0.2, output=0.0)


class TestLoadConfig:
    def test_full_config(self, tmp_path):
        path = _write(tmp_path, """
arena:
  name: nightly
  seed: 7
  repeats: 3
  runs_dir: out/runs
  show_cost: true
  max_workers: 2
models:
  simulated: {}
  cheap:
    provider: "openai:gpt-4o-mini"
    api_key_env: MY_KEY
    base_url: https://example.test/v1
    price_in: 0.1
    price_out: 0.2
games: [deduction, sequenceRecall]
prices:
  cheap: {in: 1.0, out: 2.0}
""")
        config = load_config(path)
        assert config.name == "nightly"
        assert config.seed == 7
        assert config.repeats == 3
        assert config.runs_dir == Path("out/runs")
        assert config.show_cost is True
        assert config.max_workers == 2
        assert [m.name for m in config.models] == ["simulated", "cheap"]
        cheap = config.models[1]
        assert cheap.provider_name == "openai:gpt-4o-mini"
        assert cheap.api_key_env == "MY_KEY"
        assert cheap.base_url == "https://example.test/v1"
        assert cheap.price_override == Price(input=0.1, output=0.2)
        assert config.games == ["deduction", "sequenceRecall"]
        assert config.prices.lookup("cheap") == Price(input=1.0, output=2.0)

    def test_minimal_config_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("ARENA_SHOW_COST", raising=False)
        config = load_config(_write(tmp_path, "arena:\n  name: x\n"))
        assert config.seed is None
        assert config.repeats == 1
        assert config.show_cost is False
        assert [m.name for m in config.models] == DEFAULT_MODELS
        assert config.games == list(GAMES)

    def test_empty_file(self, tmp_path):
        config = load_config(_write(tmp_path, ""))
        assert config.name == "daily"

    def test_show_cost_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ARENA_SHOW_COST", "1")
        assert load_config(_write(tmp_path, "arena: {}\n")).show_cost is True

    def test_unknown_game_rejected(self, tmp_path):
        with pytest.raises(ConfigError, match="chess"):
            load_config(_write(tmp_path, "games: [chess]\n"))

    def test_bad_repeats_rejected(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(_write(tmp_path, "arena:\n  repeats: 0\n"))

    def test_example_config_loads(self):
        config = load_config(EXAMPLE_CONFIG)
        assert config.games == list(GAMES)
        assert "simulated" in [m.name for m in config.models]


class TestDefaultConfig:
    def test_every_game_every_default_model(self, monkeypatch):
        monkeypatch.delenv("ARENA_SHOW_COST", raising=False)
        config = default_config()
        assert [m.name for m in config.models] == DEFAULT_MODELS
        assert config.games == list(GAMES)
        assert config.show_cost is False
