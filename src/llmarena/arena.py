"""Arena — plays every configured model against every configured game.

Matches for distinct (model, game) stems run in parallel on a thread
pool; repeats of the same stem run one after another in the same thread
so each JSONL stem keeps a single writer. A failing match (provider
timeout, missing key...) is logged and recorded as a failure without
affecting its siblings.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

from llmarena.config import ArenaConfig, ModelConfig
from llmarena.core.records import MatchResult
from llmarena.core.registry import get_provider
from llmarena.core.seed import SeedManager, today_seed
from llmarena.core.storage import RunStore
from llmarena.games import get_game
from llmarena.runner import MatchRunner

logger = logging.getLogger(__name__)


@dataclass
class Fixture:
    model: ModelConfig
    game: str
    seeds: list[int]


@dataclass
class MatchFailure:
    model: str
    game: str
    seed: int
    error: str


@dataclass
class ArenaResult:
    seed: int
    results: list[MatchResult] = field(default_factory=list)
    failures: list[MatchFailure] = field(default_factory=list)


class Arena:
    """Runs an ArenaConfig and persists everything to its RunStore."""

    def __init__(self, config: ArenaConfig, store: RunStore | None = None) -> None:
        self.config = config
        self.store = store or RunStore(config.runs_dir)
        self.runner = MatchRunner(prices=config.prices, sink=self.store)
        self.seeds = SeedManager(
            config.seed if config.seed is not None else today_seed()
        )

    def fixtures(self) -> list[Fixture]:
        return [
            Fixture(
                model=model,
                game=game,
                seeds=[
                    self.seeds.get_match_seed(game, r)
                    for r in range(self.config.repeats)
                ],
            )
            for model in self.config.models
            for game in self.config.games
        ]

    def run(self) -> ArenaResult:
        """Play all fixtures and return results plus per-match failures."""
        outcome = ArenaResult(seed=self.seeds.base_seed)
        fixtures = self.fixtures()
        if not fixtures:
            return outcome

        workers = max(1, min(self.config.max_workers, len(fixtures)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(self._run_fixture, fixture): fixture
                for fixture in fixtures
            }
            for future in as_completed(futures):
                results, failures = future.result()
                outcome.results.extend(results)
                outcome.failures.extend(failures)

        # Completion order is nondeterministic; report in a stable order
        outcome.results.sort(key=lambda r: (r.model, r.game, r.started_at))
        return outcome

    def _run_fixture(
        self, fixture: Fixture
    ) -> tuple[list[MatchResult], list[MatchFailure]]:
        """Run every repeat of one (model, game) pair (called from thread)."""
        game = get_game(fixture.game)
        results: list[MatchResult] = []
        failures: list[MatchFailure] = []
        for seed in fixture.seeds:
            try:
                provider = get_provider(
                    fixture.model.provider_name,
                    api_key_env=fixture.model.api_key_env,
                    base_url=fixture.model.base_url,
                )
                results.append(self.runner.play(
                    game,
                    provider,
                    seed,
                    fixture.model.name,
                    price_override=fixture.model.price_override,
                ))
            except Exception as exc:
                logger.exception(
                    "match %s x %s (seed %d) failed", fixture.game, fixture.model.name, seed
                )
                failures.append(MatchFailure(
                    model=fixture.model.name,
                    game=fixture.game,
                    seed=seed,
                    error=f"{type(exc).__name__}: {exc}",
                ))
        return results, failures
