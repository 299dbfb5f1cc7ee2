"""Score aggregation — MatchResults to per-(model, game) rows.

Rows are recomputed from scratch on every pass; nothing is cached, so
aggregating the same results twice yields the same rows.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from llmarena.core.records import MatchResult
from llmarena.core.storage import RunStore


@dataclass(frozen=True)
class ScoreRow:
    model: str
    game: str
    score: float
    success_rate: float
    avg_latency: float
    cost_usd: float
    matches: int


def aggregate(
    results: Iterable[MatchResult | dict],
    show_cost: bool = False,
) -> list[ScoreRow]:
    """Group results by (model, game) and summarise each group.

    ``cost_usd`` is reported as 0 unless ``show_cost`` is set.
    """
    groups: dict[tuple[str, str], list[MatchResult]] = defaultdict(list)
    for r in results:
        if isinstance(r, dict):
            r = MatchResult.from_record(r)
        groups[(r.model, r.game)].append(r)

    rows = []
    for (model, game), members in groups.items():
        latencies = [t.latency_ms for m in members for t in m.turns]
        rows.append(ScoreRow(
            model=model,
            game=game,
            score=sum(m.score for m in members) / len(members),
            success_rate=sum(1 for m in members if m.success) / len(members),
            avg_latency=sum(latencies) / len(latencies) if latencies else 0.0,
            cost_usd=sum(m.cost_usd for m in members) if show_cost else 0.0,
            matches=len(members),
        ))
    return sorted(rows, key=lambda row: (row.model, row.game))


class Scoreboard:
    """Aggregates whatever the store most recently wrote."""

    def __init__(self, store: RunStore, show_cost: bool = False) -> None:
        self._store = store
        self._show_cost = show_cost

    def latest(self) -> tuple[str | None, list[ScoreRow]]:
        """Return ``(day, rows)`` for the latest day in the store."""
        day, records = self._store.read_latest_results()
        return day, aggregate(records, show_cost=self._show_cost)
