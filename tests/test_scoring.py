"""Tests for score aggregation."""

import pytest

from llmarena.core.records import MatchResult, TurnLog
from llmarena.core.storage import RunStore
from llmarena.scoring import Scoreboard, aggregate


def _turn(latency_ms):
    return TurnLog(
        turn=0, attempt=1, prompt="p", raw_text="{}", parsed={},
        valid_json=True, latency_ms=latency_ms,
    )


def _result(model, game, score, success, latencies=(), cost=0.0):
    return MatchResult(
        game=game, model=model, seed=1,
        started_at="2026-10-19T00:00:00+00:00",
        finished_at="2026-10-19T00:00:01+00:00",
        success=success, score=score, cost_usd=cost,
        turns=tuple(_turn(l) for l in latencies),
    )


@pytest.fixture
def results():
    return [
        _result("b-model", "wordgrid", 4.0, True, [100.0, 300.0], cost=0.5),
        _result("a-model", "wordgrid", 0.0, False, [50.0], cost=0.25),
        _result("a-model", "deduction", 100.0, True, [10.0], cost=0.1),
        _result("a-model", "deduction", 0.0, False, [30.0, 20.0], cost=0.2),
    ]


class TestAggregate:
    def test_sorted_by_model_then_game(self, results):
        rows = aggregate(results)
        assert [(r.model, r.game) for r in rows] == [
            ("a-model", "deduction"),
            ("a-model", "wordgrid"),
            ("b-model", "wordgrid"),
        ]

    def test_group_statistics(self, results):
        row = aggregate(results)[0]
        assert row.score == 50.0
        assert row.success_rate == 0.5
        assert row.avg_latency == pytest.approx(20.0)
        assert row.matches == 2

    def test_latency_averaged_over_turns(self, results):
        row = aggregate(results)[2]
        assert row.avg_latency == 200.0

    def test_no_turns_means_zero_latency(self):
        rows = aggregate([_result("m", "g", 1.0, True)])
        assert rows[0].avg_latency == 0.0

    def test_cost_hidden_by_default(self, results):
        assert all(r.cost_usd == 0.0 for r in aggregate(results))

    def test_cost_shown_when_enabled(self, results):
        rows = aggregate(results, show_cost=True)
        assert rows[0].cost_usd == pytest.approx(0.3)
        assert rows[2].cost_usd == pytest.approx(0.5)

    def test_idempotent(self, results):
        assert aggregate(results) == aggregate(results)
        assert aggregate(results) == aggregate(list(reversed(results)))

    def test_accepts_records(self, results):
        records = [r.to_record() for r in results]
        assert aggregate(records, show_cost=True) == aggregate(results, show_cost=True)

    def test_empty(self):
        assert aggregate([]) == []


class TestScoreboard:
    def test_latest_day(self, store, results):
        for r in results:
            store.append_match_result("2026-10-19", f"{r.model}_{r.game}", r)
        store.append_match_result("2026-10-18", "old_game", _result("old", "game", 1.0, True))
        day, rows = Scoreboard(store).latest()
        assert day == "2026-10-19"
        assert len(rows) == 3
        assert "old" not in {r.model for r in rows}

    def test_empty_store(self, tmp_output):
        assert Scoreboard(RunStore(tmp_output)).latest() == (None, [])
