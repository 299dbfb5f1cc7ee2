"""Tests for the offline providers."""

from llmarena.core.provider import (
    CompletionRequest,
    MockProvider,
    ProviderError,
    SimulatedProvider,
)
from llmarena.games import get_game
from llmarena.runner import MatchRunner


def _request(game_name, user="prompt"):
    game = get_game(game_name)
    return CompletionRequest(system=game.system_prompt, user=user, json_schema=game.schema)


class TestMockProvider:
    def test_strategy_sees_request(self):
        seen = []

        def strategy(request):
            seen.append(request.user)
            return '{"value": 3}'

        provider = MockProvider("mock", strategy)
        response = provider.complete(CompletionRequest(system="s", user="hello"))
        assert response.raw_text == '{"value": 3}'
        assert seen == ["hello"]
        assert len(provider.requests) == 1

    def test_token_estimates(self):
        provider = MockProvider("mock", lambda r: "x" * 40)
        response = provider.complete(CompletionRequest(system="", user="y" * 80))
        assert response.tokens_in == 20
        assert response.tokens_out == 10
        assert response.latency_ms >= 0


class TestProviderError:
    def test_fields(self):
        err = ProviderError("timeout", "gpt-4o", "took too long")
        assert err.error_type == "timeout"
        assert err.model_id == "gpt-4o"
        assert "timeout from gpt-4o" in str(err)


class TestSimulatedProvider:
    def test_wordgrid_answer(self):
        response = SimulatedProvider().complete(_request("wordgrid"))
        assert response.parsed == {"word": "test", "path": [0, 1, 2, 3]}

    def test_deduction_answer(self):
        response = SimulatedProvider().complete(_request("deduction"))
        assert response.parsed == {"color": "red", "shape": "circle"}

    def test_sequence_repeats_last_number(self):
        response = SimulatedProvider().complete(
            _request("sequenceRecall", "Sequence so far: 1, 1, 2. Next?")
        )
        assert response.parsed == {"value": 2}

    def test_sequence_empty_prefix(self):
        response = SimulatedProvider().complete(
            _request("sequenceRecall", "Sequence so far: . Next?")
        )
        assert response.parsed == {"value": 1}

    def test_battleship_places_then_fires(self):
        provider = SimulatedProvider()
        placed = provider.complete(_request("battleshipLite", "Player P1: Place two ships"))
        assert placed.parsed["action"] == "place"
        fired = provider.complete(_request("battleshipLite", "Player P1's turn to fire."))
        assert fired.parsed == {"action": "fire", "r": 0, "c": 0}

    def test_no_schema(self):
        response = SimulatedProvider().complete(CompletionRequest(system="", user=""))
        assert response.raw_text == "{}"

    def test_wins_battleship_as_p1(self):
        result = MatchRunner().play(get_game("battleshipLite"), SimulatedProvider(), 1, "simulated")
        assert result.success is True
        assert result.score == 1.0
        assert result.meta["winner"] == "P1"

    def test_solves_first_deduction_puzzle(self):
        result = MatchRunner().play(get_game("deduction"), SimulatedProvider(), 0, "simulated")
        assert result.success is True
        assert len(result.turns) == 1
