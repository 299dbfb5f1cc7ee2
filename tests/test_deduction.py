"""Tests for the Deduction engine."""

import pytest

from llmarena.games.base import IllegalMove
from llmarena.games.deduction.engine import (
    PUZZLES,
    Clue,
    DeductionGame,
    DeductionState,
    Fact,
    PuzzleError,
    solve,
)


@pytest.fixture
def game():
    return DeductionGame()


class TestPuzzleBank:
    @pytest.mark.parametrize("idx", range(len(PUZZLES)))
    def test_every_puzzle_uniquely_solvable(self, idx):
        assert len(solve(PUZZLES[idx])) == 1

    @pytest.mark.parametrize("seed,secret", [
        (0, Fact("red", "circle")),
        (1, Fact("blue", "triangle")),
        (2, Fact("green", "square")),
        (20261020, Fact("blue", "triangle")),
    ])
    def test_seed_selects_puzzle(self, game, seed, secret):
        assert game.init(seed).secret == secret

    def test_ambiguous_puzzle_rejected(self, game, monkeypatch):
        loose = (Clue("The color is red.", lambda f: f.color == "red"),)
        monkeypatch.setattr(
            "llmarena.games.deduction.engine.PUZZLES", (loose,)
        )
        with pytest.raises(PuzzleError):
            game.init(0)


class TestGuesses:
    def test_first_guess_correct(self, game):
        state = game.init(0)
        t = game.apply_action(state, {"color": "red", "shape": "circle"})
        assert t.turn_meta == {"correct": True}
        assert game.is_over(t.state)
        fragment = game.score(t.state)
        assert fragment.success is True
        assert fragment.score == 100.0
        assert fragment.meta["attempts"] == 1

    def test_wrong_guess_continues(self, game):
        state = game.init(0)
        t = game.apply_action(state, {"color": "blue", "shape": "square"})
        assert t.turn_meta == {"correct": False}
        assert not game.is_over(t.state)
        assert "blue square" in game.build_prompt(t.state)

    def test_violated_clues_reported(self, game):
        state = game.init(0)
        state = game.apply_action(state, {"color": "blue", "shape": "square"}).state
        fragment = game.score(state)
        assert fragment.success is False
        assert fragment.score == 0.0
        assert fragment.meta["violated_clues"] == [0, 1, 3]

    def test_six_attempts_end_game(self, game):
        state = game.init(1)
        for _ in range(6):
            state = game.apply_action(state, {"color": "red", "shape": "circle"}).state
        assert game.is_over(state)
        assert game.score(state).success is False

    def test_unknown_color_is_illegal(self, game):
        with pytest.raises(IllegalMove):
            game.apply_action(game.init(0), {"color": "purple", "shape": "circle"})

    def test_unknown_shape_is_illegal(self, game):
        with pytest.raises(IllegalMove):
            game.apply_action(game.init(0), {"color": "red", "shape": "hexagon"})

    def test_no_guesses_scores_zero(self, game):
        fragment = game.score(game.init(2))
        assert fragment.success is False
        assert fragment.meta == {"attempts": 0, "violated_clues": []}

    def test_prompt_numbers_clues(self, game):
        prompt = game.build_prompt(DeductionState(puzzle_index=0, secret=Fact("red", "circle")))
        assert "1. The color is not blue." in prompt
        assert "Guesses remaining: 6" in prompt
