"""Arena games, keyed by the tag recorded in every MatchResult."""

from llmarena.games.base import Game, IllegalMove, ScoreFragment, Transition
from llmarena.games.battleship.engine import BattleshipLiteGame
from llmarena.games.deduction.engine import DeductionGame
from llmarena.games.sequence.engine import SequenceRecallGame
from llmarena.games.wordgrid.engine import WordGridGame

GAMES: dict[str, Game] = {
    game.name: game
    for game in (
        WordGridGame(),
        DeductionGame(),
        BattleshipLiteGame(),
        SequenceRecallGame(),
    )
}


def get_game(name: str) -> Game:
    """Return the game registered under ``name``."""
    try:
        return GAMES[name]
    except KeyError:
        raise ValueError(
            f"Unknown game: {name!r}. Available: {sorted(GAMES)}"
        ) from None


__all__ = [
    "GAMES",
    "Game",
    "IllegalMove",
    "ScoreFragment",
    "Transition",
    "get_game",
]
