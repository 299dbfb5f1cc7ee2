"""Game — abstract state machine shared by every arena game.

Each game is a stateless engine over immutable state values: the match
runner owns the current state and swaps it for the one returned by
``apply_action``. A state is fully determined by the seed and the
actions applied so far, so replaying a turn log reproduces a match.

The four games share nothing beyond this contract:
    Game (ABC)
    ├── WordGridGame
    ├── DeductionGame
    ├── BattleshipLiteGame
    └── SequenceRecallGame
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class IllegalMove(ValueError):
    """A schema-valid action that the game's own rules reject."""


@dataclass(frozen=True)
class Transition:
    """Result of applying an action: the next state plus optional turn notes."""

    state: Any
    turn_meta: dict | None = None


@dataclass(frozen=True)
class ScoreFragment:
    """Game-specific part of a MatchResult."""

    success: bool
    score: float
    meta: dict = field(default_factory=dict)


class Game(ABC):
    """Abstract base for arena games.

    Subclasses set the class attributes below and implement the five
    state-machine methods.
    """

    name: str
    system_prompt: str
    schema: Mapping
    max_tokens: int = 64
    timeout_ms: int = 5000

    @abstractmethod
    def init(self, seed: int) -> Any:
        """Build the initial state. Same seed, same state."""

    @abstractmethod
    def is_over(self, state: Any) -> bool:
        """Return True once the state is terminal."""

    @abstractmethod
    def build_prompt(self, state: Any) -> str:
        """Render what the acting side may see of ``state``."""

    @abstractmethod
    def apply_action(self, state: Any, action: dict) -> Transition:
        """Advance the game, raising IllegalMove if the rules forbid ``action``."""

    @abstractmethod
    def score(self, state: Any) -> ScoreFragment:
        """Return the success flag, score and diagnostics for ``state``."""

    def phase(self, state: Any) -> str | None:
        """Optional phase label recorded with each turn."""
        return None
