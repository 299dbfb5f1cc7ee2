"""Deduction engine — static logic puzzles over colour x shape.

Each puzzle is a list of boolean clues over 3 colours x 3 shapes. The
secret is not stored: ``init`` derives it by testing all nine candidates
and refuses any puzzle that does not pin down exactly one. The model
gets six guesses; only a correct final guess scores.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from itertools import product
from typing import Callable

from llmarena.core.schemas import declare_schema
from llmarena.games.base import Game, IllegalMove, ScoreFragment, Transition

__all__ = ["DeductionGame", "DeductionState", "Fact", "PuzzleError", "PUZZLES", "solve"]

COLORS = ("red", "blue", "green")
SHAPES = ("circle", "square", "triangle")
MAX_ATTEMPTS = 6


class PuzzleError(ValueError):
    """A puzzle in the bank does not have exactly one solution."""


@dataclass(frozen=True)
class Fact:
    color: str
    shape: str


@dataclass(frozen=True)
class Clue:
    text: str
    test: Callable[[Fact], bool]


PUZZLES: tuple[tuple[Clue, ...], ...] = (
    # red circle
    (
        Clue("The color is not blue.", lambda f: f.color != "blue"),
        Clue("The shape is not square.", lambda f: f.shape != "square"),
        Clue(
            "If the shape is triangle, the color is not green.",
            lambda f: f.color != "green" if f.shape == "triangle" else True,
        ),
        Clue(
            "Either the color is red or the shape is circle.",
            lambda f: f.color == "red" or f.shape == "circle",
        ),
        Clue(
            "If the color is red then the shape is circle.",
            lambda f: f.shape == "circle" if f.color == "red" else True,
        ),
        Clue(
            "Not (green circle).",
            lambda f: not (f.color == "green" and f.shape == "circle"),
        ),
    ),
    # blue triangle
    (
        Clue("The color is not red.", lambda f: f.color != "red"),
        Clue("The shape is not circle.", lambda f: f.shape != "circle"),
        Clue(
            "If the color is green then the shape is square.",
            lambda f: f.shape == "square" if f.color == "green" else True,
        ),
        Clue(
            "Either the shape is triangle or the color is blue.",
            lambda f: f.shape == "triangle" or f.color == "blue",
        ),
        Clue("The shape is triangle.", lambda f: f.shape == "triangle"),
    ),
    # green square
    (
        Clue("The shape is not circle.", lambda f: f.shape != "circle"),
        Clue("The color is not blue.", lambda f: f.color != "blue"),
        Clue(
            "If the color is red then the shape is triangle.",
            lambda f: f.shape == "triangle" if f.color == "red" else True,
        ),
        Clue("The shape is square.", lambda f: f.shape == "square"),
        Clue(
            "Either the color is green or the shape is square.",
            lambda f: f.color == "green" or f.shape == "square",
        ),
    ),
)


def solve(clues: tuple[Clue, ...]) -> list[Fact]:
    """Every candidate that satisfies all clues, by exhaustive search."""
    return [
        fact
        for fact in (Fact(c, s) for c, s in product(COLORS, SHAPES))
        if all(clue.test(fact) for clue in clues)
    ]


@dataclass(frozen=True)
class DeductionState:
    puzzle_index: int
    secret: Fact
    attempts: tuple[Fact, ...] = ()
    max_attempts: int = MAX_ATTEMPTS

    @property
    def clues(self) -> tuple[Clue, ...]:
        return PUZZLES[self.puzzle_index]

    @property
    def solved(self) -> bool:
        return self.secret in self.attempts


class DeductionGame(Game):
    """Guess the unique colour/shape pair consistent with every clue."""

    name = "deduction"
    system_prompt = 'Solve the logic puzzle. Respond as {"color":"red","shape":"circle"}.'
    schema = declare_schema({
        "type": "object",
        "properties": {
            "color": {"type": "string", "enum": list(COLORS)},
            "shape": {"type": "string", "enum": list(SHAPES)},
        },
        "required": ["color", "shape"],
        "additionalProperties": False,
    })
    max_tokens = 16
    timeout_ms = 5000

    def init(self, seed: int) -> DeductionState:
        idx = seed % len(PUZZLES)
        solutions = solve(PUZZLES[idx])
        if len(solutions) != 1:
            raise PuzzleError(
                f"Deduction puzzle {idx} not uniquely solvable: "
                f"{len(solutions)} solutions"
            )
        return DeductionState(puzzle_index=idx, secret=solutions[0])

    def is_over(self, state: DeductionState) -> bool:
        return state.solved or len(state.attempts) >= state.max_attempts

    def build_prompt(self, state: DeductionState) -> str:
        lines = ["You must deduce the secret color and shape from these clues:"]
        lines += [f"{i + 1}. {clue.text}" for i, clue in enumerate(state.clues)]
        if state.attempts:
            tried = ", ".join(f"{a.color} {a.shape}" for a in state.attempts)
            lines.append(f"Incorrect guesses so far: {tried}")
        lines.append(f"Guesses remaining: {state.max_attempts - len(state.attempts)}")
        lines.append(
            'Respond with JSON only matching {"color":string, "shape":string}.'
        )
        return "\n".join(lines)

    def apply_action(self, state: DeductionState, action: dict) -> Transition:
        color, shape = action["color"], action["shape"]
        if color not in COLORS:
            raise IllegalMove(f"Unknown color {color!r}. Use one of {', '.join(COLORS)}.")
        if shape not in SHAPES:
            raise IllegalMove(f"Unknown shape {shape!r}. Use one of {', '.join(SHAPES)}.")

        guess = Fact(color, shape)
        next_state = replace(state, attempts=state.attempts + (guess,))
        return Transition(next_state, {"correct": guess == state.secret})

    def score(self, state: DeductionState) -> ScoreFragment:
        last = state.attempts[-1] if state.attempts else None
        if last is not None and last == state.secret:
            return ScoreFragment(
                success=True, score=100.0, meta={"attempts": len(state.attempts)}
            )
        violated = (
            [i for i, clue in enumerate(state.clues) if not clue.test(last)]
            if last is not None else []
        )
        return ScoreFragment(
            success=False,
            score=0.0,
            meta={"attempts": len(state.attempts), "violated_clues": violated},
        )
