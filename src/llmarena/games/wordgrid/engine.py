"""WordGrid engine — single-player word hunt on a 4x4 letter grid.

The grid comes from a linear-congruential generator seeded with the match
seed, drawing from a frequency-biased alphabet. Each turn the model names
one word and the path of cells that spells it. Any bad move (wrong path,
unknown word, repeated word) ends the match on the spot: there are no
retries. Score is the total letter count of valid words found.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from llmarena.core.schemas import declare_schema
from llmarena.games.base import Game, ScoreFragment, Transition

__all__ = ["WordGridGame", "WordGridState", "build_grid"]

GRID_SIZE = 4
GRID_CELLS = GRID_SIZE * GRID_SIZE
TURN_BUDGET = 20

# Vowels, 'e' especially, are overrepresented
_LETTERS = "eeeeeeeeeeeeeeeeetaoinshrdlcumwfgypbvkjxqz"

_LCG_MULTIPLIER = 1664525
_LCG_INCREMENT = 1013904223
_LCG_MODULUS = 2 ** 32


def _load_words(path: Path) -> frozenset[str]:
    words = set()
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip().lower()
            if line and not line.startswith("#"):
                words.add(line)
    return frozenset(words)


WORDS = _load_words(Path(__file__).parent / "words.txt")


def build_grid(seed: int) -> tuple[str, ...]:
    """Generate the 16 grid letters (row-major) for ``seed``."""
    state = (seed % _LCG_MODULUS) or 1
    letters = []
    for _ in range(GRID_CELLS):
        state = (_LCG_MULTIPLIER * state + _LCG_INCREMENT) % _LCG_MODULUS
        idx = int(state / (_LCG_MODULUS - 1) * len(_LETTERS))
        letters.append(_LETTERS[min(idx, len(_LETTERS) - 1)])
    return tuple(letters)


def is_adjacent(a: int, b: int) -> bool:
    """8-directional adjacency between two row-major cell indices."""
    dr = abs(a // GRID_SIZE - b // GRID_SIZE)
    dc = abs(a % GRID_SIZE - b % GRID_SIZE)
    return dr <= 1 and dc <= 1 and (dr, dc) != (0, 0)


@dataclass(frozen=True)
class WordGridState:
    grid: tuple[str, ...]
    turns_left: int = TURN_BUDGET
    found: frozenset[str] = frozenset()
    score: int = 0
    invalid_count: int = 0


class WordGridGame(Game):
    """4x4 word hunt with a harsh one-strike penalty policy."""

    name = "wordgrid"
    system_prompt = (
        "You are playing WordHunt/Boggle on a 4x4 grid. "
        "Return ONLY valid JSON for the schema. No extra text."
    )
    schema = declare_schema({
        "type": "object",
        "properties": {
            "word": {"type": "string"},
            "path": {
                "type": "array",
                "items": {"type": "integer"},
                "minItems": 2,
            },
        },
        "required": ["word", "path"],
        "additionalProperties": False,
    })
    max_tokens = 24
    timeout_ms = 6000

    def __init__(self, words: frozenset[str] | None = None) -> None:
        self._words = WORDS if words is None else words

    def init(self, seed: int) -> WordGridState:
        return WordGridState(grid=build_grid(seed))

    def is_over(self, state: WordGridState) -> bool:
        return state.turns_left <= 0

    def phase(self, state: WordGridState) -> str:
        return "hunt"

    def build_prompt(self, state: WordGridState) -> str:
        rows = [
            " ".join(state.grid[r * GRID_SIZE:(r + 1) * GRID_SIZE])
            for r in range(GRID_SIZE)
        ]
        found = ", ".join(sorted(state.found)) or "none"
        lines = [
            "4x4 Grid (rows):",
            *rows,
            "",
            "Rules:",
            "- Form a valid English word from adjacent letters (8-direction adjacency).",
            "- Use each cell at most once per word.",
            "- Provide exactly one word per turn; words already found do not count.",
            "- Path indices are 0..15 corresponding to the 4x4 grid flattened row-wise.",
            "- Any invalid word or path ends the game.",
            f"- Words found so far: {found}",
            f"- Remaining turns: {state.turns_left}",
            "",
            'Respond with JSON ONLY, matching this schema: {"word":string,"path":number[]}',
        ]
        return "\n".join(lines)

    def apply_action(self, state: WordGridState, action: dict) -> Transition:
        word = str(action.get("word", "")).lower()
        # The schema admits 3.0 as an integer; index with the int
        path = [
            int(i) if isinstance(i, float) and i.is_integer() else i
            for i in action.get("path", [])
        ]

        reason = self._check_move(state, word, path)
        if reason is not None:
            next_state = replace(
                state, turns_left=0, invalid_count=state.invalid_count + 1
            )
            return Transition(next_state, {"valid": False, "reason": reason})

        next_state = replace(
            state,
            turns_left=state.turns_left - 1,
            found=state.found | {word},
            score=state.score + len(word),
        )
        return Transition(next_state, {"valid": True, "word": word, "points": len(word)})

    def score(self, state: WordGridState) -> ScoreFragment:
        return ScoreFragment(
            success=state.score > 0,
            score=float(state.score),
            meta={
                "unique_words": len(state.found),
                "invalid_count": state.invalid_count,
                "found": sorted(state.found),
            },
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_move(self, state: WordGridState, word: str, path: list) -> str | None:
        """Return why the move is illegal, or None if it is legal."""
        if not word or len(path) != len(word):
            return "path length must equal word length"
        if len(path) < 2:
            return "word must be at least 2 letters"

        used: set[int] = set()
        for i, idx in enumerate(path):
            if isinstance(idx, bool) or not isinstance(idx, int) or not 0 <= idx < GRID_CELLS:
                return f"cell {idx!r} out of range 0..15"
            if idx in used:
                return f"cell {idx} used twice"
            if i > 0 and not is_adjacent(path[i - 1], idx):
                return f"cells {path[i - 1]} and {idx} are not adjacent"
            if state.grid[idx] != word[i]:
                return f"cell {idx} is '{state.grid[idx]}', not '{word[i]}'"
            used.add(idx)

        if word not in self._words:
            return f"'{word}' is not in the dictionary"
        if word in state.found:
            return f"'{word}' was already found"
        return None
