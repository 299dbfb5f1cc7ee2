"""SequenceRecall engine — predict the next element of a fixed sequence."""

from __future__ import annotations

from dataclasses import dataclass, replace

from llmarena.core.schemas import declare_schema
from llmarena.games.base import Game, ScoreFragment, Transition

__all__ = ["SequenceRecallGame", "SequenceState", "build_sequence"]

_BASE = (1, 1, 2, 3, 5, 8, 13, 21)


def build_sequence(seed: int) -> tuple[int, ...]:
    """Fibonacci prefix, with later elements bumped when seed % 3 == 0."""
    perturb = seed % 3 == 0
    return tuple(n + (1 if perturb and i > 4 else 0) for i, n in enumerate(_BASE))


@dataclass(frozen=True)
class SequenceState:
    sequence: tuple[int, ...]
    replies: tuple[int, ...] = ()

    @property
    def idx(self) -> int:
        return len(self.replies)

    @property
    def max_turns(self) -> int:
        return len(self.sequence)


class SequenceRecallGame(Game):
    """One guess per turn; every integer guess is legal."""

    name = "sequenceRecall"
    system_prompt = "Repeat the next number in the sequence. Respond as {\"value\":N}."
    schema = declare_schema({
        "type": "object",
        "properties": {"value": {"type": "integer"}},
        "required": ["value"],
        "additionalProperties": False,
    })
    max_tokens = 12
    timeout_ms = 5000

    def init(self, seed: int) -> SequenceState:
        return SequenceState(sequence=build_sequence(seed))

    def is_over(self, state: SequenceState) -> bool:
        return state.idx >= state.max_turns

    def build_prompt(self, state: SequenceState) -> str:
        shown = ", ".join(str(n) for n in state.sequence[:state.idx])
        return f"Sequence so far: {shown}. Next?"

    def apply_action(self, state: SequenceState, action: dict) -> Transition:
        value = int(action["value"])
        expected = state.sequence[state.idx]
        next_state = replace(state, replies=state.replies + (value,))
        return Transition(next_state, {"correct": value == expected})

    def score(self, state: SequenceState) -> ScoreFragment:
        correct = sum(
            1 for reply, truth in zip(state.replies, state.sequence) if reply == truth
        )
        score = correct / state.max_turns if state.max_turns else 0.0
        return ScoreFragment(
            success=score > 0.5,
            score=score,
            meta={"correct": correct, "replies": list(state.replies)},
        )
