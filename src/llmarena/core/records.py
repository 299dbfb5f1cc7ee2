"""Match records — TurnLog and MatchResult.

Both are serialised one JSON object per line. ``from_record`` tolerates
missing keys so older or hand-written lines still aggregate.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class TurnLog:
    """One logged exchange within a match."""

    turn: int
    attempt: int
    prompt: str
    raw_text: str
    parsed: dict | None
    valid_json: bool
    latency_ms: float
    tokens_in: int = 0
    tokens_out: int = 0
    model: str = ""
    game: str = ""
    phase: str | None = None
    repair_raw_text: str | None = None
    error: str | None = None
    error_kind: str | None = None  # "schema_violation" | "illegal_move"
    turn_meta: dict | None = None

    def to_record(self) -> dict:
        return asdict(self)

    @classmethod
    def from_record(cls, record: dict) -> TurnLog:
        return cls(
            turn=record.get("turn", 0),
            attempt=record.get("attempt", 1),
            prompt=record.get("prompt", ""),
            raw_text=record.get("raw_text", ""),
            parsed=record.get("parsed"),
            valid_json=record.get("valid_json", False),
            latency_ms=record.get("latency_ms", 0.0),
            tokens_in=record.get("tokens_in", 0),
            tokens_out=record.get("tokens_out", 0),
            model=record.get("model", ""),
            game=record.get("game", ""),
            phase=record.get("phase"),
            repair_raw_text=record.get("repair_raw_text"),
            error=record.get("error"),
            error_kind=record.get("error_kind"),
            turn_meta=record.get("turn_meta"),
        )


@dataclass(frozen=True)
class MatchResult:
    """Final record of one (model, game, seed) run. Never mutated."""

    game: str
    model: str
    seed: int
    started_at: str
    finished_at: str
    success: bool
    score: float
    cost_usd: float = 0.0
    meta: dict = field(default_factory=dict)
    turns: tuple[TurnLog, ...] = ()

    def to_record(self) -> dict:
        record = asdict(self)
        record["turns"] = [t.to_record() for t in self.turns]
        return record

    @classmethod
    def from_record(cls, record: dict) -> MatchResult:
        return cls(
            game=record.get("game", ""),
            model=record.get("model", ""),
            seed=record.get("seed", 0),
            started_at=record.get("started_at", ""),
            finished_at=record.get("finished_at", ""),
            success=bool(record.get("success", False)),
            score=record.get("score") or 0.0,
            cost_usd=record.get("cost_usd") or 0.0,
            meta=record.get("meta") or {},
            turns=tuple(TurnLog.from_record(t) for t in record.get("turns", [])),
        )
