"""MatchRunner — drives one game to completion against one provider.

Per turn: prompt -> complete -> extract (one repair request on failure)
-> validate -> apply. A schema violation or an illegal move ends the
match as a loss; there are no retries beyond the single repair request.
Provider errors are not caught here and abort the match without a
result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from llmarena.core.extractor import extract_json
from llmarena.core.pricing import Price, PriceTable
from llmarena.core.provider import CompletionProvider, CompletionRequest, CompletionResponse
from llmarena.core.records import MatchResult, TurnLog
from llmarena.core.schemas import schema_to_json
from llmarena.core.storage import RunStore, match_stem
from llmarena.core.validator import validate
from llmarena.games.base import Game, IllegalMove

logger = logging.getLogger(__name__)

TEMPERATURE = 0.2
INVALID_JSON = "Invalid JSON"


class ErrorKind(Enum):
    SCHEMA_VIOLATION = "schema_violation"
    ILLEGAL_MOVE = "illegal_move"


@dataclass
class _TurnExchange:
    """Raw material of one turn: primary call plus optional repair call."""

    primary: CompletionResponse
    repair: CompletionResponse | None
    parsed: dict | None

    @property
    def tokens_in(self) -> int:
        return sum(r.tokens_in or 0 for r in self._responses())

    @property
    def tokens_out(self) -> int:
        return sum(r.tokens_out or 0 for r in self._responses())

    @property
    def latency_ms(self) -> float:
        return sum(r.latency_ms or 0.0 for r in self._responses())

    def _responses(self) -> list[CompletionResponse]:
        return [self.primary] if self.repair is None else [self.primary, self.repair]


def repair_prompt(schema_json: str, previous: str) -> str:
    return (
        f"Return ONLY valid JSON for this schema (no prose):\n{schema_json}\n\n"
        f"Previous response:\n{previous}"
    )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class MatchRunner:
    """Runs single matches; safe to share across threads.

    The price table is read-only and each ``play`` call owns its own
    state and turn list.
    """

    def __init__(
        self,
        prices: PriceTable | None = None,
        sink: RunStore | None = None,
    ) -> None:
        self.prices = prices or PriceTable()
        self.sink = sink

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def play(
        self,
        game: Game,
        provider: CompletionProvider,
        seed: int,
        model: str,
        price_override: Price | None = None,
        on_turn: Callable[[TurnLog], None] | None = None,
    ) -> MatchResult:
        """Play one match and return its MatchResult.

        Turns and the result are filed under the day the match started.
        """
        started_at = _now()
        stem = match_stem(model, game.name)
        schema_json = schema_to_json(game.schema)

        state = game.init(seed)
        turns: list[TurnLog] = []
        tokens_in = 0
        tokens_out = 0

        def emit(turn: TurnLog) -> None:
            turns.append(turn)
            if self.sink is not None:
                self.sink.append_turn(started_at, stem, turn)
            if on_turn is not None:
                on_turn(turn)

        while not game.is_over(state):
            prompt = game.build_prompt(state)
            request = CompletionRequest(
                system=game.system_prompt,
                user=prompt,
                json_schema=game.schema,
                max_tokens=game.max_tokens,
                timeout_ms=game.timeout_ms,
                temperature=TEMPERATURE,
            )
            exchange = self._exchange(provider, request, schema_json)
            tokens_in += exchange.tokens_in
            tokens_out += exchange.tokens_out

            base = dict(
                turn=len(turns),
                attempt=1 if exchange.repair is None else 2,
                prompt=prompt,
                raw_text=exchange.primary.raw_text,
                repair_raw_text=exchange.repair.raw_text if exchange.repair else None,
                parsed=exchange.parsed,
                latency_ms=exchange.latency_ms,
                tokens_in=exchange.tokens_in,
                tokens_out=exchange.tokens_out,
                model=model,
                game=game.name,
                phase=game.phase(state),
            )

            check = (
                validate(exchange.parsed, game.schema)
                if exchange.parsed is not None
                else None
            )
            if check is None or not check.ok:
                error = INVALID_JSON if check is None else check.error
                emit(TurnLog(
                    valid_json=False,
                    error=error,
                    error_kind=ErrorKind.SCHEMA_VIOLATION.value,
                    **base,
                ))
                return self._finish(
                    game, state, model, seed, started_at, turns,
                    tokens_in, tokens_out, price_override,
                    failure=(ErrorKind.SCHEMA_VIOLATION, error),
                )

            try:
                transition = game.apply_action(state, exchange.parsed)
            except IllegalMove as e:
                emit(TurnLog(
                    valid_json=True,
                    error=str(e),
                    error_kind=ErrorKind.ILLEGAL_MOVE.value,
                    **base,
                ))
                return self._finish(
                    game, state, model, seed, started_at, turns,
                    tokens_in, tokens_out, price_override,
                    failure=(ErrorKind.ILLEGAL_MOVE, str(e)),
                )

            state = transition.state
            emit(TurnLog(valid_json=True, turn_meta=transition.turn_meta, **base))

        return self._finish(
            game, state, model, seed, started_at, turns,
            tokens_in, tokens_out, price_override,
        )

    # ------------------------------------------------------------------
    # Internal: one turn's exchange
    # ------------------------------------------------------------------

    @staticmethod
    def _exchange(
        provider: CompletionProvider,
        request: CompletionRequest,
        schema_json: str,
    ) -> _TurnExchange:
        """Primary request, plus exactly one repair request if extraction fails."""
        primary = provider.complete(request)
        extracted = extract_json(primary.raw_text)
        if extracted.success:
            return _TurnExchange(primary=primary, repair=None, parsed=extracted.value)

        repair_request = CompletionRequest(
            system=request.system,
            user=repair_prompt(schema_json, primary.raw_text),
            json_schema=request.json_schema,
            max_tokens=request.max_tokens,
            timeout_ms=request.timeout_ms,
            temperature=request.temperature,
        )
        repair = provider.complete(repair_request)
        extracted = extract_json(repair.raw_text)
        return _TurnExchange(primary=primary, repair=repair, parsed=extracted.value)

    # ------------------------------------------------------------------
    # Internal: result
    # ------------------------------------------------------------------

    def _finish(
        self,
        game: Game,
        state: Any,
        model: str,
        seed: int,
        started_at: str,
        turns: list[TurnLog],
        tokens_in: int,
        tokens_out: int,
        price_override: Price | None,
        failure: tuple[ErrorKind, str] | None = None,
    ) -> MatchResult:
        """Score the final (or last legal) state and persist the result."""
        fragment = game.score(state)
        meta = dict(fragment.meta)
        meta["tokens_in"] = tokens_in
        meta["tokens_out"] = tokens_out
        success = fragment.success
        if failure is not None:
            kind, error = failure
            success = False
            meta["last_error"] = error
            meta["error_kind"] = kind.value

        finished_at = _now()
        result = MatchResult(
            game=game.name,
            model=model,
            seed=seed,
            started_at=started_at,
            finished_at=finished_at,
            success=success,
            score=fragment.score,
            cost_usd=self.prices.cost(model, tokens_in, tokens_out, price_override),
            meta=meta,
            turns=tuple(turns),
        )
        if self.sink is not None:
            self.sink.append_match_result(started_at, match_stem(model, game.name), result)

        logger.info(
            "[match] %s x %s -> success=%s score=%.2f cost=$%.4f turns=%d",
            game.name, model, result.success, result.score,
            result.cost_usd, len(turns),
        )
        return result
