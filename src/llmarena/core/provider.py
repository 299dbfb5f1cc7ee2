"""CompletionProvider — uniform interface for model calls.

Provides the ABC and two offline implementations:
- MockProvider: strategy callable, for tests
- SimulatedProvider: deterministic schema-aware answers for smoke runs

Live providers live in their own modules (see openai_provider.py).
"""

from __future__ import annotations

import json
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Callable


class ProviderError(Exception):
    """Raised by providers on API failures. Never let raw SDK exceptions propagate."""

    def __init__(
        self,
        error_type: str,
        model_id: str,
        details: str = "",
    ):
        self.error_type = error_type  # "timeout", "rate_limit", "api_error", "empty_response"
        self.model_id = model_id
        self.details = details
        super().__init__(f"{error_type} from {model_id}: {details}")


@dataclass(frozen=True)
class CompletionRequest:
    """One prompt sent to a model."""

    system: str
    user: str
    json_schema: Mapping | None = None
    max_tokens: int | None = None
    timeout_ms: int | None = None
    temperature: float | None = None


@dataclass(frozen=True)
class CompletionResponse:
    """Immutable response from a model call."""

    raw_text: str
    latency_ms: float
    parsed: object | None = None
    tokens_in: int | None = None
    tokens_out: int | None = None


class CompletionProvider(ABC):
    """Abstract base for all completion providers."""

    name: str = "provider"

    @abstractmethod
    def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Send the request to the model and return its raw response."""


# Approximate chars per token for offline token accounting
_CHARS_PER_TOKEN = 4


def _approx_tokens(text: str) -> int:
    return max(1, len(text) // _CHARS_PER_TOKEN)


class MockProvider(CompletionProvider):
    """Deterministic provider for offline testing.

    Takes a strategy callable that receives the request and returns a
    raw text string.
    """

    def __init__(
        self,
        name: str,
        strategy: Callable[[CompletionRequest], str],
    ):
        self.name = name
        self._strategy = strategy
        self.requests: list[CompletionRequest] = []

    def complete(self, request: CompletionRequest) -> CompletionResponse:
        start = time.monotonic()
        self.requests.append(request)
        raw = self._strategy(request)
        elapsed_ms = (time.monotonic() - start) * 1000
        return CompletionResponse(
            raw_text=raw,
            latency_ms=elapsed_ms,
            tokens_in=_approx_tokens(request.system + request.user),
            tokens_out=_approx_tokens(raw),
        )


class SimulatedProvider(CompletionProvider):
    """Offline stand-in model that answers from the request schema alone.

    It never looks at the prompt's game state beyond what it needs to
    stay legal, so its scores are a floor rather than a benchmark.
    """

    name = "simulated"

    def __init__(self) -> None:
        self._fire_index = 0

    def complete(self, request: CompletionRequest) -> CompletionResponse:
        payload = self._answer(request)
        raw = json.dumps(payload)
        return CompletionResponse(
            raw_text=raw,
            parsed=payload,
            latency_ms=5.0,
            tokens_in=10,
            tokens_out=5,
        )

    def _answer(self, request: CompletionRequest) -> dict:
        props = (request.json_schema or {}).get("properties") or {}
        if "word" in props:
            return {"word": "test", "path": [0, 1, 2, 3]}
        if "color" in props:
            return {"color": "red", "shape": "circle"}
        if "ships" in props:
            if "place" in request.user.lower():
                return {
                    "action": "place",
                    "ships": [
                        {"r": 0, "c": 0, "dir": "H"},
                        {"r": 2, "c": 2, "dir": "V"},
                    ],
                }
            # Sweep the board row by row; each player sees its own turn
            # alternate, so step the shared cursor every second call.
            cell = (self._fire_index // 2) % 25
            self._fire_index += 1
            return {"action": "fire", "r": cell // 5, "c": cell % 5}
        if "value" in props:
            return {"value": _last_number(request.user)}
        return {}


def _last_number(text: str) -> int:
    digits = [int(tok) for tok in text.replace(",", " ").replace(".", " ").split() if tok.isdigit()]
    return digits[-1] if digits else 1
