"""OpenAI-compatible completion provider.

Works with the OpenAI API and any OpenAI-compatible endpoint
(OpenRouter, local servers) via base_url override.
"""

import time
from typing import Any

import openai
from openai import OpenAI

from llmarena.core.provider import (
    CompletionProvider,
    CompletionRequest,
    CompletionResponse,
    ProviderError,
)
from llmarena.core.schemas import schema_to_json

_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
_DEFAULT_TIMEOUT_MS = 30_000


class OpenAIProvider(CompletionProvider):
    """Provider for OpenAI-compatible chat completion APIs."""

    def __init__(
        self,
        model_id: str,
        api_key: str,
        base_url: str | None = None,
        extra_headers: dict[str, str] | None = None,
    ):
        self.name = model_id
        self._model_id = model_id

        client_kwargs: dict[str, Any] = {"api_key": api_key}
        if base_url:
            client_kwargs["base_url"] = base_url
        if extra_headers:
            client_kwargs["default_headers"] = extra_headers
        self._client = OpenAI(**client_kwargs)

    def complete(self, request: CompletionRequest) -> CompletionResponse:
        start = time.monotonic()
        completion = self._call_api(request)
        elapsed_ms = (time.monotonic() - start) * 1000

        if not completion.choices:
            raise ProviderError(
                "empty_response", self._model_id,
                "API returned no choices",
            )

        raw_text = completion.choices[0].message.content or ""
        usage = completion.usage
        return CompletionResponse(
            raw_text=raw_text,
            latency_ms=elapsed_ms,
            tokens_in=usage.prompt_tokens if usage else None,
            tokens_out=usage.completion_tokens if usage else None,
        )

    def _call_api(self, request: CompletionRequest):
        user = request.user
        if request.json_schema is not None:
            user = (
                f"{user}\n\nReturn ONLY valid JSON matching this schema:\n"
                f"{schema_to_json(request.json_schema)}"
            )
        kwargs: dict[str, Any] = {
            "model": self._model_id,
            "messages": [
                {"role": "system", "content": request.system},
                {"role": "user", "content": user},
            ],
            "timeout": (request.timeout_ms or _DEFAULT_TIMEOUT_MS) / 1000,
        }
        if request.json_schema is not None:
            kwargs["response_format"] = {"type": "json_object"}
        if request.max_tokens is not None:
            kwargs["max_tokens"] = request.max_tokens
        if request.temperature is not None:
            kwargs["temperature"] = request.temperature

        # No retries: a provider failure aborts the match
        try:
            return self._client.chat.completions.create(**kwargs)
        except openai.APITimeoutError as e:
            raise ProviderError("timeout", self._model_id, str(e)) from e
        except openai.RateLimitError as e:
            raise ProviderError("rate_limit", self._model_id, str(e)) from e
        except openai.APIError as e:
            raise ProviderError("api_error", self._model_id, str(e)) from e
        except Exception as e:
            raise ProviderError("api_error", self._model_id, str(e)) from e


class OpenRouterProvider(OpenAIProvider):
    """Provider for OpenRouter -- uses the OpenAI-compatible API."""

    def __init__(
        self,
        model_id: str,
        api_key: str,
        site_url: str | None = None,
        app_name: str | None = None,
    ):
        extra_headers: dict[str, str] = {}
        if site_url:
            extra_headers["HTTP-Referer"] = site_url
        if app_name:
            extra_headers["X-Title"] = app_name

        super().__init__(
            model_id=model_id,
            api_key=api_key,
            base_url=_OPENROUTER_BASE_URL,
            extra_headers=extra_headers or None,
        )
