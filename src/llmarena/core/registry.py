"""Provider registry — model names to provider instances.

Names:
    simulated                 offline deterministic model
    mock:<strategy>           offline canned strategy (see STRATEGIES)
    openai:<model_id>         OpenAI API
    openrouter:<model_id>     OpenRouter API

A fresh provider is built for every match so no provider state is
shared between concurrent matches.
"""

from __future__ import annotations

import os

from llmarena.core.provider import CompletionProvider, CompletionRequest, MockProvider, SimulatedProvider


def _garbage_strategy(request: CompletionRequest) -> str:
    return "I'd rather not answer in JSON today."


def _empty_object_strategy(request: CompletionRequest) -> str:
    # Answers with an empty object: valid JSON, rarely a valid action
    return "{}"


STRATEGIES = {
    "garbage": _garbage_strategy,
    "empty": _empty_object_strategy,
}

_API_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
}


def get_provider(
    name: str,
    api_key_env: str | None = None,
    base_url: str | None = None,
) -> CompletionProvider:
    """Build the provider for a model name."""
    if name == "simulated":
        return SimulatedProvider()

    prefix, _, model_id = name.partition(":")
    if not model_id:
        raise ValueError(f"Unknown model adapter: {name!r}")

    if prefix == "mock":
        strategy = STRATEGIES.get(model_id)
        if strategy is None:
            raise ValueError(
                f"Unknown mock strategy: {model_id!r}. "
                f"Available: {list(STRATEGIES)}"
            )
        return MockProvider(name=name, strategy=strategy)

    if prefix in _API_KEY_ENV:
        env_var = api_key_env or _API_KEY_ENV[prefix]
        api_key = os.environ.get(env_var)
        if not api_key:
            raise ValueError(f"{env_var} missing for model {name!r}")
        # Imported lazily so offline runs never build an HTTP client
        from llmarena.core.openai_provider import OpenAIProvider, OpenRouterProvider

        if prefix == "openrouter":
            return OpenRouterProvider(model_id=model_id, api_key=api_key, app_name="llmarena")
        return OpenAIProvider(model_id=model_id, api_key=api_key, base_url=base_url)

    raise ValueError(f"Unknown model adapter: {name!r}")
