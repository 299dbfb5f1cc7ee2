"""Shared test fixtures for llmarena."""

import pytest

from llmarena.core.provider import MockProvider
from llmarena.core.storage import RunStore


def scripted(*responses):
    """Strategy that replays ``responses`` in order, repeating the last one."""
    replies = list(responses)

    def strategy(request):
        return replies.pop(0) if len(replies) > 1 else replies[0]

    return strategy


@pytest.fixture
def tmp_output(tmp_path):
    """Provide a temporary runs directory for test runs."""
    return tmp_path / "runs"


@pytest.fixture
def store(tmp_output):
    return RunStore(tmp_output)


@pytest.fixture
def make_provider():
    def _make(*responses, name="mock"):
        return MockProvider(name=name, strategy=scripted(*responses))
    return _make
