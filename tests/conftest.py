"""Shared fixtures: a fresh, seeded store for each strategy."""

import pytest

from arenagrad import EngineConfig, GraphStore, ValueGraph


@pytest.fixture
def store():
    return GraphStore(EngineConfig(seed=1234))


@pytest.fixture
def value_graph():
    return ValueGraph(EngineConfig(seed=1234))


@pytest.fixture(params=["arena", "shared"])
def backend(request):
    """Run a test against both ownership strategies."""
    config = EngineConfig(seed=1234)
    if request.param == "arena":
        return GraphStore(config)
    return ValueGraph(config)
