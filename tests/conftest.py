"""Root-level test configuration and fixtures."""

from unittest.mock import MagicMock

import pytest


@pytest.fixture(autouse=True)
def isolate_home(tmp_path, monkeypatch):
    """Keep settings lookups and env overrides away from the real user config."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for var in ("TYPELINK_DEFAULT_GRAPH_NAME", "TYPELINK_OUTPUT_FORMAT", "TYPELINK_JSON_INDENT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def recording_builder():
    """A builder factory whose graphs are MagicMocks recording every call.

    Each requested name gets its own mock; ``recording_builder.graphs`` maps
    names to the mocks created so far.
    """
    graphs: dict[str, MagicMock] = {}

    def factory(name: str) -> MagicMock:
        graph = MagicMock(name=f"graph[{name}]")
        graphs[name] = graph
        return graph

    factory_mock = MagicMock(side_effect=factory)
    factory_mock.graphs = graphs
    return factory_mock
