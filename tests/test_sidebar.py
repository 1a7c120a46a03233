"""
Graph replacement tests
=======================

A load either replaces the session graph completely or leaves it untouched,
and a failed source can be retried.
"""

from pathlib import Path

from src.data_processing import load_prepared_graph, prepare_graph_from_text
from src.errors import MalformedInputError, ResourceLoadError
from src.ui.sidebar import replace_loaded_graph

EXAMPLE = Path(__file__).resolve().parent.parent / "data" / "example.json"


def fresh_state():
    return {"loaded_graph": None, "load_error": None, "load_signature": None}


def example_loader():
    return prepare_graph_from_text(EXAMPLE.read_text(encoding="utf-8"), "example.json")


def failing_loader():
    raise ResourceLoadError("http://example.org/g.json", "connection refused")


class TestReplaceLoadedGraph:

    def test_successful_load_is_stored(self):
        state = fresh_state()
        assert replace_loaded_graph(state, ("url", "a"), example_loader) is True
        assert state["loaded_graph"].name == "example.json"
        assert state["load_signature"] == ("url", "a")
        assert state["load_error"] is None

    def test_failed_load_keeps_previous_graph(self):
        state = fresh_state()
        replace_loaded_graph(state, ("url", "a"), example_loader)
        previous = state["loaded_graph"]

        assert replace_loaded_graph(state, ("url", "b"), failing_loader) is False
        assert state["loaded_graph"] is previous
        assert "connection refused" in state["load_error"]

    def test_malformed_graph_keeps_previous_graph(self, tmp_path):
        state = fresh_state()
        replace_loaded_graph(state, ("url", "a"), example_loader)
        previous = state["loaded_graph"]
        bad = tmp_path / "bad.json"
        bad.write_text('{"nodes": []}', encoding="utf-8")

        replace_loaded_graph(state, ("file", str(bad)), lambda: load_prepared_graph(str(bad)))
        assert state["loaded_graph"] is previous
        assert state["load_error"]

    def test_failed_source_can_be_retried(self):
        state = fresh_state()
        replace_loaded_graph(state, ("url", "a"), failing_loader)
        assert state["load_signature"] is None

        assert replace_loaded_graph(state, ("url", "a"), example_loader) is True
        assert state["loaded_graph"] is not None
        assert state["load_error"] is None

    def test_same_source_is_not_reloaded(self):
        state = fresh_state()
        calls = []

        def counting_loader():
            calls.append(1)
            return example_loader()

        replace_loaded_graph(state, ("upload", "x", 1), counting_loader)
        assert replace_loaded_graph(state, ("upload", "x", 1), counting_loader) is False
        assert len(calls) == 1

    def test_loader_errors_are_load_errors_only(self):
        state = fresh_state()

        def malformed():
            raise MalformedInputError("Graph payload is missing 'elements'")

        replace_loaded_graph(state, ("url", "a"), malformed)
        assert state["loaded_graph"] is None
        assert state["load_error"] == "Graph payload is missing 'elements'"
