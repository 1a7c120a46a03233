"""Sidebar: graph loading and filter controls."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, MutableMapping, Optional

import streamlit as st

from src.config import CONFIG, DEFAULT_VISIBLE_INTERACTIONS
from src.data_processing import (
    LoadedGraph,
    decode_graph_bytes,
    load_prepared_graph,
    prepare_graph_from_text,
    read_text_resource,
    resolve_graph_prefix,
)
from src.errors import MalformedInputError, ResourceLoadError
from src.facets import collect_interactions, collect_traces, collect_vulnerability_analyses


@dataclass
class SidebarState:
    interactions: List[str]
    name_query: str
    traces: List[str]
    analyses: List[str]


def init_session_state() -> None:
    defaults = {
        "loaded_graph": None,
        "load_error": None,
        "load_signature": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def _stylesheet_source() -> Optional[str]:
    return CONFIG["STYLESHEET_PATH"] or None


def replace_loaded_graph(
    state: MutableMapping[str, Any],
    signature: object,
    loader: Callable[[], LoadedGraph],
) -> bool:
    """Run a load and swap it into ``state`` only if it succeeds.

    A failed load keeps the previous graph and clears the signature so the
    same source can be retried.
    """
    if state.get("load_signature") == signature:
        return False
    try:
        loaded = loader()
    except (ResourceLoadError, MalformedInputError) as exc:
        logging.error("Graph load failed: %s", exc)
        state["load_error"] = str(exc)
        state["load_signature"] = None
        return False
    state["loaded_graph"] = loaded
    state["load_signature"] = signature
    state["load_error"] = None
    return True


def _replace_graph(signature: object, loader: Callable[[], LoadedGraph]) -> None:
    replace_loaded_graph(st.session_state, signature, loader)


def render_sidebar() -> SidebarState:
    prefix = st.query_params.get("p")
    if prefix:
        _replace_graph(
            ("prefix", prefix),
            lambda: load_prepared_graph(
                resolve_graph_prefix(prefix), _stylesheet_source(), name=f"{prefix}.json"
            ),
        )

    with st.sidebar.expander("Load Graph", expanded=st.session_state.loaded_graph is None):
        uploaded = st.file_uploader("Upload graph JSON", type=["json"])
        if uploaded is not None:

            def _from_upload() -> LoadedGraph:
                style_source = _stylesheet_source()
                style = read_text_resource(style_source) if style_source else None
                content = decode_graph_bytes(uploaded.getvalue(), uploaded.name)
                return prepare_graph_from_text(content, uploaded.name, style)

            _replace_graph(("upload", uploaded.name, uploaded.size), _from_upload)

        url = st.text_input("...or fetch from URL", value="")
        if st.button("Fetch") and url.strip():
            _replace_graph(
                ("url", url.strip()),
                lambda: load_prepared_graph(url.strip(), _stylesheet_source()),
            )

    if st.session_state.load_error:
        st.sidebar.error(st.session_state.load_error)

    loaded: Optional[LoadedGraph] = st.session_state.loaded_graph
    if loaded is None:
        return SidebarState(interactions=[], name_query="", traces=[], analyses=[])

    graph = loaded.graph.abstract
    available = collect_interactions(graph)
    interactions = st.sidebar.multiselect(
        "Relationships",
        options=available,
        default=[i for i in DEFAULT_VISIBLE_INTERACTIONS if i in available] or available,
    )
    name_query = st.sidebar.text_input("Highlight classes (comma separated)", value="")
    traces = st.sidebar.multiselect("Feature traces", options=collect_traces(graph))
    analyses = st.sidebar.multiselect("Analyses", options=collect_vulnerability_analyses(graph))
    return SidebarState(interactions=interactions, name_query=name_query, traces=traces, analyses=analyses)
