"""Streamlit application shell."""

from __future__ import annotations


def render_app() -> None:
    import streamlit as st

    from src.config import APP_TITLE

    # set_page_config() must run before any other streamlit command.
    st.set_page_config(page_title=APP_TITLE, layout="wide")

    from src.ui.sidebar import init_session_state, render_sidebar
    from src.ui.tabs import render_tabs

    init_session_state()
    state = render_sidebar()

    loaded = st.session_state.loaded_graph
    if loaded is None:
        st.title(APP_TITLE)
        st.info("Load a graph from the sidebar, or open the app with ?p=<dataset>.")
        return

    st.title(f"{APP_TITLE}: {loaded.name}")
    render_tabs(loaded, state)
