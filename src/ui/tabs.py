"""Main-panel tabs for a loaded graph."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from src.config import CONFIG
from src.data_processing import LoadedGraph, compute_centrality_measures, relation_summary
from src.facets import (
    ROLE_STEREOTYPES,
    edges_among,
    match_nodes_by_name,
    nodes_with_analyses,
    nodes_with_traces,
    package_depths,
    role_stereotype_counts,
    role_stereotype_label,
)
from src.hierarchy import hierarchy_violations
from src.models import GraphData
from src.ui.sidebar import SidebarState
from src.utils import dumps_graph, slugify_filename


def _nodes_frame(graph: GraphData) -> pd.DataFrame:
    rows = [
        {
            "id": node.id,
            "name": node.name,
            "labels": ", ".join(node.labels),
            "kind": node.properties.get("kind"),
            "roleStereotype": node.properties.get("roleStereotype"),
        }
        for node in graph.nodes
    ]
    return pd.DataFrame(rows, columns=["id", "name", "labels", "kind", "roleStereotype"])


def _edges_frame(graph: GraphData, interactions) -> pd.DataFrame:
    wanted = set(interactions)
    rows = [
        {"source": e.source, "target": e.target, "interaction": e.interaction, "weight": e.weight}
        for e in graph.edges
        if e.interaction in wanted
    ]
    return pd.DataFrame(rows, columns=["source", "target", "interaction", "weight"])


def render_tabs(loaded: LoadedGraph, state: SidebarState) -> None:
    graph = loaded.graph.abstract
    max_rows = CONFIG["MAX_TABLE_ROWS"]
    tabs = st.tabs(["Summary", "Nodes", "Relationships", "Facets", "Centrality Measures", "Export"])

    with tabs[0]:
        col1, col2, col3 = st.columns(3)
        col1.metric("Nodes", len(graph.nodes))
        col2.metric("Edges", len(graph.edges))
        col3.metric("Abstracted", "yes" if loaded.graph.abstracted else "no")
        st.dataframe(pd.DataFrame(relation_summary(graph)), use_container_width=True)
        violations = hierarchy_violations(graph)
        if violations:
            st.warning(f"{len(violations)} structure(s) are both contained and nested: {', '.join(violations)}")

    with tabs[1]:
        frame = _nodes_frame(graph)
        matched = match_nodes_by_name(graph, state.name_query)
        if matched:
            frame = frame[frame["id"].isin(matched)]
            st.caption(f"{len(matched)} matching node(s), {len(edges_among(graph, matched))} edge(s) among them")
        st.dataframe(frame.head(max_rows), use_container_width=True)

    with tabs[2]:
        st.dataframe(_edges_frame(graph, state.interactions).head(max_rows), use_container_width=True)

    with tabs[3]:
        counts = role_stereotype_counts(graph)
        st.subheader("Role Stereotypes")
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "stereotype": role_stereotype_label(key),
                        "symbol": ROLE_STEREOTYPES[key]["symbol"],
                        "nodes": counts.get(key, 0),
                    }
                    for key in ROLE_STEREOTYPES
                ]
            ),
            use_container_width=True,
        )
        if state.traces:
            st.subheader("Feature traces")
            hits = nodes_with_traces(graph, state.traces)
            st.dataframe(
                pd.DataFrame([{"id": k, "traces": ", ".join(v)} for k, v in hits.items()]),
                use_container_width=True,
            )
        if state.analyses:
            st.subheader("Analyses")
            hits = nodes_with_analyses(graph, state.analyses)
            st.dataframe(
                pd.DataFrame([{"id": k, "analyses": ", ".join(v)} for k, v in hits.items()]),
                use_container_width=True,
            )
        depths = package_depths(graph)
        if depths:
            st.subheader("Package depth")
            st.dataframe(
                pd.DataFrame([{"id": k, "depth": v} for k, v in depths.items()]),
                use_container_width=True,
            )

    with tabs[4]:
        centrality = compute_centrality_measures(graph, tuple(state.interactions) or None)
        if centrality:
            frame = pd.DataFrame.from_dict(centrality, orient="index").sort_values("pagerank", ascending=False)
            st.dataframe(frame.head(max_rows), use_container_width=True)
        else:
            st.info("No nodes to analyse.")

    with tabs[5]:
        st.download_button(
            "Download abstract graph (JSON)",
            data=dumps_graph(graph.to_elements()),
            file_name=f"{slugify_filename(loaded.name)}-abstract.json",
            mime="application/json",
        )
        st.download_button(
            "Download original graph (JSON)",
            data=dumps_graph(loaded.graph.original),
            file_name=f"{slugify_filename(loaded.name)}-original.json",
            mime="application/json",
        )
