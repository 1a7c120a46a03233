"""Graph loading, stylesheet loading and NetworkX analysis."""

from __future__ import annotations

import json
import logging
import os
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

import networkx as nx
import requests
import streamlit as st

from src.abstraction import prepare_graph
from src.config import CONFIG
from src.errors import MalformedInputError, ResourceLoadError
from src.models import GraphData, PreparedGraph
from src.utils import profile_time


@dataclass
class LoadedGraph:
    name: str
    graph: PreparedGraph
    style: Optional[str] = None


def _is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def resolve_graph_prefix(prefix: str, data_dir: Optional[str] = None) -> str:
    """Map a dataset prefix (the ``p`` query parameter) to its JSON file."""
    cleaned = (prefix or "").strip()
    if not cleaned or ".." in cleaned.replace("\\", "/").split("/"):
        raise ResourceLoadError(prefix, "invalid dataset prefix")
    return os.path.join(data_dir or CONFIG["DATA_DIR"], f"{cleaned}.json")


def read_text_resource(source: str, timeout: Optional[float] = None) -> str:
    """Read a local file or fetch an http(s) URL as text."""
    if _is_url(source):
        try:
            resp = requests.get(source, timeout=timeout or CONFIG["HTTP_TIMEOUT"])
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise ResourceLoadError(source, str(exc)) from exc
        return resp.text
    try:
        with open(source, "r", encoding="utf-8") as handle:
            return handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ResourceLoadError(source, str(exc)) from exc


def decode_graph_bytes(content: bytes, name: str) -> str:
    """Decode an uploaded graph file as UTF-8."""
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedInputError(f"Graph file '{name}' is not valid UTF-8: {exc}") from exc


def parse_graph_json(content: str) -> Dict[str, Any]:
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as exc:
        raise MalformedInputError(f"Graph is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict) or not isinstance(payload.get("elements"), dict):
        raise MalformedInputError("Graph payload is missing 'elements'")
    return payload


@profile_time
def load_graph_bundle(
    graph_source: str,
    stylesheet_source: Optional[str] = None,
) -> Tuple[Dict[str, Any], Optional[str]]:
    """Load the raw graph and the optional stylesheet side by side.

    Both reads must succeed; the first failure is logged and re-raised.
    """
    with ThreadPoolExecutor(max_workers=2) as pool:
        graph_future = pool.submit(read_text_resource, graph_source)
        style_future = pool.submit(read_text_resource, stylesheet_source) if stylesheet_source else None
        try:
            graph_text = graph_future.result()
            style = style_future.result() if style_future is not None else None
        except ResourceLoadError as exc:
            logging.error("Error fetching data: %s", exc)
            raise
    return parse_graph_json(graph_text), style


def load_prepared_graph(
    graph_source: str,
    stylesheet_source: Optional[str] = None,
    name: Optional[str] = None,
) -> LoadedGraph:
    raw_graph, style = load_graph_bundle(graph_source, stylesheet_source)
    prepared = prepare_graph(raw_graph)
    return LoadedGraph(name=name or os.path.basename(graph_source), graph=prepared, style=style)


def prepare_graph_from_text(content: str, name: str, style: Optional[str] = None) -> LoadedGraph:
    """Prepare a graph already held in memory (e.g. an uploaded file)."""
    return LoadedGraph(name=name, graph=prepare_graph(parse_graph_json(content)), style=style)


def build_networkx_graph(graph: GraphData, interactions: Optional[Iterable[str]] = None) -> nx.MultiDiGraph:
    wanted = set(interactions) if interactions is not None else None
    G = nx.MultiDiGraph()
    for node in graph.nodes:
        G.add_node(node.id, name=node.name, labels=list(node.labels))
    for edge in graph.edges:
        interaction = edge.interaction or edge.relation
        if wanted is not None and interaction not in wanted:
            continue
        G.add_edge(edge.source, edge.target, key=interaction, interaction=interaction, weight=edge.weight)
    return G


def relation_summary(graph: GraphData) -> List[Dict[str, Any]]:
    """Edge count and total weight per interaction, in first-seen order."""
    counts: Counter = Counter()
    weights: Dict[str, float] = {}
    for edge in graph.edges:
        interaction = edge.interaction or edge.relation or "nolabel"
        counts[interaction] += 1
        weights[interaction] = weights.get(interaction, 0) + edge.weight
    return [
        {"interaction": interaction, "edges": counts[interaction], "weight": weights[interaction]}
        for interaction in weights
    ]


@st.cache_data(show_spinner=False)
@profile_time
def compute_centrality_measures(
    graph: GraphData,
    interactions: Optional[Tuple[str, ...]] = None,
) -> Dict[str, Dict[str, float]]:
    multi = build_networkx_graph(graph, interactions)
    G = nx.DiGraph()
    G.add_nodes_from(multi.nodes())
    for source, target, data in multi.edges(data=True):
        if G.has_edge(source, target):
            G[source][target]["weight"] += data["weight"]
        else:
            G.add_edge(source, target, weight=data["weight"])

    if G.number_of_nodes() == 0:
        return {}

    degree = nx.degree_centrality(G)
    try:
        n = G.number_of_nodes()
        if n > 500:
            betweenness = nx.betweenness_centrality(G, k=min(100, n), seed=42)
        else:
            betweenness = nx.betweenness_centrality(G)
    except nx.NetworkXException as exc:
        logging.error("Betweenness centrality computation failed: %s", exc)
        betweenness = {node: 0.0 for node in G.nodes()}
    closeness = nx.closeness_centrality(G)
    try:
        pagerank = nx.pagerank(G, weight="weight")
    except nx.NetworkXException as exc:
        logging.error("PageRank computation failed: %s", exc)
        pagerank = {node: 0.0 for node in G.nodes()}

    return {
        node: {
            "degree": degree.get(node, 0.0),
            "betweenness": betweenness.get(node, 0.0),
            "closeness": closeness.get(node, 0.0),
            "pagerank": pagerank.get(node, 0.0),
        }
        for node in G.nodes()
    }
