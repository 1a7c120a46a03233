"""Facet lists and name queries derived from a prepared graph."""

from __future__ import annotations

import re
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Set

from src.config import DEFAULT_PARENT_RELATION
from src.hierarchy import parent_edges
from src.models import Edge, GraphData, Node

ROLE_STEREOTYPES: Dict[str, Dict[str, Optional[str]]] = {
    "Controller": {"symbol": "CT", "color_dark": "#984ea3", "color_light": "#decbe4"},
    "Coordinator": {"symbol": "CO", "color_dark": "#4daf4a", "color_light": "#ccebc5"},
    "Information Holder": {"symbol": "IH", "color_dark": "#e4105c", "color_light": "#fbb4ae"},
    "User Interfacer": {"symbol": "ITu", "color_dark": "#ff7f00", "color_light": "#fed9a6"},
    "Internal Interfacer": {"symbol": "ITi", "color_dark": "#ff7f00", "color_light": "#fed9a6"},
    "External Interfacer": {"symbol": "ITe", "color_dark": "#ff7f00", "color_light": "#fed9a6"},
    "Service Provider": {"symbol": "SP", "color_dark": "#377eb8", "color_light": "#b3cde3"},
    "Structurer": {"symbol": "ST", "color_dark": "#f781bf", "color_light": "#fddaec"},
    "*": {"symbol": "UR", "label": "Unreliable"},
    "-": {"symbol": "UD", "label": "Undetermined"},
}

_QUERY_SPLIT_RE = re.compile(r"[,\s]+")


def _ordered_unique(values: Iterable[Any]) -> List[Any]:
    seen: Dict[Any, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return list(seen)


def collect_interactions(graph: GraphData) -> List[str]:
    return _ordered_unique(edge.interaction or edge.relation or "nolabel" for edge in graph.edges)


def collect_traces(graph: GraphData) -> List[str]:
    return _ordered_unique(
        trace for node in graph.nodes for trace in (node.properties.get("traces") or [])
    )


def _analysis_names(node: Node) -> List[str]:
    names = []
    for finding in node.properties.get("vulnerabilities") or []:
        if isinstance(finding, dict) and finding.get("analysis_name"):
            names.append(finding["analysis_name"])
    return names


def collect_vulnerability_analyses(graph: GraphData) -> List[str]:
    return _ordered_unique(name for node in graph.nodes for name in _analysis_names(node))


def role_stereotype_label(key: str) -> str:
    entry = ROLE_STEREOTYPES.get(key) or {}
    return entry.get("label") or key


def role_stereotype_counts(graph: GraphData) -> Dict[str, int]:
    counts = Counter(
        node.properties.get("roleStereotype")
        for node in graph.nodes
        if node.properties.get("roleStereotype")
    )
    return {key: counts[key] for key in ROLE_STEREOTYPES if counts[key]}


def match_nodes_by_name(graph: GraphData, query: str) -> List[str]:
    """Ids of nodes whose display name appears in a comma/space separated query."""
    terms = {term for term in _QUERY_SPLIT_RE.split(query or "") if term}
    if not terms:
        return []
    return [node.id for node in graph.nodes if node.name in terms]


def edges_among(graph: GraphData, node_ids: Iterable[str]) -> List[Edge]:
    members = set(node_ids)
    return [edge for edge in graph.edges if edge.source in members and edge.target in members]


def nodes_with_traces(graph: GraphData, traces: Iterable[str]) -> Dict[str, List[str]]:
    """Map node id to the selected traces it belongs to, in selection order."""
    selected = list(traces)
    result: Dict[str, List[str]] = {}
    for node in graph.nodes:
        node_traces = set(node.properties.get("traces") or [])
        hits = [trace for trace in selected if trace in node_traces]
        if hits:
            result[node.id] = hits
    return result


def nodes_with_analyses(graph: GraphData, analyses: Iterable[str]) -> Dict[str, List[str]]:
    selected = list(analyses)
    result: Dict[str, List[str]] = {}
    for node in graph.nodes:
        found = set(_analysis_names(node))
        hits = [name for name in selected if name in found]
        if hits:
            result[node.id] = hits
    return result


def package_depths(graph: GraphData, relation: str = DEFAULT_PARENT_RELATION) -> Dict[str, int]:
    """Number of ancestors of each package node along the parent relation."""
    parents: Dict[str, str] = {}
    for edge in parent_edges(graph, relation):
        parents[edge.target] = edge.source

    depths: Dict[str, int] = {}
    for node in graph.nodes:
        if node.properties.get("kind") != "package":
            continue
        depth = 0
        visited: Set[str] = {node.id}
        current = parents.get(node.id)
        while current is not None and current not in visited:
            visited.add(current)
            depth += 1
            current = parents.get(current)
        depths[node.id] = depth
    return depths
