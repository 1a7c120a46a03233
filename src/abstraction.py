"""Derive the structure-level graph from a method-level graph."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional

from src.config import (
    ABSTRACT_NODE_LABELS,
    ABSTRACT_RELATION_ORDER,
    ABSTRACTION_TRIGGER_LABELS,
    CONFIG,
)
from src.hierarchy import reduce_hierarchy
from src.models import Edge, GraphData, Node, PreparedGraph
from src.relations import Relation, compose, index_relations, lift
from src.utils import profile_time


def collect_unique_labels(nodes: List[Node]) -> List[str]:
    seen: Dict[str, None] = {}
    for node in nodes:
        for label in node.labels:
            seen.setdefault(label, None)
    return list(seen)


def needs_abstraction(nodes: List[Node]) -> bool:
    """True when the graph holds method-level nodes."""
    return any(label in ABSTRACTION_TRIGGER_LABELS for label in collect_unique_labels(nodes))


def derive_relations(graph: GraphData, join: Optional[str] = None) -> Dict[str, Relation]:
    """Compute every abstract relation, keyed in emission order."""
    store = index_relations(graph.edges)
    has_script = store.get("hasScript")

    calls = lift(has_script, store.get("invokes"), "calls", join=join)
    constructs = compose(has_script, store.get("instantiates"), "constructs", join=join)
    holds = compose(store.get("hasVariable"), store.get("type"), "holds", join=join)
    accepts = compose(
        has_script,
        compose(store.get("hasParameter"), store.get("type"), join=join),
        "accepts",
        join=join,
    )
    returns = compose(has_script, store.get("returnType"), "returns", join=join)

    split = reduce_hierarchy(graph.nodes, store)
    logging.debug(
        "Hierarchy: %d top-level structure(s), %d nested structure(s)",
        len(split.top_level_classes),
        len(split.nested_classes),
    )

    derived = {
        "contains": split.contains,
        "specializes": [edge.copy() for edge in store.get("specializes")],
        "nests": split.nests,
        "calls": calls,
        "constructs": constructs,
        "holds": holds,
        "accepts": accepts,
        "returns": returns,
    }
    return {name: derived[name] for name in ABSTRACT_RELATION_ORDER}


@profile_time
def abstractize(graph: GraphData, join: Optional[str] = None) -> GraphData:
    relations = derive_relations(graph, join=join)
    nodes = [node.copy() for node in graph.nodes if node.has_any_label(ABSTRACT_NODE_LABELS)]
    edges: List[Edge] = [edge for relation in relations.values() for edge in relation]
    logging.info(
        "Abstracted graph: %d -> %d node(s), %d -> %d edge(s)",
        len(graph.nodes),
        len(nodes),
        len(graph.edges),
        len(edges),
    )
    return GraphData(nodes=nodes, edges=edges)


def normalize_display(graph: GraphData) -> GraphData:
    """Attach display names to nodes and interaction groups to edges, in place."""
    for node in graph.nodes:
        props = node.properties or {}
        node.name = props.get("name") or props.get("shortname") or props.get("simpleName")
        node.label = node.name

    for edge in graph.edges:
        edge.interaction = edge.relation or "nolabel"
        edge.group = edge.interaction
    return graph


@profile_time
def prepare_graph(
    raw_graph: Dict[str, Any],
    strict: Optional[bool] = None,
    join: Optional[str] = None,
) -> PreparedGraph:
    """Turn a raw JSON graph into ``original`` and ``abstract`` views.

    The input mapping is left untouched; ``original`` is a deep copy of it.
    Graphs without method-level nodes are already coarse and are only
    normalised.
    """
    graph = GraphData.from_elements(raw_graph, strict=CONFIG["STRICT_EDGES"] if strict is None else strict)
    original = copy.deepcopy(raw_graph)

    abstracted = needs_abstraction(graph.nodes)
    abstract = abstractize(graph, join=join) if abstracted else graph.copy()
    normalize_display(abstract)
    return PreparedGraph(original=original, abstract=abstract, abstracted=abstracted)
