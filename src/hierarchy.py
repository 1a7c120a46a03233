"""Split raw containment into package containment and class nesting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Set

from src.config import STRUCTURE_LABEL
from src.models import Edge, GraphData, Node
from src.relations import Relation, RelationStore


@dataclass
class HierarchySplit:
    nested_classes: Set[str]
    top_level_classes: List[str]
    contains: Relation
    nests: Relation


def reduce_hierarchy(nodes: List[Node], store: RelationStore) -> HierarchySplit:
    """Rewrite the flat ``contains`` relation.

    Structures contained by another structure are nested classes; every other
    structure is top-level. Containment edges leaving a top-level structure
    become ``nests`` edges, unless the graph already provides a ``nests``
    relation, which is then used as is.
    """
    by_id: Dict[str, Node] = {node.id: node for node in nodes}
    contains = store.get("contains")

    nested_classes: Set[str] = set()
    for edge in contains:
        source = by_id.get(edge.source)
        if source is not None and STRUCTURE_LABEL in source.labels:
            nested_classes.add(edge.target)

    top_level_classes = [
        node.id for node in nodes if STRUCTURE_LABEL in node.labels and node.id not in nested_classes
    ]
    top_level = set(top_level_classes)

    new_contains = [edge.copy() for edge in contains if edge.source not in top_level]
    if store.has("nests"):
        nests = [edge.copy() for edge in store.get("nests")]
    else:
        nests = [edge.copy(label="nests") for edge in contains if edge.source in top_level]

    return HierarchySplit(
        nested_classes=nested_classes,
        top_level_classes=top_level_classes,
        contains=new_contains,
        nests=nests,
    )


def hierarchy_violations(graph: GraphData) -> List[str]:
    """Return structure ids that are both a ``contains`` and a ``nests`` target."""
    contained: Set[str] = set()
    nested: Set[str] = set()
    for edge in graph.edges:
        relation = edge.relation
        if relation == "contains":
            contained.add(edge.target)
        elif relation == "nests":
            nested.add(edge.target)
    return [
        node.id
        for node in graph.nodes
        if STRUCTURE_LABEL in node.labels and node.id in contained and node.id in nested
    ]


def parent_edges(graph: GraphData, relation: str = "contains") -> List[Edge]:
    return [edge for edge in graph.edges if edge.relation == relation]
