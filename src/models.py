"""Data models for software structure graphs."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from src.errors import MalformedInputError

_NODE_KEYS = {"id", "labels", "properties", "name", "label"}
_EDGE_KEYS = {"source", "target", "label", "labels", "properties", "interaction", "group"}


@dataclass
class Edge:
    source: str
    target: str
    label: Optional[str] = None
    labels: Optional[List[str]] = None
    properties: Optional[Dict[str, Any]] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    interaction: Optional[str] = None
    group: Optional[str] = None

    @property
    def relation(self) -> str:
        """Effective relation name: ``label``, else the joined ``labels``."""
        return self.label or ",".join(self.labels or [])

    @property
    def weight(self) -> float:
        # Zero and missing weights both count as 1.
        return (self.properties or {}).get("weight") or 1

    def copy(self, **changes: Any) -> "Edge":
        values = {
            "source": self.source,
            "target": self.target,
            "label": self.label,
            "labels": list(self.labels) if self.labels is not None else None,
            "properties": copy.deepcopy(self.properties),
            "extra": copy.deepcopy(self.extra),
            "interaction": self.interaction,
            "group": self.group,
        }
        values.update(changes)
        return Edge(**values)

    def to_data(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        data["source"] = self.source
        data["target"] = self.target
        if self.label is not None:
            data["label"] = self.label
        if self.labels is not None:
            data["labels"] = list(self.labels)
        if self.properties is not None:
            data["properties"] = self.properties
        if self.interaction is not None:
            data["interaction"] = self.interaction
        if self.group is not None:
            data["group"] = self.group
        return data

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "Edge":
        if not isinstance(data, dict):
            raise MalformedInputError(f"Edge data must be an object, got {type(data).__name__}")
        if "source" not in data or "target" not in data:
            raise MalformedInputError(f"Edge is missing 'source' or 'target': {str(data)[:200]}")
        where = f"{data['source']} -> {data['target']}"
        label = data.get("label")
        if label is not None and not isinstance(label, str):
            raise MalformedInputError(f"Edge {where} has a non-string 'label': {label!r}")
        labels = data.get("labels")
        if isinstance(labels, (list, tuple)) and not all(isinstance(item, str) for item in labels):
            raise MalformedInputError(f"Edge {where} has non-string entries in 'labels': {labels!r}")
        properties = data.get("properties")
        if isinstance(properties, dict):
            weight = properties.get("weight")
            if weight is not None and (isinstance(weight, bool) or not isinstance(weight, (int, float))):
                raise MalformedInputError(f"Edge {where} has a non-numeric weight: {weight!r}")
        return cls(
            source=str(data["source"]),
            target=str(data["target"]),
            label=label,
            labels=list(labels) if isinstance(labels, (list, tuple)) else None,
            properties=dict(properties) if isinstance(properties, dict) else None,
            extra={k: v for k, v in data.items() if k not in _EDGE_KEYS},
            interaction=data.get("interaction"),
            group=data.get("group"),
        )


@dataclass
class Node:
    id: str
    labels: List[str]
    properties: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)
    name: Optional[str] = None
    label: Optional[str] = None

    def has_any_label(self, labels: Iterable[str]) -> bool:
        wanted = set(labels)
        return any(label in wanted for label in self.labels)

    def copy(self) -> "Node":
        return Node(
            id=self.id,
            labels=list(self.labels),
            properties=copy.deepcopy(self.properties),
            extra=copy.deepcopy(self.extra),
            name=self.name,
            label=self.label,
        )

    def to_data(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        data["id"] = self.id
        data["labels"] = list(self.labels)
        data["properties"] = self.properties
        if self.name is not None:
            data["name"] = self.name
        if self.label is not None:
            data["label"] = self.label
        return data

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "Node":
        if not isinstance(data, dict):
            raise MalformedInputError(f"Node data must be an object, got {type(data).__name__}")
        node_id = data.get("id")
        if node_id is None or node_id == "":
            raise MalformedInputError(f"Node is missing an 'id': {str(data)[:200]}")
        labels = data.get("labels")
        if not isinstance(labels, (list, tuple)):
            raise MalformedInputError(f"Node '{node_id}' is missing a 'labels' list")
        properties = data.get("properties")
        return cls(
            id=str(node_id),
            labels=[str(label) for label in labels],
            properties=dict(properties) if isinstance(properties, dict) else {},
            extra={k: v for k, v in data.items() if k not in _NODE_KEYS},
            name=data.get("name"),
            label=data.get("label"),
        )


@dataclass
class GraphData:
    nodes: List[Node]
    edges: List[Edge] = field(default_factory=list)

    def node_index(self) -> Dict[str, Node]:
        return {node.id: node for node in self.nodes}

    def copy(self) -> "GraphData":
        return GraphData(
            nodes=[node.copy() for node in self.nodes],
            edges=[edge.copy() for edge in self.edges],
        )

    def to_elements(self) -> Dict[str, Any]:
        return {
            "elements": {
                "nodes": [{"data": node.to_data()} for node in self.nodes],
                "edges": [{"data": edge.to_data()} for edge in self.edges],
            }
        }

    @classmethod
    def from_elements(cls, payload: Any, strict: bool = False) -> "GraphData":
        """Build a graph from the ``{"elements": {"nodes", "edges"}}`` JSON shape.

        Edges without ``label`` or ``labels`` are kept with a warning (they
        join no relation), or rejected when ``strict`` is set. Nodes sharing
        an id collapse into one: the first position, the last data.
        """
        if not isinstance(payload, dict):
            raise MalformedInputError(f"Graph payload must be an object, got {type(payload).__name__}")
        elements = payload.get("elements")
        if not isinstance(elements, dict):
            raise MalformedInputError("Graph payload is missing 'elements'")

        nodes: Dict[str, Node] = {}
        for entry in elements.get("nodes") or []:
            data = entry.get("data") if isinstance(entry, dict) else None
            node = Node.from_data(data)
            if node.id in nodes:
                logging.warning("Duplicate node id '%s'; keeping the last definition", node.id)
            nodes[node.id] = node

        edges: List[Edge] = []
        for entry in elements.get("edges") or []:
            data = entry.get("data") if isinstance(entry, dict) else None
            edge = Edge.from_data(data)
            if not edge.relation:
                if strict:
                    raise MalformedInputError(
                        f"Edge {edge.source} -> {edge.target} has neither 'label' nor 'labels'"
                    )
                logging.warning("Edge %s -> %s has no label", edge.source, edge.target)
            edges.append(edge)
        return cls(nodes=list(nodes.values()), edges=edges)


@dataclass
class PreparedGraph:
    original: Dict[str, Any]
    abstract: GraphData
    abstracted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"original": self.original, "abstract": self.abstract.to_elements()}
