"""Relation indexing and relational algebra over edge lists.

A relation is a list of :class:`~src.models.Edge` sharing one label. The
functions here never mutate their inputs and treat a missing relation
(``None``) the same as an empty one.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from src.config import COMPOSE_JOIN_MODES, CONFIG
from src.models import Edge

Relation = List[Edge]


class RelationStore:
    """Edges grouped by relation label, in input order."""

    def __init__(self, relations: Optional[Dict[str, Relation]] = None) -> None:
        self._relations: Dict[str, Relation] = relations or {}

    def get(self, label: str) -> Relation:
        relation = self._relations.get(label)
        if relation is None:
            logging.debug("Relation '%s' not present; using an empty relation.", label)
            return []
        return relation

    def has(self, label: str) -> bool:
        return label in self._relations

    def labels(self) -> List[str]:
        return list(self._relations)

    def __contains__(self, label: object) -> bool:
        return label in self._relations

    def __iter__(self) -> Iterator[str]:
        return iter(self._relations)

    def __len__(self) -> int:
        return len(self._relations)


def index_relations(edges: Iterable[Edge]) -> RelationStore:
    relations: Dict[str, Relation] = {}
    for edge in edges:
        label = edge.relation
        if not label:
            logging.debug("Unlabeled edge %s -> %s left out of the relation index", edge.source, edge.target)
            continue
        relations.setdefault(label, []).append(edge)
    return RelationStore(relations)


def invert(edges: Optional[Relation]) -> Relation:
    """Swap endpoints and prefix the label with ``inv_``.

    Applying it twice restores the endpoints but not the label
    (``X`` becomes ``inv_inv_X``).
    """
    return [
        edge.copy(source=edge.target, target=edge.source, label=f"inv_{edge.relation}")
        for edge in edges or []
    ]


def _resolve_join(join: Optional[str]) -> str:
    mode = join or CONFIG["COMPOSE_JOIN"]
    if mode not in COMPOSE_JOIN_MODES:
        raise ValueError(f"Unknown compose join mode '{mode}'; expected one of {COMPOSE_JOIN_MODES}")
    return mode


def _index_by_source(edges: Relation, join: str) -> Dict[str, List[Edge]]:
    index: Dict[str, List[Edge]] = {}
    for edge in edges:
        if join == "single":
            # Later edges replace earlier ones with the same source.
            index[edge.source] = [edge]
        else:
            index.setdefault(edge.source, []).append(edge)
    return index


def compose(
    r1: Optional[Relation],
    r2: Optional[Relation],
    new_label: Optional[str] = None,
    join: Optional[str] = None,
) -> Relation:
    """Compose ``r1`` with ``r2`` through their shared middle node.

    Each produced edge weighs ``w1 * w2``. Edges that land on an existing
    (source, target) pair add their weight to it instead of being appended,
    so output order is the first occurrence of each pair.

    With ``join="single"`` each middle node follows only one ``r2`` edge, the
    last one listed for that source. ``join="all"`` follows every one.
    """
    if not r1 or not r2:
        return []
    mode = _resolve_join(join)
    by_source = _index_by_source(r2, mode)

    result: Relation = []
    positions: Dict[Tuple[str, str], int] = {}
    for first in r1:
        for second in by_source.get(first.target, ()):
            weight = second.weight * first.weight
            key = (first.source, second.target)
            position = positions.get(key)
            if position is None:
                positions[key] = len(result)
                result.append(
                    Edge(
                        source=first.source,
                        target=second.target,
                        label=new_label or f"{first.relation}-{second.relation}",
                        properties={"weight": weight},
                    )
                )
            else:
                result[position].properties["weight"] += weight
    return result


def lift(
    r1: Optional[Relation],
    r2: Optional[Relation],
    new_label: Optional[str] = None,
    join: Optional[str] = None,
) -> Relation:
    """Lift ``r2`` to the owners in ``r1``: ``(r1 . r2) . inverse(r1)``."""
    return compose(compose(r1, r2, join=join), invert(r1), new_label, join=join)
