"""
Hierarchy reduction tests
=========================

Containment is split into package containment (``contains``) and class
nesting (``nests``); every structure ends up under exactly one of them.
"""

from src.hierarchy import hierarchy_violations, reduce_hierarchy
from src.models import Edge, GraphData, Node
from src.relations import index_relations


def node(node_id, *labels):
    return Node(id=node_id, labels=list(labels))


def edge(source, target, label):
    return Edge(source=source, target=target, label=label)


def pairs(relation):
    return [(e.source, e.target) for e in relation]


NODES = [
    node("A", "Container"),
    node("B", "Structure"),
    node("C", "Structure"),
    node("M", "Operation"),
]
EDGES = [
    edge("B", "M", "hasScript"),
    edge("A", "B", "contains"),
    edge("B", "C", "contains"),
]


class TestReduceHierarchy:

    def test_package_and_nested_class(self):
        split = reduce_hierarchy(NODES, index_relations(EDGES))
        assert split.nested_classes == {"C"}
        assert split.top_level_classes == ["B"]
        assert pairs(split.contains) == [("A", "B")]
        assert pairs(split.nests) == [("B", "C")]
        assert split.nests[0].label == "nests"

    def test_explicit_nests_relation_wins(self):
        edges = EDGES + [edge("X", "Y", "nests")]
        split = reduce_hierarchy(NODES, index_relations(edges))
        assert pairs(split.nests) == [("X", "Y")]
        assert pairs(split.contains) == [("A", "B")]

    def test_deeper_nesting_stays_in_contains(self):
        nodes = NODES + [node("D", "Structure")]
        edges = EDGES + [edge("C", "D", "contains")]
        split = reduce_hierarchy(nodes, index_relations(edges))
        assert split.top_level_classes == ["B"]
        assert split.nested_classes == {"C", "D"}
        assert pairs(split.contains) == [("A", "B"), ("C", "D")]
        assert pairs(split.nests) == [("B", "C")]

    def test_no_containment(self):
        split = reduce_hierarchy(NODES, index_relations([]))
        assert split.contains == []
        assert split.nests == []
        assert split.top_level_classes == ["B", "C"]

    def test_source_edges_not_mutated(self):
        edges = [edge("A", "B", "contains"), edge("B", "C", "contains")]
        reduce_hierarchy(NODES, index_relations(edges))
        assert [e.label for e in edges] == ["contains", "contains"]


class TestHierarchyViolations:

    def test_reduced_graph_has_none(self):
        split = reduce_hierarchy(NODES, index_relations(EDGES))
        graph = GraphData(nodes=NODES, edges=split.contains + split.nests)
        assert hierarchy_violations(graph) == []

    def test_reports_structure_under_both_parents(self):
        graph = GraphData(
            nodes=NODES,
            edges=[edge("A", "C", "contains"), edge("B", "C", "nests")],
        )
        assert hierarchy_violations(graph) == ["C"]
