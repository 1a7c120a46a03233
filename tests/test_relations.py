"""
Relation algebra tests
======================

Covers relation indexing, inversion, weighted composition and lifting.
"""

import pytest

from src.models import Edge
from src.relations import compose, index_relations, invert, lift


def edge(source, target, label, weight=None):
    properties = {"weight": weight} if weight is not None else None
    return Edge(source=source, target=target, label=label, properties=properties)


def pairs(relation):
    return [(e.source, e.target) for e in relation]


class TestRelationStore:

    def test_groups_edges_by_label_in_order(self):
        store = index_relations([
            edge("a", "b", "invokes"),
            edge("a", "c", "contains"),
            edge("b", "c", "invokes"),
        ])
        assert store.labels() == ["invokes", "contains"]
        assert pairs(store.get("invokes")) == [("a", "b"), ("b", "c")]

    def test_labels_list_is_joined_when_label_missing(self):
        store = index_relations([Edge(source="a", target="b", labels=["calls", "uses"])])
        assert "calls,uses" in store

    def test_missing_relation_is_empty(self):
        store = index_relations([])
        assert store.get("returnType") == []
        assert not store.has("returnType")

    def test_unlabeled_edges_are_not_indexed(self):
        store = index_relations([Edge(source="a", target="b")])
        assert len(store) == 0


class TestInvert:

    def test_swaps_endpoints_and_prefixes_label(self):
        inverted = invert([edge("a", "b", "hasScript", weight=3)])
        assert pairs(inverted) == [("b", "a")]
        assert inverted[0].label == "inv_hasScript"
        assert inverted[0].weight == 3

    def test_does_not_mutate_input(self):
        original = [edge("a", "b", "hasScript", weight=3)]
        inverted = invert(original)
        inverted[0].properties["weight"] = 99
        assert original[0].source == "a"
        assert original[0].label == "hasScript"
        assert original[0].properties == {"weight": 3}

    def test_double_inversion_restores_endpoints_not_label(self):
        relation = [edge("a", "b", "X"), edge("c", "d", "X")]
        twice = invert(invert(relation))
        assert pairs(twice) == pairs(relation)
        assert {e.label for e in twice} == {"inv_inv_X"}

    def test_missing_relation(self):
        assert invert(None) == []


class TestCompose:

    def test_empty_operands(self):
        relation = [edge("a", "b", "r")]
        assert compose(relation, []) == []
        assert compose([], relation) == []
        assert compose(None, relation) == []
        assert compose(relation, None) == []

    def test_holds_example(self):
        l1 = [edge("x", "y", "hasVariable")]
        l2 = [edge("y", "int", "type")]
        holds = compose(l1, l2, "holds")
        assert [e.to_data() for e in holds] == [
            {"source": "x", "target": "int", "label": "holds", "properties": {"weight": 1}}
        ]

    def test_weights_multiply(self):
        result = compose([edge("a", "m", "r1", weight=2)], [edge("m", "z", "r2", weight=3)])
        assert len(result) == 1
        assert result[0].weight == 6

    def test_duplicate_pairs_sum_weights(self):
        l1 = [edge("a", "m1", "r1", weight=2), edge("a", "m2", "r1", weight=3)]
        l2 = [edge("m1", "z", "r2", weight=5), edge("m2", "z", "r2", weight=7)]
        result = compose(l1, l2)
        assert pairs(result) == [("a", "z")]
        assert result[0].weight == 2 * 5 + 3 * 7

    def test_default_label_joins_both_labels(self):
        result = compose([edge("a", "m", "hasParameter")], [edge("m", "t", "type")])
        assert result[0].label == "hasParameter-type"

    def test_zero_weight_counts_as_one(self):
        result = compose([edge("a", "m", "r1", weight=0)], [edge("m", "z", "r2", weight=4)])
        assert result[0].weight == 4

    def test_output_follows_first_occurrence(self):
        l1 = [edge("b", "m", "r"), edge("a", "m", "r"), edge("b", "m", "r")]
        l2 = [edge("m", "z", "s")]
        result = compose(l1, l2)
        assert pairs(result) == [("b", "z"), ("a", "z")]
        assert result[0].weight == 2

    def test_single_join_uses_last_edge_per_source(self):
        l1 = [edge("x", "y", "r")]
        l2 = [edge("y", "a", "s"), edge("y", "b", "s")]
        assert pairs(compose(l1, l2, join="single")) == [("x", "b")]

    def test_full_join_follows_every_edge(self):
        l1 = [edge("x", "y", "r")]
        l2 = [edge("y", "a", "s"), edge("y", "b", "s")]
        assert pairs(compose(l1, l2, join="all")) == [("x", "a"), ("x", "b")]

    def test_unknown_join_mode(self):
        with pytest.raises(ValueError):
            compose([edge("x", "y", "r")], [edge("y", "z", "s")], join="outer")

    def test_inputs_untouched(self):
        l1 = [edge("a", "m", "r1", weight=2)]
        l2 = [edge("m", "z", "r2", weight=3)]
        result = compose(l1 + l1, l2)
        assert result[0].weight == 12
        assert l1[0].properties == {"weight": 2}
        assert l2[0].properties == {"weight": 3}


class TestLift:

    def test_calls_between_owners(self):
        has_script = [edge("A", "A.f", "hasScript"), edge("B", "B.g", "hasScript")]
        invokes = [edge("A.f", "B.g", "invokes", weight=2)]
        calls = lift(has_script, invokes, "calls")
        assert [(e.source, e.target, e.label, e.weight) for e in calls] == [("A", "B", "calls", 2)]

    def test_missing_invokes(self):
        assert lift([edge("A", "A.f", "hasScript")], None, "calls") == []

    def test_self_calls_are_kept(self):
        has_script = [edge("A", "A.f", "hasScript"), edge("A", "A.g", "hasScript")]
        invokes = [edge("A.f", "A.g", "invokes")]
        assert pairs(lift(has_script, invokes, "calls")) == [("A", "A")]
