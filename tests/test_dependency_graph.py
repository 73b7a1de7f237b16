"""Tests for the dependency graph: classification, edges and ordering."""

import os
import sys

import networkx as nx
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from postfix_sheet.addressing import decode
from postfix_sheet.dependency_graph import DependencyGraph, contains_letter


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _graph(formulas):
    """Build a graph from ``{address: formula}``."""
    graph = DependencyGraph()
    for address, formula in formulas.items():
        graph.add_formula(decode(address), formula)
    return graph


def _expected_cyclic(formulas):
    """Cells on a cycle or downstream of one, computed with networkx."""
    G = nx.DiGraph()
    for address, formula in formulas.items():
        G.add_node(address)
        for token in formula.split():
            if token[0].isalpha():
                G.add_edge(token, address)
    on_cycle = set()
    for component in nx.strongly_connected_components(G):
        if len(component) > 1:
            on_cycle |= component
        else:
            (node,) = component
            if G.has_edge(node, node):
                on_cycle.add(node)
    behind = set()
    for node in on_cycle:
        behind |= nx.descendants(G, node)
    return on_cycle | behind


def _cyclic(graph):
    return set(graph.to_addresses(graph.topological_order().cyclic))


def _order(graph):
    return graph.to_addresses(graph.topological_order().order)


# ---------------------------------------------------------------------------
# Classification and edges
# ---------------------------------------------------------------------------

class TestClassification:
    def test_letters_make_formulas(self):
        assert contains_letter("A0 1 +")
        assert contains_letter("x")
        assert contains_letter("1 2 b +")

    def test_no_letters(self):
        assert not contains_letter("3 4 +")
        assert not contains_letter("")
        assert not contains_letter("-5")


class TestEdges:
    def test_downstream_recorded_on_referenced_cell(self):
        graph = _graph({"B0": "A0 3 *", "C0": "A0 B0 +"})
        assert graph.downstream(decode("A0")) == {"B0", "C0"}
        assert graph.downstream(decode("B0")) == {"C0"}
        assert graph.downstream(decode("C0")) == set()

    def test_placeholder_before_own_formula(self):
        graph = _graph({"B0": "A0 3 *"})
        assert decode("A0") in graph
        record = graph.record_for(decode("A0"))
        assert record.formula == ""
        assert not record.defined

        graph.add_formula(decode("A0"), "C0 1 +")
        record = graph.record_for(decode("A0"))
        assert record.defined
        assert graph.formula(decode("A0")) == "C0 1 +"
        assert graph.downstream(decode("A0")) == {"B0"}

    def test_non_address_tokens_are_not_edges(self):
        graph = _graph({"B0": "A0B 1 +"})
        assert len(graph) == 1
        assert decode("A0") not in graph

    def test_resubmitted_formula_replaces_edges(self):
        graph = _graph({"B0": "A0 1 +"})
        graph.add_formula(decode("B0"), "C0 1 +")
        assert graph.downstream(decode("A0")) == set()
        assert graph.downstream(decode("C0")) == {"B0"}

    def test_discard_formula(self):
        graph = _graph({"B0": "A0 1 +", "C0": "B0 1 +"})
        graph.discard_formula(decode("B0"))
        assert graph.downstream(decode("A0")) == set()
        assert graph.downstream(decode("B0")) == {"C0"}
        assert not graph.record_for(decode("B0")).defined

    def test_describe(self):
        graph = _graph({"B0": "A0 1 +"})
        lines = graph.describe()
        assert "B0 formula: 'A0 1 +' -> []" in lines
        assert "A0 formula: '' -> [B0]" in lines

    def test_clear(self):
        graph = _graph({"B0": "A0 1 +"})
        graph.clear()
        assert len(graph) == 0
        assert len(graph.addresses) == 0
        assert graph.topological_order().order == []


# ---------------------------------------------------------------------------
# Ordering and cycles
# ---------------------------------------------------------------------------

class TestOrdering:
    def test_dependencies_come_first(self):
        formulas = {"D0": "C0 B0 +", "C0": "B0 1 +", "B0": "A0 2 *"}
        order = _order(_graph(formulas))
        assert order.index("A0") < order.index("B0") < order.index("C0") < order.index("D0")

    def test_every_edge_respected(self):
        formulas = {
            "A1": "A0 B0 +", "B1": "A1 C0 *", "C1": "A1 B1 -",
            "D1": "C1 A0 /", "E1": "D1", "F1": "B0",
        }
        graph = _graph(formulas)
        order = _order(graph)
        assert set(order) == {"A0", "B0", "C0", "A1", "B1", "C1", "D1", "E1", "F1"}
        for address in order:
            for dependent in graph.downstream(decode(address)):
                assert order.index(address) < order.index(dependent)

    def test_two_cell_cycle(self):
        graph = _graph({"A0": "B0 1 +", "B0": "A0 1 +"})
        plan = graph.topological_order()
        assert set(graph.to_addresses(plan.cyclic)) == {"A0", "B0"}
        assert plan.order == []

    def test_self_reference(self):
        assert _cyclic(_graph({"A0": "A0 1 +"})) == {"A0"}

    def test_cycle_feeders_are_not_marked(self):
        formulas = {"B0": "A0 C0 +", "C0": "B0 1 +", "E0": "A0 2 *", "F0": "E0 B0 +"}
        graph = _graph(formulas)
        assert _cyclic(graph) == {"B0", "C0", "F0"}
        assert "E0" in _order(graph)
        assert "A0" in _order(graph)

    def test_independent_cycles(self):
        formulas = {
            "A0": "B0", "B0": "A0",
            "A1": "B1", "B1": "C1", "C1": "A1",
            "A2": "5 A3 +",
        }
        graph = _graph(formulas)
        assert _cyclic(graph) == {"A0", "B0", "A1", "B1", "C1"}
        assert _order(graph) == ["A3", "A2"]

    @pytest.mark.parametrize("formulas", [
        {"A0": "B0", "B0": "C0", "C0": "A0", "D0": "A0"},
        {"A0": "B0 C0 +", "B0": "C0", "C0": "D0", "D0": "B0", "E0": "A0 D0 *"},
        {"A0": "B0", "B0": "C0", "C0": "A0", "A1": "A0 B1 +", "B1": "C1", "C1": "D1"},
        {"A0": "B0 D0 +", "B0": "C0", "C0": "A0", "D0": "B0"},
        {"A0": "1", "B0": "A0 B0 +", "C0": "A0", "D0": "C0 B0 *"},
    ])
    def test_cyclic_set_matches_networkx(self, formulas):
        assert _cyclic(_graph(formulas)) == _expected_cyclic(formulas)

    def test_cyclic_set_independent_of_submission_order(self):
        formulas = {"A0": "B0 D0 +", "B0": "C0", "C0": "A0", "D0": "B0", "E0": "F0", "F0": "1 2 +"}
        forward = _graph(formulas)
        backward = _graph(dict(reversed(list(formulas.items()))))
        assert _cyclic(forward) == _cyclic(backward) == {"A0", "B0", "C0", "D0"}

    def test_long_chain_does_not_recurse(self):
        n = sys.getrecursionlimit() * 3
        graph = DependencyGraph()
        for row in range(1, n):
            graph.add_formula((0, row), f"A{row - 1} 1 +")
        order = _order(graph)
        assert len(order) == n
        assert order[0] == "A0"
        assert order[-1] == f"A{n - 1}"
