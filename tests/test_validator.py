"""
Tests for the Graph Validator.

Tests verify that the validator correctly:
    - Accepts well-formed trees and DAGs
    - Detects missing roots and dangling references
    - Finds unreachable nodes and cycles
    - Checks node shape
    - Reports every defect in a single call
"""

import pytest
from decision_graph.model import Graph, Node, NodeKind, Option
from decision_graph.validator import (
    InvalidGraph,
    ValidationErrorKind,
    ensure_valid,
    validate,
)
from decision_graph.examples import build_cupcake_graph


def test_cupcake_graph_is_valid():
    result = validate(build_cupcake_graph())
    assert result.is_valid
    assert result.errors == ()


def test_single_leaf_graph_is_valid():
    """A root that is itself a leaf is a complete graph."""
    graph = Graph.from_nodes("only", [Node.leaf("only", "Any cupcake")])
    assert validate(graph).is_valid


def test_convergence_is_allowed():
    """Two paths reaching the same node form a DAG, which is fine."""
    graph = Graph.from_nodes("root", [
        Node.question("root", "?", [Option("a", "Q1"), Option("b", "Q2")]),
        Node.question("Q1", "?", [Option("x", "END")]),
        Node.question("Q2", "?", [Option("y", "END"), Option("z", "Q1")]),
        Node.leaf("END", "Done"),
    ])
    assert validate(graph).is_valid


def test_missing_root():
    graph = Graph.from_nodes("ghost", [Node.leaf("A", "x")])
    result = validate(graph)

    assert not result.is_valid
    missing = result.errors_of(ValidationErrorKind.MISSING_ROOT)
    assert len(missing) == 1
    assert missing[0].node_id == "ghost"
    # Reachability is not computed without a root
    assert ValidationErrorKind.UNREACHABLE_NODE not in result.kinds()


def test_dangling_reference_reports_edge():
    graph = Graph.from_nodes("root", [
        Node.question("root", "?", [Option("Yes", "A"), Option("No", "MISSING")]),
        Node.leaf("A", "x"),
    ])
    result = validate(graph)

    assert not result.is_valid
    dangling = result.errors_of(ValidationErrorKind.DANGLING_REFERENCE)
    assert len(dangling) == 1
    assert dangling[0].node_id == "root"
    assert dangling[0].target_id == "MISSING"
    assert "MISSING" in str(dangling[0])


def test_dangling_reference_from_unreachable_node_still_reported():
    graph = Graph.from_nodes("root", [
        Node.question("root", "?", [Option("Yes", "A")]),
        Node.leaf("A", "x"),
        Node.question("ORPHAN", "?", [Option("go", "NOWHERE")]),
    ])
    result = validate(graph)

    assert {e.target_id for e in result.errors_of(ValidationErrorKind.DANGLING_REFERENCE)} == {"NOWHERE"}
    assert [e.node_id for e in result.errors_of(ValidationErrorKind.UNREACHABLE_NODE)] == ["ORPHAN"]


def test_unreachable_node():
    graph = Graph.from_nodes("root", [
        Node.question("root", "?", [Option("Yes", "A")]),
        Node.leaf("A", "x"),
        Node.leaf("ORPHAN", "Never shown"),
    ])
    result = validate(graph)

    unreachable = result.errors_of(ValidationErrorKind.UNREACHABLE_NODE)
    assert [e.node_id for e in unreachable] == ["ORPHAN"]


def test_leaf_with_options():
    graph = Graph.from_nodes("root", [
        Node.question("root", "?", [Option("Yes", "A")]),
        Node(id="A", kind=NodeKind.LEAF, text="x", options=(Option("more", "B"),)),
        Node.leaf("B", "y"),
    ])
    result = validate(graph)

    assert [e.node_id for e in result.errors_of(ValidationErrorKind.LEAF_WITH_OPTIONS)] == ["A"]


def test_question_without_options():
    graph = Graph.from_nodes("root", [Node.question("root", "Well?", [])])
    result = validate(graph)

    assert [e.node_id for e in result.errors_of(ValidationErrorKind.QUESTION_WITHOUT_OPTIONS)] == ["root"]


class TestCycles:
    """Cycle detection among question nodes."""

    def test_two_node_cycle(self):
        graph = Graph.from_nodes("root", [
            Node.question("root", "?", [Option("go", "Q1")]),
            Node.question("Q1", "?", [Option("back", "root"), Option("end", "END")]),
            Node.leaf("END", "Done"),
        ])
        result = validate(graph)

        cycles = result.errors_of(ValidationErrorKind.CYCLE_DETECTED)
        assert len(cycles) == 1
        assert cycles[0].node_id == "Q1"
        assert cycles[0].target_id == "root"
        assert "root -> Q1 -> root" in cycles[0].message

    def test_self_loop(self):
        graph = Graph.from_nodes("root", [
            Node.question("root", "?", [Option("again", "root"), Option("end", "END")]),
            Node.leaf("END", "Done"),
        ])
        cycles = validate(graph).errors_of(ValidationErrorKind.CYCLE_DETECTED)
        assert [(e.node_id, e.target_id) for e in cycles] == [("root", "root")]

    def test_cycle_in_unreachable_region(self):
        graph = Graph.from_nodes("root", [
            Node.question("root", "?", [Option("end", "END")]),
            Node.leaf("END", "Done"),
            Node.question("X", "?", [Option("y", "Y")]),
            Node.question("Y", "?", [Option("x", "X")]),
        ])
        result = validate(graph)

        assert ValidationErrorKind.CYCLE_DETECTED in result.kinds()
        assert {e.node_id for e in result.errors_of(ValidationErrorKind.UNREACHABLE_NODE)} == {"X", "Y"}

    def test_diamond_is_not_a_cycle(self):
        graph = Graph.from_nodes("root", [
            Node.question("root", "?", [Option("l", "L"), Option("r", "R")]),
            Node.question("L", "?", [Option("m", "M")]),
            Node.question("R", "?", [Option("m", "M")]),
            Node.question("M", "?", [Option("end", "END")]),
            Node.leaf("END", "Done"),
        ])
        assert ValidationErrorKind.CYCLE_DETECTED not in validate(graph).kinds()


def test_every_defect_reported_in_one_call():
    graph = Graph.from_nodes("root", [
        Node.question("root", "?", [Option("a", "A"), Option("bad", "NOWHERE"), Option("q", "Q")]),
        Node(id="A", kind=NodeKind.LEAF, text="x", options=(Option("more", "root"),)),
        Node.question("Q", "?", [Option("loop", "Q")]),
        Node.question("EMPTY", "?", []),
    ])
    kinds = validate(graph).kinds()

    assert kinds == {
        ValidationErrorKind.DANGLING_REFERENCE,
        ValidationErrorKind.LEAF_WITH_OPTIONS,
        ValidationErrorKind.QUESTION_WITHOUT_OPTIONS,
        ValidationErrorKind.UNREACHABLE_NODE,
        ValidationErrorKind.CYCLE_DETECTED,
    }


class TestEnsureValid:

    def test_returns_graph_when_valid(self):
        graph = build_cupcake_graph()
        assert ensure_valid(graph) is graph

    def test_raises_with_full_result(self):
        graph = Graph.from_nodes("ghost", [Node.question("Q", "?", [Option("x", "NOWHERE")])])
        with pytest.raises(InvalidGraph) as excinfo:
            ensure_valid(graph)

        result = excinfo.value.result
        assert ValidationErrorKind.MISSING_ROOT in result.kinds()
        assert ValidationErrorKind.DANGLING_REFERENCE in result.kinds()
        assert "2 error(s)" in str(excinfo.value)


def _question_chain(length):
    nodes = [
        Node.question(f"q{i}", f"Step {i}?", [Option("next", f"q{i + 1}" if i + 1 < length else "END")])
        for i in range(length)
    ]
    nodes.append(Node.leaf("END", "Done"))
    return nodes


class TestDeepGraphs:
    """Long question chains must not exhaust the call stack."""

    def test_long_chain_is_valid(self):
        graph = Graph.from_nodes("q0", _question_chain(3000))
        assert validate(graph).is_valid

    def test_cycle_at_end_of_long_chain(self):
        nodes = _question_chain(3000)
        nodes[-2] = Node.question("q2999", "Again?", [Option("again", "q0"), Option("stop", "END")])
        cycles = validate(Graph.from_nodes("q0", nodes)).errors_of(ValidationErrorKind.CYCLE_DETECTED)
        assert [(e.node_id, e.target_id) for e in cycles] == [("q2999", "q0")]


def test_parallel_options_to_cycle_reported_once():
    graph = Graph.from_nodes("root", [
        Node.question("root", "?", [Option("go", "Q1")]),
        Node.question("Q1", "?", [Option("back", "root"), Option("back again", "root"), Option("end", "END")]),
        Node.leaf("END", "Done"),
    ])
    result = validate(graph)

    cycles = result.errors_of(ValidationErrorKind.CYCLE_DETECTED)
    assert len(cycles) == 1
    assert len(set(result.errors)) == len(result.errors)
