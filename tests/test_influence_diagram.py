import networkx as nx
import numpy as np
import pytest

from decision_programming.exceptions import StructuralValidationError
from decision_programming.influence_diagram import (
    InfluenceDiagram,
    arcs_from_information_sets,
    validate_influence_diagram,
)


def test_inputs_are_normalized():
    diagram = InfluenceDiagram(C=[3, 1, 1], D=[2], V=[5, 4], A=[(2, 3), (1, 2), (1, 2), (3, 4), (2, 5)], S_j=[2, 3, 2])
    assert diagram.C == (1, 3)
    assert diagram.D == (2,)
    assert diagram.V == (4, 5)
    assert diagram.A == ((1, 2), (2, 3), (2, 5), (3, 4))
    assert diagram.n == 3
    assert diagram.N == 5


def test_information_sets(two_stage_diagram):
    I_j = two_stage_diagram.I_j
    assert I_j[1] == ()
    assert I_j[2] == (1,)
    assert I_j[4] == (2, 3)
    assert I_j[5] == (3, 4)
    assert I_j[6] == (1, 4)
    assert two_stage_diagram.states(I_j[4]) == (3, 2)


def test_graph_is_frozen_dag(two_stage_diagram):
    G = two_stage_diagram.graph
    assert nx.is_frozen(G)
    assert nx.is_directed_acyclic_graph(G)
    assert G.nodes[2]["kind"] == "decision"
    assert G.nodes[5]["kind"] == "value"


def test_node_kinds(two_stage_diagram):
    kinds = {
        j: (two_stage_diagram.is_chance(j), two_stage_diagram.is_decision(j), two_stage_diagram.is_value(j))
        for j in range(1, two_stage_diagram.N + 1)
    }
    assert [j for j, k in kinds.items() if k == (True, False, False)] == [1, 3]
    assert [j for j, k in kinds.items() if k == (False, True, False)] == [2, 4]
    assert [j for j, k in kinds.items() if k == (False, False, True)] == [5, 6]
    for j, (chance, decision, _) in kinds.items():
        assert two_stage_diagram.graph.nodes[j]["kind"] == ("chance" if chance else "decision" if decision else "value")


def test_accessors_are_read_only(simple_diagram):
    with pytest.raises(AttributeError):
        simple_diagram.C = (1, 2)
    simple_diagram.I_j[2] = (99,)
    assert simple_diagram.information_set(2) == (1,)


@pytest.mark.parametrize(
    "C, D, V",
    [
        ([1, 3], [], [3]),      # gap in {1,...,n}
        ([1, 2], [2], [4]),     # duplicate across C and D
        ([1], [2], [4]),        # value nodes do not follow n
        ([1], [2], [3, 5]),     # gap in value nodes
    ],
)
def test_invalid_node_partition_is_rejected(C, D, V):
    n = len(set(C)) + len(set(D))
    with pytest.raises(StructuralValidationError):
        InfluenceDiagram(C=C, D=D, V=V, A=[], S_j=[2] * n)


def test_reversed_arc_is_rejected_not_reordered():
    with pytest.raises(StructuralValidationError, match=r"\(2, 1\)"):
        InfluenceDiagram(C=[1], D=[2], V=[3], A=[(2, 1)], S_j=[2, 2])


def test_arc_outside_node_range_is_rejected():
    with pytest.raises(StructuralValidationError):
        InfluenceDiagram(C=[1], D=[2], V=[3], A=[(1, 4)], S_j=[2, 2])
    with pytest.raises(StructuralValidationError):
        InfluenceDiagram(C=[1], D=[2], V=[3], A=[(0, 1)], S_j=[2, 2])


def test_arc_from_value_node_is_rejected():
    with pytest.raises(StructuralValidationError, match="value node"):
        InfluenceDiagram(C=[1], D=[], V=[2, 3], A=[(1, 2), (2, 3)], S_j=[2])


@pytest.mark.parametrize("S_j", [[2], [2, 2, 2], [2, 0], [2, 2.0], [2, True]])
def test_invalid_states_are_rejected(S_j):
    with pytest.raises(StructuralValidationError):
        InfluenceDiagram(C=[1], D=[2], V=[3], A=[(1, 2)], S_j=S_j)


def test_numpy_state_counts_are_accepted():
    diagram = InfluenceDiagram(C=[1], D=[2], V=[3], A=[(1, 2)], S_j=np.array([2, 3]))
    assert diagram.S_j == (2, 3)


def test_diagram_without_value_nodes():
    diagram = InfluenceDiagram(C=[1, 2], D=[], V=[], A=[(1, 2)], S_j=[2, 2])
    assert diagram.N == 2
    assert diagram.V == ()


def test_revalidation_is_idempotent(two_stage_diagram):
    again = validate_influence_diagram(two_stage_diagram)
    assert again == two_stage_diagram
    assert validate_influence_diagram(again) == two_stage_diagram


def test_arcs_from_information_sets():
    assert arcs_from_information_sets({2: [1], 3: [2, 1]}) == [(1, 2), (1, 3), (2, 3)]
