#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Influence diagram: structural model and validation.

Nodes are numbered so that the diagram is layered:
  - Chance nodes C and decision nodes D together occupy {1,...,n}
  - Value nodes V occupy {n+1,...,n+|V|}
  - Every arc (i, j) satisfies i < j, which makes the graph acyclic

The information set I(j) of a node is the sorted list of its parents.
"""
from __future__ import annotations

import numbers
from typing import Dict, Iterable, List, Sequence, Tuple

import networkx as nx

from .exceptions import StructuralValidationError

Node = int
Arc = Tuple[int, int]


class InfluenceDiagram:
    """
    Validated, immutable influence diagram.

    Args:
        C: Chance nodes
        D: Decision nodes
        V: Value nodes
        A: Arcs (i, j) between nodes
        S_j: Number of states of each chance and decision node, in node order

    Raises:
        StructuralValidationError: If any structural invariant is violated.
    """

    def __init__(
        self,
        C: Iterable[Node],
        D: Iterable[Node],
        V: Iterable[Node],
        A: Iterable[Arc],
        S_j: Sequence[int],
    ):
        # Enforce sorted and unique elements
        C = tuple(sorted(set(C)))
        D = tuple(sorted(set(D)))
        V = tuple(sorted(set(V)))
        A = tuple(sorted(set((int(i), int(j)) for i, j in A)))

        # Sizes
        n = len(C) + len(D)
        N = n + len(V)

        # --- Nodes ---
        overlap = set(C) & set(D)
        if overlap:
            raise StructuralValidationError(
                f"Chance and decision nodes should be disjoint, both contain {sorted(overlap)}."
            )
        if set(C) | set(D) != set(range(1, n + 1)):
            raise StructuralValidationError(
                f"Union of chance and decision nodes should be {{1,...,{n}}}, got {sorted(set(C) | set(D))}."
            )
        if set(V) != set(range(n + 1, N + 1)):
            raise StructuralValidationError(
                f"Value nodes should be {{{n + 1},...,{N}}}, got {list(V)}."
            )

        # --- Arcs ---
        for i, j in A:
            if not 1 <= i < j <= N:
                raise StructuralValidationError(
                    f"Arc ({i}, {j}) violates 1 <= i < j <= {N}."
                )
            if i > n:
                raise StructuralValidationError(
                    f"Arc ({i}, {j}) starts from value node {i}; value nodes have no outgoing arcs."
                )

        # --- States ---
        S_j = tuple(S_j)
        if len(S_j) != n:
            raise StructuralValidationError(
                f"Each chance and decision node should have states: expected {n} state counts, got {len(S_j)}."
            )
        for j, s in enumerate(S_j, start=1):
            if isinstance(s, bool) or not isinstance(s, numbers.Integral):
                raise StructuralValidationError(f"Node {j} should have an integer number of states, got {s!r}.")
            if int(s) < 1:
                raise StructuralValidationError(f"Node {j} should have at least one state, got {s}.")
        S_j = tuple(int(s) for s in S_j)

        G = nx.DiGraph()
        G.add_nodes_from(C, kind="chance")
        G.add_nodes_from(D, kind="decision")
        G.add_nodes_from(V, kind="value")
        G.add_edges_from(A)

        self._C = C
        self._D = D
        self._V = V
        self._A = A
        self._S_j = S_j
        self._n = n
        self._N = N
        self._I_j: Dict[Node, Tuple[Node, ...]] = {
            j: tuple(sorted(G.predecessors(j))) for j in range(1, N + 1)
        }
        self._graph = nx.freeze(G)

    # --- Read-only accessors ---

    @property
    def C(self) -> Tuple[Node, ...]:
        return self._C

    @property
    def D(self) -> Tuple[Node, ...]:
        return self._D

    @property
    def V(self) -> Tuple[Node, ...]:
        return self._V

    @property
    def A(self) -> Tuple[Arc, ...]:
        return self._A

    @property
    def S_j(self) -> Tuple[int, ...]:
        return self._S_j

    @property
    def I_j(self) -> Dict[Node, Tuple[Node, ...]]:
        return dict(self._I_j)

    @property
    def n(self) -> int:
        """Number of chance and decision nodes."""
        return self._n

    @property
    def N(self) -> int:
        """Total number of nodes."""
        return self._N

    @property
    def graph(self) -> nx.DiGraph:
        """Frozen networkx view of the diagram; node attribute 'kind'."""
        return self._graph

    def information_set(self, j: Node) -> Tuple[Node, ...]:
        return self._I_j[j]

    def states(self, nodes: Iterable[Node]) -> Tuple[int, ...]:
        """Number of states of each of the given chance/decision nodes."""
        return tuple(self._S_j[j - 1] for j in nodes)

    def is_chance(self, j: Node) -> bool:
        return j in self._C

    def is_decision(self, j: Node) -> bool:
        return j in self._D

    def is_value(self, j: Node) -> bool:
        return j > self._n

    def __eq__(self, other):
        if not isinstance(other, InfluenceDiagram):
            return NotImplemented
        return (self.C, self.D, self.V, self.A, self.S_j) == (other.C, other.D, other.V, other.A, other.S_j)

    def __repr__(self):
        return (
            f"InfluenceDiagram(C={list(self.C)}, D={list(self.D)}, V={list(self.V)}, "
            f"A={list(self.A)}, S_j={list(self.S_j)})"
        )


def validate_influence_diagram(diagram: InfluenceDiagram) -> InfluenceDiagram:
    """Re-run structural validation on an existing diagram."""
    return InfluenceDiagram(diagram.C, diagram.D, diagram.V, diagram.A, diagram.S_j)


def arcs_from_information_sets(information_sets: Dict[Node, Iterable[Node]]) -> List[Arc]:
    """Build the arc list {(i, j) : i in I(j)} from a node -> parents mapping."""
    return sorted((i, j) for j, parents in information_sets.items() for i in parents)


__all__ = [
    "Node",
    "Arc",
    "InfluenceDiagram",
    "validate_influence_diagram",
    "arcs_from_information_sets",
]
