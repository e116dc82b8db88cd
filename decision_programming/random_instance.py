#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Random influence diagrams and parameters.

Every generator takes a numpy ``Generator`` so instances are reproducible
from a seed, e.g. ``rng = np.random.default_rng(3)``.
"""
from __future__ import annotations

import math
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .exceptions import DomainError
from .influence_diagram import Arc, InfluenceDiagram, Node, arcs_from_information_sets
from .model_parameters import ModelParameters, create_model_parameters
from .paths import paths, to_index


def _information_set(rng: np.random.Generator, j: Node, n_I: int) -> List[Node]:
    """Random parents of chance or decision node j, at most n_I earlier nodes."""
    m = min(int(rng.integers(0, n_I + 1)), j - 1)
    return sorted(int(i) for i in rng.permutation(np.arange(1, j))[:m])


def _value_information_set(rng: np.random.Generator, leaf_nodes: List[Node], n: int) -> List[Node]:
    """Random parents of a value node: its leaf nodes plus some non-leaf nodes."""
    non_leaf_nodes = rng.permutation(sorted(set(range(1, n + 1)) - set(leaf_nodes)))
    if len(non_leaf_nodes) == 0:
        return sorted(leaf_nodes)
    m = int(rng.integers(1, len(non_leaf_nodes) + 1))
    return sorted(set(leaf_nodes) | set(int(i) for i in non_leaf_nodes[:m]))


def random_diagram(
    rng: np.random.Generator,
    n_C: int,
    n_D: int,
    n_V: int,
    n_I: int,
) -> Tuple[List[Node], List[Node], List[Node], List[Arc]]:
    """
    Generate a random diagram structure.

    Args:
        rng: Random number generator
        n_C: Number of chance nodes
        n_D: Number of decision nodes
        n_V: Number of value nodes
        n_I: Upper bound on the information set size of chance/decision nodes

    Returns:
        (C, D, V, A) node lists and arcs

    Raises:
        DomainError: On invalid node counts.
    """
    n = n_C + n_D
    if n_C < 0:
        raise DomainError("There should be >= 0 chance nodes.")
    if n_D < 0:
        raise DomainError("There should be >= 0 decision nodes.")
    if n < 1:
        raise DomainError("There should be at least one chance or decision node.")
    if n_V < 1:
        raise DomainError("There should be >= 1 value nodes.")
    if n_I < 1:
        raise DomainError("Information set should be size >= 1.")

    # Create node indices
    U = [int(u) for u in rng.permutation(np.arange(1, n + 1))]
    C = sorted(U[:n_C])
    D = sorted(U[n_C:])
    V = list(range(n + 1, n + n_V + 1))

    information_sets: Dict[Node, List[Node]] = {j: _information_set(rng, j, n_I) for j in range(1, n + 1)}

    # Assign each leaf node to a random value node
    parents = set(i for I_j in information_sets.values() for i in I_j)
    leaf_nodes = [j for j in range(1, n + 1) if j not in parents]
    leaf_nodes_v: Dict[Node, List[Node]] = {v: [] for v in V}
    for i in leaf_nodes:
        leaf_nodes_v[V[int(rng.integers(0, n_V))]].append(i)

    for v in V:
        information_sets[v] = _value_information_set(rng, leaf_nodes_v[v], n)

    return C, D, V, arcs_from_information_sets(information_sets)


def random_states(rng: np.random.Generator, choices: Sequence[int], n: int) -> List[int]:
    """Draw the number of states of ``n`` nodes from ``choices``."""
    if not choices or any(int(c) < 1 for c in choices):
        raise DomainError("State choices should be positive integers.")
    return [int(s) for s in rng.choice(list(choices), size=n)]


def random_probabilities(
    rng: np.random.Generator,
    diagram: InfluenceDiagram,
    j: Node,
    n_inactive: int = 0,
) -> np.ndarray:
    """
    Generate random conditional probabilities for chance node j.

    ``n_inactive`` entries are set to zero, at most S_j - 1 per information
    state, so each information state keeps at least one possible outcome.
    """
    states = diagram.states(diagram.information_set(j))
    state = diagram.S_j[j - 1]
    if not 0 <= n_inactive <= math.prod(states) * (state - 1):
        raise DomainError("Number of inactive states must be <= prod(S_I(j)) * (S_j - 1).")

    X = rng.random(states + (state,))

    if n_inactive > 0:
        # Every information state can lose up to (state - 1) outcomes
        contexts = [s_I for s_I in paths(states) for _ in range(state - 1)]
        chosen = rng.choice(len(contexts), size=n_inactive, replace=False)
        counts: Dict[Tuple[int, ...], int] = {}
        for k in chosen:
            counts[contexts[k]] = counts.get(contexts[k], 0) + 1
        for s_I, count in counts.items():
            inactive = rng.choice(state, size=count, replace=False)
            X[to_index(s_I) + (inactive,)] = 0.0

    # Normalize the probabilities
    X /= X.sum(axis=-1, keepdims=True)
    return X


def random_utilities(
    rng: np.random.Generator,
    diagram: InfluenceDiagram,
    v: Node,
    low: float = -1.0,
    high: float = 1.0,
) -> np.ndarray:
    """Generate random utilities between ``low`` and ``high`` for value node v."""
    if not high > low:
        raise DomainError("high should be greater than low.")
    Y = rng.random(diagram.states(diagram.information_set(v)))
    return Y * (high - low) + low


def random_local_decision_strategy(rng: np.random.Generator, diagram: InfluenceDiagram, d: Node) -> np.ndarray:
    """Generate a random 0/1 local decision strategy for decision node d."""
    states = diagram.states(diagram.information_set(d))
    state = diagram.S_j[d - 1]
    Z = np.zeros(states + (state,), dtype=int)
    for s_I in paths(states):
        Z[to_index(s_I) + (int(rng.integers(0, state)),)] = 1
    return Z


def random_instance(
    rng: np.random.Generator,
    n_C: int,
    n_D: int,
    n_V: int,
    n_I: int,
    state_choices: Sequence[int] = (2, 3),
    low: float = -1.0,
    high: float = 1.0,
) -> Tuple[InfluenceDiagram, ModelParameters]:
    """Generate a validated random (diagram, parameters) pair."""
    C, D, V, A = random_diagram(rng, n_C, n_D, n_V, n_I)
    S_j = random_states(rng, state_choices, n_C + n_D)
    diagram = InfluenceDiagram(C, D, V, A, S_j)
    X = {j: random_probabilities(rng, diagram, j) for j in diagram.C}
    Y = {v: random_utilities(rng, diagram, v, low=low, high=high) for v in diagram.V}
    return diagram, create_model_parameters(diagram, X, Y)


__all__ = [
    "random_diagram",
    "random_states",
    "random_probabilities",
    "random_utilities",
    "random_local_decision_strategy",
    "random_instance",
]
