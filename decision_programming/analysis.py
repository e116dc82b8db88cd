#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Post-solve analysis of a decision strategy.

A decision strategy maps each decision node j to its local strategy
{s_I: s_j}. Given a strategy, the compatible paths are those whose decision
states agree with it, and their probabilities are the chance-only path
probabilities p(s).
"""
from __future__ import annotations

from typing import Dict, Iterator, Mapping, Tuple

import numpy as np

from .exceptions import DomainError
from .influence_diagram import InfluenceDiagram
from .model_parameters import ModelParameters
from .parameters import BINARY_THRESHOLD, RISK_LEVEL_TOLERANCE
from .paths import Path, paths, restrict
from .decision_model import path_probability_function, path_utility_function

LocalDecisionStrategy = Dict[Tuple[int, ...], int]
DecisionStrategy = Dict[int, LocalDecisionStrategy]


def decision_strategy(diagram: InfluenceDiagram, z_values: Mapping[int, Mapping[Tuple[int, ...], float]]) -> DecisionStrategy:
    """
    Read the decision strategy from solved z values.

    Args:
        diagram: Influence diagram
        z_values: node -> {(s_I..., s_j): value}, e.g. from get_value_dict

    Returns:
        node -> {s_I: chosen state}
    """
    strategy: DecisionStrategy = {}
    for j in diagram.D:
        local: LocalDecisionStrategy = {}
        for key, value in z_values[j].items():
            if value > BINARY_THRESHOLD:
                local[tuple(key[:-1])] = int(key[-1])
        strategy[j] = local
    return strategy


def compatible_paths(diagram: InfluenceDiagram, strategy: DecisionStrategy) -> Iterator[Path]:
    """Paths whose decision states agree with the strategy."""
    checks = [(diagram.information_set(j), j, strategy[j]) for j in diagram.D]
    for s in paths(diagram.S_j):
        if all(local.get(restrict(s, I_j)) == s[j - 1] for I_j, j, local in checks):
            yield s


def utility_distribution(
    diagram: InfluenceDiagram,
    params: ModelParameters,
    strategy: DecisionStrategy,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Distribution of the (unshifted) path utility under a strategy.

    Returns:
        (utilities, probabilities): sorted unique utilities and their
        probabilities; utilities reachable only with probability zero are
        dropped.
    """
    probability = path_probability_function(diagram, params)
    utility = path_utility_function(diagram, params)

    mass: Dict[float, float] = {}
    for s in compatible_paths(diagram, strategy):
        p = probability(s)
        if p > 0:
            u = utility(s)
            mass[u] = mass.get(u, 0.0) + p

    u = np.array(sorted(mass), dtype=float)
    p = np.array([mass[k] for k in sorted(mass)], dtype=float)
    return u, p


def state_probabilities(
    diagram: InfluenceDiagram,
    params: ModelParameters,
    strategy: DecisionStrategy,
) -> Dict[int, np.ndarray]:
    """Marginal probability of every state of every chance/decision node."""
    probability = path_probability_function(diagram, params)
    marginals = {j: np.zeros(diagram.S_j[j - 1]) for j in range(1, diagram.n + 1)}
    for s in compatible_paths(diagram, strategy):
        p = probability(s)
        for j, s_j in enumerate(s, start=1):
            marginals[j][s_j - 1] += p
    return marginals


def expected_value(result: Dict, pi_values: Mapping[Path, float]) -> float:
    """
    True expected utility of a solved decision model.

    The objective uses shifted utilities, so every path utility is shifted
    back by the sum of the per-node shifts before weighting with pi. Exact
    only when every compatible path sits at its probability bound; paths
    with zero shifted utility may be left below it by the solver.

    Args:
        result: Dict returned by build_decision_model
        pi_values: path -> solved pi value
    """
    utility = result["utility"]
    shift = sum(result["utility_shift"].values())
    return sum(value * (utility(s) + shift) for s, value in pi_values.items())


def _check_alpha(alpha: float) -> None:
    if not 0 < alpha <= 1:
        raise DomainError("alpha should be in (0, 1].")


def value_at_risk(u: np.ndarray, p: np.ndarray, alpha: float) -> float:
    """Smallest utility whose cumulative probability reaches alpha."""
    _check_alpha(alpha)
    order = np.argsort(u)
    u, p = np.asarray(u, dtype=float)[order], np.asarray(p, dtype=float)[order]
    cumulative = np.cumsum(p)
    index = int(np.searchsorted(cumulative, alpha - RISK_LEVEL_TOLERANCE))
    return float(u[min(index, len(u) - 1)])


def conditional_value_at_risk(u: np.ndarray, p: np.ndarray, alpha: float) -> float:
    """Expected utility over the worst alpha share of the distribution."""
    _check_alpha(alpha)
    order = np.argsort(u)
    u, p = np.asarray(u, dtype=float)[order], np.asarray(p, dtype=float)[order]
    var = value_at_risk(u, p, alpha)
    below = u < var
    tail = float(p[below].sum())
    return float((u[below] @ p[below] + (alpha - tail) * var) / alpha)


__all__ = [
    "LocalDecisionStrategy",
    "DecisionStrategy",
    "decision_strategy",
    "compatible_paths",
    "utility_distribution",
    "state_probabilities",
    "expected_value",
    "value_at_risk",
    "conditional_value_at_risk",
]
