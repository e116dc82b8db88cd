#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Decision model: path-based MILP formulation of an influence diagram.

Implements:
  1. Path probability upper bound p(s) and minimum path probability epsilon
  2. Affine shift of utilities to a non-negative path utility
  3. Path probability variables pi and local decision strategy binaries z
  4. Expected utility objective, strategy and consistency constraints
  5. Optional lazy cuts (probability sum, number of paths)

The number of pi variables is the product of all state counts, so the
formulation is only practical for diagrams with up to a few million paths.
"""
from __future__ import annotations

import math
from typing import Callable, Dict, Tuple

from .gurobi_wrapper import GurobiModelWrapper as Model
from .influence_diagram import InfluenceDiagram
from .lazy_cuts import NumberOfPathsCut, ProbabilitySumCut
from .model_parameters import ModelParameters
from .parameters import Specs
from .paths import Path, paths, restrict, to_index


def _key_name(key: Tuple[int, ...]) -> str:
    return "_".join(str(k) for k in key)


def path_probability_function(diagram: InfluenceDiagram, params: ModelParameters) -> Callable[[Path], float]:
    """
    Upper bound of the probability of a path.

    p(s) = prod_{j in C} X_j[s_{I(j)}, s_j], i.e. the probability of the path
    when every decision along it agrees with the strategy.
    """
    X = params.X
    factors = [(X[j], diagram.information_set(j) + (j,)) for j in diagram.C]

    def probability(s: Path) -> float:
        p = 1.0
        for X_j, nodes in factors:
            p *= float(X_j[to_index(restrict(s, nodes))])
        return p

    return probability


def minimum_path_probability(diagram: InfluenceDiagram, probability: Callable[[Path], float]) -> float:
    """Minimum path probability, streamed over all paths."""
    epsilon = math.inf
    for s in paths(diagram.S_j):
        epsilon = min(epsilon, probability(s))
    return epsilon


def utility_shift(params: ModelParameters) -> float:
    """Global minimum utility over all value nodes (0 without value nodes)."""
    return min((float(Y_v.min()) for Y_v in params.Y.values()), default=0.0)


def path_utility_function(
    diagram: InfluenceDiagram,
    params: ModelParameters,
    v_min: float = 0.0,
) -> Callable[[Path], float]:
    """Total utility of a path, with ``v_min`` subtracted from every value node."""
    terms = [(Y_v - v_min, diagram.information_set(v)) for v, Y_v in params.Y.items()]

    def utility(s: Path) -> float:
        return sum(float(Y_v[to_index(restrict(s, nodes))]) for Y_v, nodes in terms)

    return utility


def build_decision_model(
    specs: Specs,
    diagram: InfluenceDiagram,
    params: ModelParameters,
    name: str = "DecisionModel",
    verbose: bool = False,
) -> Dict:
    """
    Build the decision model MILP for a validated diagram and parameters.

    VARIABLES:
      - pi[s] in [0, p(s)]: probability of path s under the chosen strategy
      - z[j][(s_I..., s_j)] in {0,1}: decision node j chooses s_j given s_I

    OBJECTIVE:
      max sum_s pi[s] * U'(s), where U' is the shifted (non-negative) utility

    CONSTRAINTS:
      1. Local strategy: sum_{s_j} z[j][(s_I..., s_j)] = 1 for every j, s_I
      2. Path bound: 0 <= pi[s] <= p(s) (variable bounds)
      3. Consistency: pi[s] <= z[j][s_{I(j)}, s_j] for every s, j

    Args:
        specs: Lazy cut toggles
        diagram: Validated influence diagram
        params: Validated probabilities and utilities
        name: Gurobi model name
        verbose: Print status messages

    Returns:
        Dict with keys:
          - "model": GurobiModelWrapper
          - "variables": {"pi": path -> var, "z": node -> key -> var}
          - "epsilon": minimum path probability
          - "v_min": global utility shift
          - "utility_shift": value node -> shift applied to it
          - "probability": path -> p(s)
          - "utility": path -> shifted utility U'(s)
          - "lazy_cuts": registered cut objects
    """
    if not isinstance(diagram, InfluenceDiagram):
        raise TypeError("diagram should be an InfluenceDiagram.")
    if not isinstance(params, ModelParameters):
        raise TypeError("params should be ModelParameters.")

    C, D, V, S_j = diagram.C, diagram.D, diagram.V, diagram.S_j

    # --- Phase 1: Path probabilities ---
    if verbose:
        print("[Phase 1] Computing path probabilities...")

    probability = path_probability_function(diagram, params)
    epsilon = minimum_path_probability(diagram, probability)

    if verbose:
        print(f"  - Chance nodes: {len(C)}, decision nodes: {len(D)}, value nodes: {len(V)}")
        print(f"  - Paths: {len(paths(S_j))}")
        print(f"  - Minimum path probability: {epsilon:.6g}")

    # --- Phase 2: Utilities ---
    v_min = utility_shift(params)
    utility = path_utility_function(diagram, params, v_min)

    if verbose:
        print("[Phase 2] Shifting utilities to non-negative values...")
        print(f"  - Utility shift: {v_min:.6g}")

    mdl = Model(name=name)

    # --- Phase 3: Variables ---
    if verbose:
        print("[Phase 3] Creating variables...")

    pi = mdl.continuous_var_dict(paths(S_j), lb=0, ub=probability, name="pi")
    z = {
        j: mdl.binary_var_dict(paths(diagram.states(diagram.information_set(j) + (j,))), name=f"z{j}")
        for j in D
    }

    if verbose:
        print(f"  - Path probability variables: {len(pi)}")
        print(f"  - Decision strategy variables: {sum(len(z_j) for z_j in z.values())}")

    # --- Phase 4: Objective ---
    if verbose:
        print("[Phase 4] Setting expected utility objective...")

    mdl.maximize(mdl.sum(utility(s) * pi[s] for s in paths(S_j)))

    # --- Phase 5: Constraints ---
    if verbose:
        print("[Phase 5] Adding constraints...")

    for j in D:
        S_I = diagram.states(diagram.information_set(j))
        for s_I in paths(S_I):
            mdl.add_constraint(
                mdl.sum(z[j][s_I + (s_j,)] for s_j in range(1, S_j[j - 1] + 1)) == 1,
                ctname=f"local_strategy_{j}_{_key_name(s_I)}",
            )

    consistency_nodes = [(j, diagram.information_set(j) + (j,)) for j in D]
    for s in paths(S_j):
        for j, nodes in consistency_nodes:
            mdl.add_constraint(
                pi[s] <= z[j][restrict(s, nodes)],
                ctname=f"consistency_{j}_{_key_name(s)}",
            )

    mdl.update()

    if verbose:
        print(f"  - Constraints: {mdl.number_of_constraints}")

    # --- Phase 6: Lazy constraints ---
    if verbose:
        print("[Phase 6] Registering lazy cuts...")

    lazy_cuts = []
    if specs.probability_sum_cut:
        lazy_cuts.append(ProbabilitySumCut(mdl, pi, epsilon))

    if specs.num_paths > 0:
        lazy_cuts.append(NumberOfPathsCut(mdl, pi, epsilon, probability, specs.num_paths))

    for cut in lazy_cuts:
        mdl.add_lazy_callback(cut)

    if verbose:
        print(f"  - Lazy cuts: {[cut.name for cut in lazy_cuts] or 'none'}")

    return {
        "model": mdl,
        "variables": {"pi": pi, "z": z},
        "epsilon": epsilon,
        "v_min": v_min,
        "utility_shift": {v: v_min for v in V},
        "probability": probability,
        "utility": utility,
        "lazy_cuts": lazy_cuts,
    }


__all__ = [
    "build_decision_model",
    "path_probability_function",
    "path_utility_function",
    "minimum_path_probability",
    "utility_shift",
]
