#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Decision Problem Solver.

Builds the decision model, solves it with Gurobi, and reports the optimal
decision strategy together with its utility distribution.
"""
from __future__ import annotations

import sys
import time
from typing import Dict, Optional, Sequence

import numpy as np

from .analysis import (
    conditional_value_at_risk,
    decision_strategy,
    expected_value,
    state_probabilities,
    utility_distribution,
    value_at_risk,
)
from .decision_model import build_decision_model
from .influence_diagram import InfluenceDiagram
from .model_parameters import ModelParameters
from .parameters import Specs, get_random_params, get_solver_params
from .random_instance import random_instance
from .utils import (
    print_decision_strategy,
    print_solution_summary,
    print_state_probabilities,
    print_utility_distribution,
)

RISK_LEVELS = (0.05, 0.1, 0.2)


def solve_decision_problem(
    specs: Specs,
    diagram: InfluenceDiagram,
    params: ModelParameters,
    time_limit: Optional[float] = None,
    mip_gap: Optional[float] = None,
    verbose: bool = True,
    risk_levels: Sequence[float] = RISK_LEVELS,
) -> Optional[Dict]:
    """
    Solve an influence diagram end-to-end.

    Args:
        specs: Lazy cut toggles
        diagram: Validated influence diagram
        params: Validated probabilities and utilities
        time_limit: Gurobi time limit (seconds)
        mip_gap: Gurobi MIP gap tolerance
        verbose: Print status messages and Gurobi log
        risk_levels: alpha levels for VaR / CVaR

    Returns:
        Dict with solution info, or None if no solution was found
    """
    start_time = time.time()

    if verbose:
        print("=" * 70)
        print("DECISION PROGRAMMING SOLVER")
        print("=" * 70)
        print("\n[Building Model]")

    model_result = build_decision_model(specs, diagram, params, verbose=verbose)
    mdl = model_result["model"]
    pi = model_result["variables"]["pi"]
    z = model_result["variables"]["z"]

    solver_params = get_solver_params(
        time_limit=time_limit,
        mip_gap=mip_gap,
        output_flag=1 if verbose else 0,
    )
    mdl.apply_params(solver_params)

    if verbose:
        print("\n[Solving with Gurobi]")
        print(f"  Time limit: {solver_params['time_limit']}s")
        print(f"  MIP gap: {solver_params['mip_gap'] * 100:.2f}%")
        print()

    solve_start = time.time()
    sol = mdl.solve(log_output=verbose)
    solve_time = time.time() - solve_start

    if not sol.is_feasible():
        if verbose:
            print(f"\n[ERROR] Solver returned no solution (status {sol.status})")
        return None

    pi_values = sol.get_value_dict(pi)
    z_values = {j: sol.get_value_dict(z_j) for j, z_j in z.items()}
    strategy = decision_strategy(diagram, z_values)
    u, p = utility_distribution(diagram, params, strategy)

    result = {
        "solution": sol,
        "model": mdl,
        "model_result": model_result,
        "objective_value": sol.objective_value,
        "expected_value": float(u @ p),
        "pi_expected_value": expected_value(model_result, pi_values),
        "pi_values": pi_values,
        "z_values": z_values,
        "strategy": strategy,
        "utility_distribution": (u, p),
        "state_probabilities": state_probabilities(diagram, params, strategy),
        "risk_measures": {
            alpha: (value_at_risk(u, p, alpha), conditional_value_at_risk(u, p, alpha))
            for alpha in risk_levels
        },
        "solve_time": solve_time,
        "total_time": time.time() - start_time,
    }

    if verbose:
        print_decision_strategy(diagram, strategy)
        print_state_probabilities(diagram, result["state_probabilities"])
        print_utility_distribution(u, p)
        print_solution_summary(result)

    return result


def main():
    """Entry point for command-line execution: solve a random instance."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Solve a random influence diagram as a path-based MILP"
    )
    parser.add_argument("--chance", type=int, default=3, help="Number of chance nodes")
    parser.add_argument("--decision", type=int, default=2, help="Number of decision nodes")
    parser.add_argument("--value", type=int, default=1, help="Number of value nodes")
    parser.add_argument("--info-limit", type=int, default=2, help="Maximum information set size")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--states",
        type=int,
        nargs="+",
        default=None,
        help="Choices for the number of states of each node"
    )
    parser.add_argument(
        "--probability-sum-cut",
        action="store_true",
        help="Register the probability sum lazy cut"
    )
    parser.add_argument(
        "--num-paths",
        type=int,
        default=0,
        help="Register the number of paths lazy cut with this value"
    )
    parser.add_argument("--time-limit", type=float, default=None, help="Solver time limit (seconds)")
    parser.add_argument("--mip-gap", type=float, default=None, help="MIP gap tolerance")
    parser.add_argument("--quiet", action="store_true", help="Suppress detailed output")

    args = parser.parse_args()
    random_params = get_random_params(seed=args.seed, state_choices=args.states)

    try:
        rng = np.random.default_rng(random_params["seed"])
        diagram, params = random_instance(
            rng,
            args.chance,
            args.decision,
            args.value,
            args.info_limit,
            state_choices=random_params["state_choices"],
            low=random_params["low"],
            high=random_params["high"],
        )
        specs = Specs(probability_sum_cut=args.probability_sum_cut, num_paths=args.num_paths)
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    if not args.quiet:
        print(diagram)

    result = solve_decision_problem(
        specs,
        diagram,
        params,
        time_limit=args.time_limit,
        mip_gap=args.mip_gap,
        verbose=not args.quiet,
    )

    if result is None:
        sys.exit(1)
    else:
        print(f"\n[SUCCESS] Expected utility: {result['expected_value']:.4f}")
        sys.exit(0)


if __name__ == "__main__":
    main()
