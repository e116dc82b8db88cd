#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Printing helpers for solved decision models.
"""
from typing import Dict

import numpy as np

from .analysis import DecisionStrategy
from .influence_diagram import InfluenceDiagram


def print_decision_strategy(diagram: InfluenceDiagram, strategy: DecisionStrategy) -> None:
    """
    Print the chosen state of every decision node for each information state.

    Args:
        diagram: Influence diagram
        strategy: node -> {s_I: s_j}
    """
    print("\n--- Decision Strategy ---")
    for j in diagram.D:
        I_j = diagram.information_set(j)
        print(f"  Decision node {j} (information set {list(I_j)}):")
        for s_I, s_j in sorted(strategy[j].items()):
            print(f"    - {s_I} -> {s_j}")


def print_utility_distribution(u: np.ndarray, p: np.ndarray) -> None:
    print("\n--- Utility Distribution ---")
    print(f"  {'Utility':>12} | {'Probability':>12}")
    print("  " + "-" * 27)
    for u_k, p_k in zip(u, p):
        print(f"  {u_k:>12.4f} | {p_k:>12.4f}")


def print_state_probabilities(diagram: InfluenceDiagram, marginals: Dict[int, np.ndarray]) -> None:
    print("\n--- State Probabilities ---")
    for j in sorted(marginals):
        kind = "decision" if diagram.is_decision(j) else "chance"
        states = "  ".join(f"{x:.4f}" for x in marginals[j])
        print(f"  Node {j:<3} ({kind:<8}): {states}")


def print_solution_summary(result: Dict) -> None:
    """
    Print a formatted solution summary.

    Args:
        result: Dict returned by solve.solve_decision_problem
    """
    print("\n" + "=" * 70)
    print("DECISION MODEL SOLUTION SUMMARY")
    print("=" * 70)

    if result is None:
        print("No solution found.")
        return

    print(f"\nObjective Value (shifted): {result['objective_value']:,.4f}")
    print(f"Expected Utility:          {result['expected_value']:,.4f}")
    print(f"Solve time:                {result['solve_time']:.2f}s")

    risk = result.get("risk_measures", {})
    if risk:
        print("\n--- Risk Measures ---")
        for alpha, (var, cvar) in sorted(risk.items()):
            print(f"  alpha={alpha:<5}: VaR={var:>10.4f}  CVaR={cvar:>10.4f}")

    print("=" * 70 + "\n")
