#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Gurobi-based wrapper exposing a docplex-style modelling API.

Besides variables, constraints and the objective, the wrapper owns the lazy
constraint callbacks of a model: every registered callback receives a
GurobiCallbackData object whenever Gurobi reports a new incumbent (MIPSOL) or
an optimal node relaxation (MIPNODE).
"""
from __future__ import annotations

from typing import Callable, Dict, Hashable, Iterable, List, Optional, Union

import gurobipy as gp
from gurobipy import GRB


def _var_name(name: str, key: Hashable) -> str:
    if isinstance(key, tuple):
        return f"{name}_" + "_".join(str(k) for k in key)
    return f"{name}_{key}"


class GurobiCallbackData:
    """
    Current solution values and cut submission inside a Gurobi callback.

    At MIPSOL the values are the new integer incumbent; at MIPNODE they are
    the (possibly fractional) node relaxation.
    """

    def __init__(self, model: gp.Model, where: int):
        self.model = model
        self.where = where

    def get_values(self, variables: List[gp.Var]) -> List[float]:
        """Get the current values of a list of variables."""
        if self.where == GRB.Callback.MIPSOL:
            return list(self.model.cbGetSolution(variables))
        return list(self.model.cbGetNodeRel(variables))

    def submit(self, constraint) -> None:
        """Add a lazy constraint to the model."""
        self.model.cbLazy(constraint)


class GurobiModelWrapper:
    """Wrapper to make Gurobi Model behave like docplex Model."""

    def __init__(self, name="model", env: Optional[gp.Env] = None):
        self.model = gp.Model(name, env=env)
        self._lazy_callbacks: List[Callable[[GurobiCallbackData], None]] = []

    def continuous_var_dict(
        self,
        keys: Iterable[Hashable],
        lb: Optional[float] = 0,
        ub: Union[None, float, Callable[[Hashable], float]] = None,
        name="var",
    ) -> Dict[Hashable, gp.Var]:
        """
        Create continuous variables similar to docplex.

        ``ub`` may be a number or a function of the key.
        """
        if lb is None:
            lb = -GRB.INFINITY

        var_dict = {}
        if isinstance(keys, dict):
            keys = keys.keys()

        for key in keys:
            if ub is None:
                key_ub = GRB.INFINITY
            elif callable(ub):
                key_ub = ub(key)
            else:
                key_ub = ub
            var = self.model.addVar(lb=lb, ub=key_ub, name=_var_name(name, key), vtype=GRB.CONTINUOUS)
            var_dict[key] = var

        self.model.update()
        return var_dict

    def binary_var_dict(self, keys: Iterable[Hashable], name="var") -> Dict[Hashable, gp.Var]:
        """Create binary variables similar to docplex."""
        var_dict = {}
        if isinstance(keys, dict):
            keys = keys.keys()

        for key in keys:
            var = self.model.addVar(lb=0, ub=1, name=_var_name(name, key), vtype=GRB.BINARY)
            var_dict[key] = var

        self.model.update()
        return var_dict

    def sum(self, expr_list):
        """Sum expression compatible with Gurobi."""
        return gp.quicksum(expr_list)

    def add_constraint(self, constraint, ctname=""):
        """Add constraint to model."""
        return self.model.addConstr(constraint, name=ctname)

    def maximize(self, expr):
        """Set maximization objective."""
        self.model.setObjective(expr, GRB.MAXIMIZE)

    def minimize(self, expr):
        """Set minimization objective."""
        self.model.setObjective(expr, GRB.MINIMIZE)

    def add_lazy_callback(self, callback: Callable[[GurobiCallbackData], None]) -> None:
        """Register a lazy constraint callback, called as ``callback(cb_data)``."""
        self._lazy_callbacks.append(callback)

    @property
    def lazy_callbacks(self) -> List[Callable[[GurobiCallbackData], None]]:
        return list(self._lazy_callbacks)

    def _dispatch(self, model: gp.Model, where: int) -> None:
        if where == GRB.Callback.MIPNODE:
            if model.cbGet(GRB.Callback.MIPNODE_STATUS) != GRB.OPTIMAL:
                return
        elif where != GRB.Callback.MIPSOL:
            return

        cb_data = GurobiCallbackData(model, where)
        for callback in self._lazy_callbacks:
            callback(cb_data)

    def set_time_limit(self, seconds):
        """Set time limit."""
        self.model.setParam('TimeLimit', seconds)

    def set_mip_gap(self, gap):
        """Set MIP gap tolerance."""
        self.model.setParam('MIPGap', gap)

    def set_threads(self, threads):
        self.model.setParam('Threads', threads)

    def apply_params(self, solver_params: Dict) -> None:
        """Apply a dict from parameters.get_solver_params()."""
        self.set_time_limit(solver_params["time_limit"])
        self.set_mip_gap(solver_params["mip_gap"])
        self.set_threads(solver_params["threads"])
        self.model.setParam('OutputFlag', solver_params["output_flag"])

    def optimize(self):
        """Optimize the model, forwarding callbacks to the lazy cuts."""
        if self._lazy_callbacks:
            self.model.setParam('LazyConstraints', 1)
            self.model.optimize(self._dispatch)
        else:
            self.model.optimize()

    def is_optimal(self):
        """Check if solution is optimal."""
        return self.model.Status == GRB.OPTIMAL

    def has_solution(self):
        """Check if model has a solution."""
        return self.model.SolCount > 0

    def get_objective_value(self):
        """Get objective value."""
        if not self.has_solution():
            return None
        return self.model.ObjVal

    def solve(self, log_output=True):
        """Solve the model."""
        self.model.setParam('OutputFlag', 1 if log_output else 0)
        self.optimize()

        # Return a solution wrapper
        return GurobiSolutionWrapper(self.model)

    def update(self):
        """Update model."""
        self.model.update()

    @property
    def number_of_variables(self):
        """Get number of variables."""
        return self.model.NumVars

    @property
    def number_of_binary_variables(self):
        return self.model.NumBinVars

    @property
    def number_of_constraints(self):
        """Get number of constraints."""
        return self.model.NumConstrs


class GurobiSolutionWrapper:
    """Wrapper for Gurobi solution to match docplex interface."""

    def __init__(self, model: gp.Model):
        self.model = model
        self.status = model.Status

    @property
    def objective_value(self):
        """Get objective value, or None when no solution was found."""
        if not self.is_feasible():
            return None
        return self.model.ObjVal

    def is_feasible(self):
        """Check if a feasible solution is available."""
        return self.model.SolCount > 0

    def get_value_dict(self, var_dict: Dict[Hashable, gp.Var]) -> Dict[Hashable, float]:
        """Get solution values for a dictionary of variables."""
        keys = list(var_dict.keys())
        if not keys:
            return {}
        values = self.model.getAttr('X', [var_dict[k] for k in keys])
        return dict(zip(keys, values))

    @property
    def solve_details(self):
        """Return solve details."""
        return GurobiSolveDetails(self.model)


class GurobiSolveDetails:
    """Wrapper for solve details."""

    def __init__(self, model: gp.Model):
        self.model = model

    @property
    def time(self):
        """Get solve time."""
        return self.model.Runtime

    @property
    def gap(self):
        """Get MIP gap, or None when no solution was found."""
        try:
            return self.model.MIPGap
        except (gp.GurobiError, AttributeError):
            return None


__all__ = [
    "GurobiModelWrapper",
    "GurobiSolutionWrapper",
    "GurobiSolveDetails",
    "GurobiCallbackData",
]
