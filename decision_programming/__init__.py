#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Decision Programming: influence diagrams as mixed-integer linear programs.

This package compiles a multi-stage decision problem under uncertainty,
expressed as an influence diagram of chance, decision and value nodes, into
a path-based MILP:
  1. Validation of the diagram as a layered DAG and of its probability and
     utility tensors against the information sets
  2. Lazy enumeration of all state paths
  3. Path probability and local decision strategy variables, expected
     utility objective, strategy and consistency constraints
  4. Optional lazy cuts (probability sum, number of paths) added during
     branch-and-cut through Gurobi callbacks
"""

__version__ = "0.1.0"

from .exceptions import (
    DecisionProgrammingError,
    DomainError,
    ParameterValidationError,
    StructuralValidationError,
)
from .parameters import Specs, get_solver_params
from .paths import paths
from .influence_diagram import InfluenceDiagram, validate_influence_diagram
from .model_parameters import (
    ModelParameters,
    create_model_parameters,
    validate_probabilities,
    validate_utilities,
)
from .decision_model import build_decision_model
from .lazy_cuts import NumberOfPathsCut, ProbabilitySumCut
from .analysis import (
    compatible_paths,
    conditional_value_at_risk,
    decision_strategy,
    expected_value,
    state_probabilities,
    utility_distribution,
    value_at_risk,
)
from .random_instance import random_diagram, random_instance
from .solve import solve_decision_problem

__all__ = [
    "DecisionProgrammingError",
    "DomainError",
    "ParameterValidationError",
    "StructuralValidationError",
    "Specs",
    "get_solver_params",
    "paths",
    "InfluenceDiagram",
    "validate_influence_diagram",
    "ModelParameters",
    "create_model_parameters",
    "validate_probabilities",
    "validate_utilities",
    "build_decision_model",
    "NumberOfPathsCut",
    "ProbabilitySumCut",
    "compatible_paths",
    "conditional_value_at_risk",
    "decision_strategy",
    "expected_value",
    "state_probabilities",
    "utility_distribution",
    "value_at_risk",
    "random_diagram",
    "random_instance",
    "solve_decision_problem",
]
