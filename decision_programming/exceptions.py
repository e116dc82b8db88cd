#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Error taxonomy for the decision programming package.

All validation happens when a diagram or parameter set is constructed;
nothing is repaired or retried.
"""


class DecisionProgrammingError(ValueError):
    """Base class for every error raised by this package."""


class StructuralValidationError(DecisionProgrammingError):
    """Influence diagram invariant violated (node partition, arcs, states)."""


class ParameterValidationError(DecisionProgrammingError):
    """Probability or utility tensor does not match the diagram."""

    def __init__(self, node: int, message: str):
        self.node = node
        super().__init__(f"Node {node}: {message}")


class DomainError(DecisionProgrammingError):
    """Argument outside the domain of a generator or analysis function."""


__all__ = [
    "DecisionProgrammingError",
    "StructuralValidationError",
    "ParameterValidationError",
    "DomainError",
]
