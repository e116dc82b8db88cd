#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Model parameters: probability and utility tensors of an influence diagram.

  - X[j]: conditional probabilities of chance node j, shape (S[I(j)]..., S[j])
  - Y[v]: utilities of value node v, shape (S[I(v)]...)

Tensors are indexed by 0-based states; paths use 1-based states.
"""
from __future__ import annotations

from typing import Dict, Mapping

import numpy as np

from .exceptions import ParameterValidationError
from .influence_diagram import InfluenceDiagram
from .parameters import PROBABILITY_TOLERANCE
from .paths import paths, to_index


class ModelParameters:
    """
    Validated probabilities X and utilities Y.

    Construct through :func:`create_model_parameters`; the arrays are stored as
    read-only copies.
    """

    def __init__(self, X: Dict[int, np.ndarray], Y: Dict[int, np.ndarray]):
        self._X = X
        self._Y = Y

    @property
    def X(self) -> Dict[int, np.ndarray]:
        return dict(self._X)

    @property
    def Y(self) -> Dict[int, np.ndarray]:
        return dict(self._Y)

    def __repr__(self):
        return f"ModelParameters(X={sorted(self._X)}, Y={sorted(self._Y)})"


def _as_tensor(j: int, values) -> np.ndarray:
    try:
        array = np.array(values, dtype=float)
    except (TypeError, ValueError) as e:
        raise ParameterValidationError(j, f"values are not numeric ({e}).")
    array.setflags(write=False)
    return array


def validate_probabilities(diagram: InfluenceDiagram, X: Mapping[int, object]) -> Dict[int, np.ndarray]:
    """
    Validate the probability tensor of every chance node.

    Checks, per chance node j: a tensor is given, its shape is
    (S[I(j)]..., S[j]), all entries are finite and non-negative, and the
    probabilities over j's own states sum to one for every information
    state within PROBABILITY_TOLERANCE.

    Returns:
        Dict of read-only float arrays keyed by chance node.
    """
    extra = set(X) - set(diagram.C)
    if extra:
        j = min(extra)
        raise ParameterValidationError(j, "probabilities are given but the node is not a chance node.")

    validated: Dict[int, np.ndarray] = {}
    for j in diagram.C:
        if j not in X:
            raise ParameterValidationError(j, "probabilities are missing.")
        array = _as_tensor(j, X[j])

        S_I = diagram.states(diagram.information_set(j))
        expected = S_I + (diagram.S_j[j - 1],)
        if array.shape != expected:
            raise ParameterValidationError(
                j, f"probability array should be dimension |S_I(j)|*|S_j| = {expected}, got {array.shape}."
            )
        if not np.all(np.isfinite(array)):
            raise ParameterValidationError(j, "probabilities should be finite.")
        if np.any(array < 0):
            raise ParameterValidationError(j, "probabilities should be non-negative.")

        for s_I in paths(S_I):
            total = float(array[to_index(s_I)].sum())
            if not np.isclose(total, 1.0, rtol=0.0, atol=PROBABILITY_TOLERANCE):
                raise ParameterValidationError(
                    j, f"probabilities should sum to one, got {total} for information state {s_I}."
                )
        validated[j] = array
    return validated


def validate_utilities(diagram: InfluenceDiagram, Y: Mapping[int, object]) -> Dict[int, np.ndarray]:
    """Validate the utility tensor of every value node (shape S[I(v)], finite)."""
    extra = set(Y) - set(diagram.V)
    if extra:
        j = min(extra)
        raise ParameterValidationError(j, "utilities are given but the node is not a value node.")

    validated: Dict[int, np.ndarray] = {}
    for v in diagram.V:
        if v not in Y:
            raise ParameterValidationError(v, "utilities are missing.")
        array = _as_tensor(v, Y[v])
        expected = diagram.states(diagram.information_set(v))
        if array.shape != expected:
            raise ParameterValidationError(
                v, f"utility array should be dimension |S_I(j)| = {expected}, got {array.shape}."
            )
        if not np.all(np.isfinite(array)):
            raise ParameterValidationError(v, "utilities should be finite.")
        validated[v] = array
    return validated


def create_model_parameters(
    diagram: InfluenceDiagram,
    X: Mapping[int, object],
    Y: Mapping[int, object],
) -> ModelParameters:
    """
    Construct and validate model parameters for ``diagram``.

    Args:
        diagram: Validated influence diagram
        X: chance node -> array-like of conditional probabilities
        Y: value node -> array-like of utilities

    Raises:
        ParameterValidationError: On the first node whose tensor is invalid.
    """
    return ModelParameters(validate_probabilities(diagram, X), validate_utilities(diagram, Y))


__all__ = [
    "ModelParameters",
    "create_model_parameters",
    "validate_probabilities",
    "validate_utilities",
]
