"""Shared fixtures: small hand-built influence diagrams."""
import threading

import numpy as np
import pytest

from decision_programming.influence_diagram import InfluenceDiagram
from decision_programming.model_parameters import create_model_parameters


class FakeCallbackData:
    """Solver callback stand-in: fixed solution values, records submissions."""

    def __init__(self, value_of):
        self.value_of = value_of
        self.submitted = []
        self.calls = 0
        self._lock = threading.Lock()

    def get_values(self, variables):
        with self._lock:
            self.calls += 1
        return [self.value_of(var.VarName) for var in variables]

    def submit(self, constraint):
        with self._lock:
            self.submitted.append(constraint)


@pytest.fixture
def fake_callback_data():
    return FakeCallbackData


@pytest.fixture
def simple_diagram():
    """One chance node, one decision node observing it, one value node."""
    return InfluenceDiagram(C=[1], D=[2], V=[3], A=[(1, 2), (1, 3), (2, 3)], S_j=[2, 2])


@pytest.fixture
def simple_params(simple_diagram):
    X = {1: np.array([0.3, 0.7])}
    Y = {3: np.array([[1.0, 2.0], [0.0, 3.0]])}
    return create_model_parameters(simple_diagram, X, Y)


@pytest.fixture
def chance_only_diagram():
    """Two chance nodes with two states each and no decisions."""
    return InfluenceDiagram(C=[1, 2], D=[], V=[3], A=[(1, 2), (1, 3), (2, 3)], S_j=[2, 2])


@pytest.fixture
def two_stage_diagram():
    """Chance, decision, chance, decision with two value nodes."""
    A = [(1, 2), (1, 3), (2, 3), (2, 4), (3, 4), (3, 5), (4, 5), (1, 6), (4, 6)]
    return InfluenceDiagram(C=[1, 3], D=[2, 4], V=[5, 6], A=A, S_j=[2, 3, 2, 2])


@pytest.fixture
def two_stage_params(two_stage_diagram):
    X = {
        1: np.array([0.6, 0.4]),
        3: np.array([
            [[0.9, 0.1], [0.5, 0.5], [0.2, 0.8]],
            [[0.7, 0.3], [0.4, 0.6], [0.1, 0.9]],
        ]),
    }
    Y = {
        5: np.array([[-1.0, 2.0], [0.5, -0.5]]),
        6: np.array([[1.0, 0.0], [0.0, 1.5]]),
    }
    return create_model_parameters(two_stage_diagram, X, Y)
