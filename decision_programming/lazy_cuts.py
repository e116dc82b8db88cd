#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Lazy cuts for the decision model.

Each cut is a single global constraint submitted at most once. A cut object
moves from PENDING to SUBMITTED on its first violated invocation and is a
no-op afterwards; the transition is guarded by a lock so callbacks delivered
from several solver threads still submit only once.

Callback data protocol (see GurobiCallbackData):
  - get_values(variables) -> list of current values
  - submit(constraint)    -> add the lazy constraint
"""
from __future__ import annotations

import threading
from typing import Callable, Dict, Iterable

from .parameters import NUM_PATHS_TOLERANCE
from .paths import Path

PENDING = "pending"
SUBMITTED = "submitted"


class LazyCut:
    """Base class: at-most-once submission of one global constraint."""

    name = "lazy_cut"

    def __init__(self, mdl, pi: Dict[Path, object], epsilon: float):
        self.mdl = mdl
        self.pi = pi
        self.epsilon = epsilon
        self._state = PENDING
        self._lock = threading.Lock()

    @property
    def state(self) -> str:
        return self._state

    @property
    def submitted(self) -> bool:
        return self._state == SUBMITTED

    def is_violated(self, values) -> bool:
        raise NotImplementedError

    def build_constraint(self):
        raise NotImplementedError

    def __call__(self, cb_data) -> bool:
        """Inspect the current solution and submit the cut if violated.

        Returns True only for the invocation that submitted the cut.
        """
        if self._state == SUBMITTED:
            return False
        values = cb_data.get_values(list(self.pi.values()))
        if not self.is_violated(values):
            return False
        with self._lock:
            if self._state == SUBMITTED:
                return False
            cb_data.submit(self.build_constraint())
            self._state = SUBMITTED
        return True

    def __repr__(self):
        return f"{type(self).__name__}(state={self._state})"


class ProbabilitySumCut(LazyCut):
    """Probability sum lazy cut: sum of path probabilities equals one."""

    name = "probability_sum_cut"

    def is_violated(self, values) -> bool:
        return abs(sum(values) - 1.0) > self.epsilon

    def build_constraint(self):
        return self.mdl.sum(self.pi.values()) == 1.0


class NumberOfPathsCut(LazyCut):
    """
    Number of paths lazy cut.

    A path is active when its probability is at least epsilon. Dividing each
    path probability by its upper bound turns the sum into a count, which is
    forced to ``num_paths``. Paths with a zero upper bound are fixed at zero
    and left out of the sum.
    """

    name = "number_of_paths_cut"

    def __init__(
        self,
        mdl,
        pi: Dict[Path, object],
        epsilon: float,
        probability: Callable[[Path], float],
        num_paths: int,
    ):
        super().__init__(mdl, pi, epsilon)
        self.probability = probability
        self.num_paths = num_paths

    def active_paths(self, values: Iterable[float]) -> int:
        return sum(1 for value in values if value >= self.epsilon)

    def is_violated(self, values) -> bool:
        return abs(self.active_paths(values) - self.num_paths) > NUM_PATHS_TOLERANCE

    def build_constraint(self):
        terms = []
        for s, var in self.pi.items():
            p = self.probability(s)
            if p > 0:
                terms.append(var * (1.0 / p))
        return self.mdl.sum(terms) == self.num_paths


__all__ = [
    "PENDING",
    "SUBMITTED",
    "LazyCut",
    "ProbabilitySumCut",
    "NumberOfPathsCut",
]
