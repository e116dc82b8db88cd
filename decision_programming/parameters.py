"""
Parameters and tolerances for the decision model.

This module centralizes all configurable values:
- Numerical tolerances (probability sums, lazy cut triggers)
- Model specs (which lazy cuts to register)
- Gurobi solver settings
- Random instance generator defaults
"""
from __future__ import annotations

import numbers
from typing import Dict, Iterable, Optional

# ============================================================================
# Numerical Tolerances
# ============================================================================

# Absolute tolerance for "probabilities over a node's states sum to one"
PROBABILITY_TOLERANCE = 1e-8

# Active path counts are integers, so any difference above this is a violation
NUM_PATHS_TOLERANCE = 0.9

# Threshold for reading a solved binary as "chosen"
BINARY_THRESHOLD = 0.5

# Slack on the alpha level when locating VaR in a cumulative distribution
RISK_LEVEL_TOLERANCE = 1e-12


# ============================================================================
# Solver Configuration
# ============================================================================

# Default time limit (seconds)
DEFAULT_TIME_LIMIT = 3600

# Default MIP gap tolerance (relative)
DEFAULT_MIP_GAP = 1e-4

# Number of threads (0 = use all available)
SOLVER_THREADS = 0

# Gurobi log output (1 = on)
OUTPUT_FLAG = 1


# ============================================================================
# Random Instance Defaults
# ============================================================================

RANDOM_SEED = 0
RANDOM_STATE_CHOICES = [2, 3]
RANDOM_UTILITY_LOW = -1.0
RANDOM_UTILITY_HIGH = 1.0


# ============================================================================
# Model Specs
# ============================================================================

class Specs:
    """
    Toggles for optional parts of the decision model.

    Parameters
    ----------
    probability_sum_cut : bool
        Register the lazy cut forcing the path probabilities to sum to one.
    num_paths : int
        If larger than zero, register the lazy cut forcing the number of
        active paths to equal this value.
    """

    def __init__(self, probability_sum_cut: bool = False, num_paths: int = 0):
        if not isinstance(probability_sum_cut, bool):
            raise ValueError("probability_sum_cut should be a bool.")
        if isinstance(num_paths, bool) or not isinstance(num_paths, numbers.Integral):
            raise ValueError("num_paths should be an integer.")
        if num_paths < 0:
            raise ValueError("num_paths should be >= 0.")
        self._probability_sum_cut = probability_sum_cut
        self._num_paths = int(num_paths)

    @property
    def probability_sum_cut(self) -> bool:
        return self._probability_sum_cut

    @property
    def num_paths(self) -> int:
        return self._num_paths

    def __eq__(self, other):
        if not isinstance(other, Specs):
            return NotImplemented
        return (self.probability_sum_cut, self.num_paths) == (other.probability_sum_cut, other.num_paths)

    def __repr__(self):
        return f"Specs(probability_sum_cut={self.probability_sum_cut}, num_paths={self.num_paths})"


# ============================================================================
# Helper Functions
# ============================================================================

def get_solver_params(
    time_limit: Optional[float] = None,
    mip_gap: Optional[float] = None,
    threads: Optional[int] = None,
    output_flag: Optional[int] = None,
) -> Dict:
    """Return a mutable dict of Gurobi settings.

    Override any argument to quickly experiment with different settings.
    """
    return {
        "time_limit": float(time_limit) if time_limit is not None else DEFAULT_TIME_LIMIT,
        "mip_gap": float(mip_gap) if mip_gap is not None else DEFAULT_MIP_GAP,
        "threads": int(threads) if threads is not None else SOLVER_THREADS,
        "output_flag": int(output_flag) if output_flag is not None else OUTPUT_FLAG,
    }


def get_random_params(
    seed: Optional[int] = None,
    state_choices: Iterable[int] | None = None,
    low: Optional[float] = None,
    high: Optional[float] = None,
) -> Dict:
    """
    Return random instance generator settings.

    Returns
    -------
    dict
        Contains keys: 'seed', 'state_choices', 'low', 'high'
    """
    return {
        "seed": int(seed) if seed is not None else RANDOM_SEED,
        "state_choices": list(state_choices) if state_choices is not None else list(RANDOM_STATE_CHOICES),
        "low": float(low) if low is not None else RANDOM_UTILITY_LOW,
        "high": float(high) if high is not None else RANDOM_UTILITY_HIGH,
    }


__all__ = [
    "Specs",
    "get_solver_params",
    "get_random_params",
    "PROBABILITY_TOLERANCE",
    "NUM_PATHS_TOLERANCE",
    "BINARY_THRESHOLD",
    "RISK_LEVEL_TOLERANCE",
    "DEFAULT_TIME_LIMIT",
    "DEFAULT_MIP_GAP",
    "SOLVER_THREADS",
    "OUTPUT_FLAG",
]
