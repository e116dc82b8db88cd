"""
Lazy enumeration of state paths.

A path assigns a 1-based state to every node of a state-count vector. The
number of paths is the product of the state counts, so paths are produced on
demand and never stored.
"""
from __future__ import annotations

import itertools
import math
from typing import Iterable, Iterator, Sequence, Tuple

Path = Tuple[int, ...]


class Paths:
    """
    Restartable iterable over the Cartesian product of state ranges.

    Each call to ``iter()`` starts a fresh, independent enumeration, so the
    same object can be iterated many times or nested inside another loop.
    The last node varies fastest.
    """

    def __init__(self, num_states: Iterable[int]):
        self.num_states: Tuple[int, ...] = tuple(int(s) for s in num_states)

    def __iter__(self) -> Iterator[Path]:
        return itertools.product(*(range(1, s + 1) for s in self.num_states))

    def __len__(self) -> int:
        return math.prod(self.num_states)

    def __repr__(self):
        return f"Paths({list(self.num_states)})"


def paths(num_states: Sequence[int]) -> Paths:
    """Iterate over paths. An empty state vector yields a single empty path."""
    return Paths(num_states)


def restrict(path: Path, nodes: Sequence[int]) -> Path:
    """States of ``path`` at the given (1-based) nodes."""
    return tuple(path[i - 1] for i in nodes)


def to_index(states: Sequence[int]) -> Tuple[int, ...]:
    """Convert 1-based states to a 0-based numpy index."""
    return tuple(s - 1 for s in states)


__all__ = ["Path", "Paths", "paths", "restrict", "to_index"]
