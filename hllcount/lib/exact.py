from __future__ import annotations
from typing import Any, Iterable, Set
from hllcount.lib.abstractsketch import AbstractSketch

class ExactCounter(AbstractSketch):
    """Exact distinct counter backed by a set.

    Memory grows with the number of distinct values; used as ground truth
    when checking HyperLogLog estimates.
    """

    def __init__(self):
        """Initialize exact counter."""
        super().__init__()
        self.elements: Set[Any] = set()

    def add(self, value: Any) -> None:
        """Add a value to the counter."""
        self.elements.add(value)

    def add_batch(self, values: Iterable[Any]) -> None:
        """Add multiple values to the counter.

        Args:
            values: Iterable of values to add to the counter
        """
        self.elements.update(values)

    def count(self) -> int:
        """Return exact cardinality."""
        return len(self.elements)

    def merge(self, other: 'ExactCounter') -> 'ExactCounter':
        """Merge another counter into this one."""
        if not isinstance(other, ExactCounter):
            raise TypeError("Can only merge with another ExactCounter")
        self.elements.update(other.elements)
        return self

    def relative_error(self, estimate: float) -> float:
        """Relative error of an estimate against the exact count.

        Args:
            estimate: Estimated cardinality

        Returns:
            |actual - estimate| / actual, or 0.0 when both are zero
        """
        actual = self.count()
        if actual == 0:
            return 0.0 if estimate == 0 else float('inf')
        return abs(actual - estimate) / actual
