"""
source.py — Random Sequence Generator
======================================
Supplies the numbers the visualizer sorts.

Values are integers drawn uniformly from [MIN_VALUE, MAX_VALUE] and then
shuffled, so duplicates are expected and small bars stay visible.
Pass a seed for reproducible data (tests, demos).
"""

import random
from typing import List, Optional

MIN_VALUE = 5
MAX_VALUE = 100


class DataSource:
    """
    Attributes:
        low, high : Inclusive value range.
        _rng      : Private Random instance; never touches the global one.
    """

    def __init__(self, seed: Optional[int] = None, low: int = MIN_VALUE, high: int = MAX_VALUE):
        self.low  = low
        self.high = high
        self._rng = random.Random(seed)

    def generate(self, n: int) -> List[int]:
        """Return `n` values (empty list for n <= 0)."""
        values = [self._rng.randint(self.low, self.high) for _ in range(max(0, n))]
        self._rng.shuffle(values)
        return values
