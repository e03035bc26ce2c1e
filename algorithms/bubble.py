"""
bubble.py — Bubble Sort
========================
Generator-based bubble sort.  Yields a Step at every meaningful event:
  1. Compare an adjacent pair  →  highlight both slots
  2. Exchange an out-of-order pair  →  highlight both slots again

Each pass shrinks the window by one: after pass i the last i
elements are already in their final place.
"""

from typing import List, Optional, Sequence

from algorithms.step import RunCounters, StepBuilder, StepGenerator


# ---------------------------------------------------------------------------
# Pseudocode — each string is one displayed line; index = pseudocode_line
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def bubble_sort(a):",                       # 0
    "    for i in 0 .. n-1:",                    # 1
    "        for j in 0 .. n-i-2:",              # 2
    "            compare a[j], a[j+1]",          # 3
    "            if a[j] > a[j+1]:",             # 4
    "                swap a[j], a[j+1]",         # 5
    "    return a",                              # 6
]


def bubble_sort(
    data: Sequence[float],
    counters: Optional[RunCounters] = None,
) -> StepGenerator:
    """
    Args:
        data     : Input sequence.  Never mutated.
        counters : Run-scoped counters to increment (fresh one if omitted).

    Yields:
        Step – one per comparison, one more per exchange.

    Returns:
        The final Step with the sorted elements.
    """
    counters = counters if counters is not None else RunCounters()
    sb = StepBuilder(counters)
    a  = list(data)
    n  = len(a)

    for i in range(n):
        for j in range(n - i - 1):
            counters.comparisons += 1
            yield sb.build(a, (j, j + 1), line=3)

            if a[j] > a[j + 1]:
                a[j], a[j + 1] = a[j + 1], a[j]
                counters.swaps += 1
                yield sb.build(a, (j, j + 1), line=5)

    return sb.final(a, line=6)
