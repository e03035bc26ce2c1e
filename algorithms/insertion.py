"""
insertion.py — Insertion Sort
==============================
The key at position i walks left one exchange at a time while its
predecessor is strictly greater.  Every predecessor check counts as a
comparison, including the one that stops the walk.

Steps:
  • one per shift, highlighting the two exchanged slots
  • one per outer iteration, highlighting where the key settled
"""

from typing import List, Optional, Sequence

from algorithms.step import RunCounters, StepBuilder, StepGenerator


PSEUDOCODE: List[str] = [
    "def insertion_sort(a):",                    # 0
    "    for i in 1 .. n-1:",                    # 1
    "        key ← a[i];  j ← i - 1",            # 2
    "        while j >= 0 and a[j] > key:",      # 3
    "            shift a[j] right",              # 4
    "            j ← j - 1",                     # 5
    "        a[j+1] ← key",                      # 6
    "    return a",                              # 7
]


def insertion_sort(
    data: Sequence[float],
    counters: Optional[RunCounters] = None,
) -> StepGenerator:
    counters = counters if counters is not None else RunCounters()
    sb = StepBuilder(counters)
    a  = list(data)

    for i in range(1, len(a)):
        key = a[i]
        j   = i - 1
        while j >= 0:
            counters.comparisons += 1
            if a[j] <= key:
                break
            # the key travels with the shift, so the snapshot stays a permutation
            a[j], a[j + 1] = a[j + 1], a[j]
            counters.swaps += 1
            yield sb.build(a, (j, j + 1), line=4)
            j -= 1
        yield sb.build(a, (j + 1,), line=6)

    return sb.final(a, line=7)
