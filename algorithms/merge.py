"""
merge.py — Merge Sort
======================
Top-down merge sort over half-open ranges [lo, hi) of a working copy.
The recursion is expressed with nested generators (`yield from`), so
every write inside any level of the recursion surfaces as one Step.

Merging compares the fronts of two temporary copies and writes the
smaller one (ties favour the left copy, which keeps the sort stable)
into the next output slot.  Swaps are never counted here.

While a merge is in progress the slots after the output cursor hold
the not-yet-merged elements (left remainder, then right remainder), so
every snapshot is still a permutation of the input.
"""

from typing import Generator, List, Optional, Sequence

from algorithms.step import RunCounters, Step, StepBuilder, StepGenerator


PSEUDOCODE: List[str] = [
    "def merge_sort(a, lo, hi):",                    # 0
    "    if hi - lo <= 1: return",                   # 1
    "    mid ← (lo + hi) // 2",                      # 2
    "    merge_sort(a, lo, mid); merge_sort(a, mid, hi)",  # 3
    "    left ← a[lo:mid];  right ← a[mid:hi]",      # 4
    "    while left and right:",                     # 5
    "        a[k++] ← min(left[0], right[0])",       # 6
    "    a[k..] ← rest of left / right",             # 7
]


def merge_sort(
    data: Sequence[float],
    counters: Optional[RunCounters] = None,
) -> StepGenerator:
    counters = counters if counters is not None else RunCounters()
    sb = StepBuilder(counters)
    a  = list(data)

    yield from _sort_range(a, 0, len(a), counters, sb)
    return sb.final(a, line=0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _sort_range(
    a: List[float],
    lo: int,
    hi: int,
    counters: RunCounters,
    sb: StepBuilder,
) -> Generator[Step, None, None]:
    if hi - lo <= 1:
        return

    mid = (lo + hi) // 2
    yield from _sort_range(a, lo, mid, counters, sb)
    yield from _sort_range(a, mid, hi, counters, sb)

    left  = a[lo:mid]
    right = a[mid:hi]
    i = j = 0
    k = lo

    while i < len(left) and j < len(right):
        counters.comparisons += 1
        if left[i] <= right[j]:
            value = left[i]
            i += 1
        else:
            value = right[j]
            j += 1
        yield _write(a, k, hi, value, left[i:] + right[j:], counters, sb, line=6)
        k += 1

    # drain whichever copy still has elements
    while i < len(left):
        value = left[i]
        i += 1
        yield _write(a, k, hi, value, left[i:], counters, sb, line=7)
        k += 1
    while j < len(right):
        value = right[j]
        j += 1
        yield _write(a, k, hi, value, right[j:], counters, sb, line=7)
        k += 1


def _write(
    a: List[float],
    k: int,
    hi: int,
    value: float,
    pending: List[float],
    counters: RunCounters,
    sb: StepBuilder,
    line: int,
) -> Step:
    a[k] = value
    a[k + 1:hi] = pending
    counters.writes += 1
    return sb.build(a, (k,), line=line)
