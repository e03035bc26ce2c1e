"""
step.py — Sorting Step Snapshot
================================
Every sorting algorithm is a generator that yields Step objects and
*returns* one final Step (delivered through StopIteration.value).
A Step is a frozen-in-time picture of everything the visualizer
needs to render one frame:

    • The full array contents at this instant
    • Which indices are being compared / written right now
    • Running tallies: comparisons, swaps, writes
    • Which line of pseudocode is executing right now

Design decisions:
  - Step is a frozen dataclass holding tuples.  It is a SNAPSHOT:
    the generator's working list is never aliased, so consumers may
    keep old steps around.
  - Counters live in a RunCounters object owned by one run.  The
    generator increments it; StepBuilder copies its values into
    every Step it builds.
  - StepProducer turns a generator into an explicit pull() API so the
    controller never has to catch StopIteration itself.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generator, List, Optional, Sequence, Tuple


# ---------------------------------------------------------------------------
# Counters — one instance per run
# ---------------------------------------------------------------------------
@dataclass
class RunCounters:
    comparisons: int = 0
    swaps:       int = 0
    writes:      int = 0

    def reset(self) -> None:
        self.comparisons = 0
        self.swaps       = 0
        self.writes      = 0

    def copy(self) -> "RunCounters":
        return RunCounters(self.comparisons, self.swaps, self.writes)

    def as_dict(self) -> dict:
        return {
            "comparisons": self.comparisons,
            "swaps":       self.swaps,
            "writes":      self.writes,
        }


@dataclass(frozen=True)
class Step:
    """
    Attributes:
        elements        : Snapshot of the working array.
        highlighted     : Indices under comparison / write (empty on the final step).
        comparisons     : Cumulative comparisons so far in this run.
        swaps           : Cumulative exchanges / shifts so far.
        writes          : Cumulative writes into the array (merge sort).
        step_number     : 0-based index of this step in the run.
        pseudocode_line : 0-based index of the pseudocode line executing now.
        is_final        : True only on the record returned at exhaustion.
    """

    elements:         Tuple[float, ...]   = ()
    highlighted:      Tuple[int, ...]     = ()
    comparisons:      int                 = 0
    swaps:            int                 = 0
    writes:           int                 = 0
    step_number:      int                 = 0
    pseudocode_line:  int                 = 0
    is_final:         bool                = False

    def counters(self) -> RunCounters:
        return RunCounters(self.comparisons, self.swaps, self.writes)


# Type of every algorithm generator: yields Steps, returns the final Step.
StepGenerator = Generator[Step, None, Step]


# ---------------------------------------------------------------------------
# Convenience builder so algorithms don't have to spell out every kwarg
# ---------------------------------------------------------------------------
class StepBuilder:
    """
    Numbers steps and stamps the run's counters onto them.

    Usage inside an algorithm generator:
        sb = StepBuilder(counters)
        counters.comparisons += 1
        yield sb.build(a, (j, j + 1), line=3)
        ...
        return sb.final(a)
    """

    def __init__(self, counters: RunCounters):
        self.counters = counters
        self.step_no  = 0

    def build(self, elements: Sequence[float], highlighted: Sequence[int], line: int = 0) -> Step:
        step = Step(
            elements=tuple(elements),
            highlighted=tuple(highlighted),
            comparisons=self.counters.comparisons,
            swaps=self.counters.swaps,
            writes=self.counters.writes,
            step_number=self.step_no,
            pseudocode_line=line,
        )
        self.step_no += 1
        return step

    def final(self, elements: Sequence[float], line: int = 0) -> Step:
        return Step(
            elements=tuple(elements),
            highlighted=(),
            comparisons=self.counters.comparisons,
            swaps=self.counters.swaps,
            writes=self.counters.writes,
            step_number=self.step_no,
            pseudocode_line=line,
            is_final=True,
        )


# ---------------------------------------------------------------------------
# Pull-based producer
# ---------------------------------------------------------------------------
class PullKind(Enum):
    STEP      = "step"        # an intermediate step, more may follow
    FINAL     = "final"       # the final record, handed out exactly once
    EXHAUSTED = "exhausted"   # nothing left, forever


@dataclass(frozen=True)
class Pull:
    kind:   PullKind
    record: Optional[Step] = None


class StepProducer:
    """Wraps one algorithm generator behind a pull() call."""

    def __init__(self, generator: StepGenerator):
        self._generator: Optional[StepGenerator] = generator

    def pull(self) -> Pull:
        if self._generator is None:
            return Pull(PullKind.EXHAUSTED)
        try:
            return Pull(PullKind.STEP, next(self._generator))
        except StopIteration as stop:
            self._generator = None
            return Pull(PullKind.FINAL, stop.value)

    @property
    def exhausted(self) -> bool:
        return self._generator is None

    def drain(self) -> Tuple[List[Step], Step]:
        """Pull everything left.  Returns (intermediate steps, final record)."""
        steps: List[Step] = []
        while True:
            result = self.pull()
            if result.kind is PullKind.STEP:
                steps.append(result.record)
            elif result.kind is PullKind.FINAL:
                return steps, result.record
            else:
                raise RuntimeError("StepProducer already exhausted.")
