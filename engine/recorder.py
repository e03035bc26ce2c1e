"""
recorder.py — Run Recorder & Analytics
========================================
Records a complete sorting run (all Steps) without any timing, then
computes the metrics the UI needs for the Analytics panel and
Comparison Mode.

Usage:
    rec = Recorder()
    rec.start(algo_key="merge", data=[5, 3, 9, 1])
    rec.run_to_completion()          # exhausts the producer
    metrics = rec.get_metrics()      # the analytics card
    rec.export()                     # serialisable snapshot for save/replay

Comparison Mode:
    The UI holds two Recorders (one per algo), runs both to completion
    on the SAME data, then calls compare(rec1, rec2) → ComparisonResult.
"""

import logging
import sys
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from algorithms import AlgoInfo, require_algorithm
from algorithms.step import RunCounters, Step, StepProducer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metrics dataclass — what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:        str   = ""
    algo_label:      str   = ""
    size:            int   = 0
    comparisons:     int   = 0
    swaps:           int   = 0
    writes:          int   = 0
    total_steps:     int   = 0          # intermediate Steps yielded (final record excluded)
    wall_time_ms:    float = 0.0        # wall-clock time to run to completion
    memory_bytes:    int   = 0          # approx size of the step buffer
    sorted_ok:       bool  = False      # final elements in non-decreasing order

    @property
    def moves(self) -> int:
        return self.swaps + self.writes


# ---------------------------------------------------------------------------
# ComparisonResult — side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived
    winner_comparisons: str = ""   # which algo compared less
    winner_moves:       str = ""   # fewer swaps + writes
    winner_steps:       str = ""   # shorter animation


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        steps   : Every intermediate Step from the run.
        final   : The final record (available after run_to_completion).
        metrics : Computed RunMetrics (available after run_to_completion).
    """

    def __init__(self):
        self.steps:   List[Step]           = []
        self.final:   Optional[Step]       = None
        self.metrics: Optional[RunMetrics] = None

        self._algo_info: Optional[AlgoInfo]     = None
        self._data:      List[float]            = []
        self._counters:  Optional[RunCounters]  = None
        self._producer:  Optional[StepProducer] = None

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, algo_key: str, data: Sequence[float]) -> None:
        """Bind a fresh producer for this run."""
        info = require_algorithm(algo_key)

        self._algo_info = info
        self._data      = list(data)
        self._counters  = RunCounters()
        self._producer  = StepProducer(info.fn(self._data, self._counters))
        self.steps      = []
        self.final      = None
        self.metrics    = None

    def run_to_completion(self) -> RunMetrics:
        """Exhaust the producer, record every step, compute metrics."""
        if self._producer is None:
            raise RuntimeError("Call start() first.")

        start = time.monotonic()
        self.steps, self.final = self._producer.drain()
        wall_ms = (time.monotonic() - start) * 1000

        self.metrics = self._compute_metrics(wall_ms)
        logger.info(
            "recorded %s: %d steps, %d comparisons",
            self.metrics.algo_key, self.metrics.total_steps, self.metrics.comparisons,
        )
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "algo_key": self._algo_info.key if self._algo_info else "",
            "input":    list(self._data),
            "metrics":  asdict(self.metrics) if self.metrics else {},
            "steps": [
                {
                    "step_number":     s.step_number,
                    "elements":        list(s.elements),
                    "highlighted":     list(s.highlighted),
                    "comparisons":     s.comparisons,
                    "swaps":           s.swaps,
                    "writes":          s.writes,
                    "pseudocode_line": s.pseudocode_line,
                }
                for s in self.steps
            ],
            "final": list(self.final.elements) if self.final else [],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info     = self._algo_info
        final    = self.final
        elements = list(final.elements) if final else []

        # approximate memory: sizeof the steps buffer
        mem = sys.getsizeof(self.steps)
        for s in self.steps:
            mem += sys.getsizeof(s) + sys.getsizeof(s.elements)

        return RunMetrics(
            algo_key=info.key if info else "",
            algo_label=info.label if info else "",
            size=len(self._data),
            comparisons=final.comparisons if final else 0,
            swaps=final.swaps if final else 0,
            writes=final.writes if final else 0,
            total_steps=len(self.steps),
            wall_time_ms=round(wall_ms, 2),
            memory_bytes=mem,
            sorted_ok=all(elements[i] <= elements[i + 1] for i in range(len(elements) - 1)),
        )


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    def winner(l_val, r_val, l_key, r_key, lower_is_better=True):
        if l_val == r_val:
            return "tie"
        if lower_is_better:
            return l_key if l_val < r_val else r_key
        return l_key if l_val > r_val else r_key

    return ComparisonResult(
        left=l,
        right=r,
        winner_comparisons=winner(l.comparisons, r.comparisons, l.algo_label, r.algo_label),
        winner_moves      =winner(l.moves, r.moves, l.algo_label, r.algo_label),
        winner_steps      =winner(l.total_steps, r.total_steps, l.algo_label, r.algo_label),
    )
