"""
recorder.py — Trace Recorder & Analytics
=========================================
Generates a complete trace, then computes the numbers the Analytics panel
shows and a serialisable export of the whole run.

Usage:
    rec = Recorder()
    rec.record(num_disks=4)          # runs the generator to completion
    metrics = rec.get_metrics()      # the analytics card
    rec.export()                     # JSON-ready snapshot for download

`load_trace()` is the cached entry point the navigator uses.  Generation is
deterministic, so one trace per disk count can be shared by every session.
The cache also keeps how long the first (real) generation took, so the
reported time never measures a cache hit.
"""

import sys
import time
from dataclasses import dataclass, asdict
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

from hanoi import RodState, DEST_PEG
from algorithms import generate, optimal_move_count, Trace


def _timed_generate(num_disks: int) -> Tuple[Trace, float]:
    started = time.perf_counter()
    trace = generate(num_disks)
    return trace, (time.perf_counter() - started) * 1000


@lru_cache(maxsize=32)
def _cached_trace(num_disks: int) -> Tuple[Trace, float]:
    return _timed_generate(num_disks)


def load_trace(num_disks: int) -> Trace:
    return _cached_trace(num_disks)[0]


# ---------------------------------------------------------------------------
# Metrics dataclass — what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class TraceMetrics:
    num_disks:      int   = 0
    total_steps:    int   = 0          # number of Steps in the trace
    move_count:     int   = 0          # disk moves actually recorded
    optimal_moves:  int   = 0          # 2^N - 1
    call_count:     int   = 0          # number of solve(...) activations
    max_depth:      int   = 0          # deepest recursion level (root = 0)
    wall_time_ms:   float = 0.0        # wall-clock time of the generating run
    memory_bytes:   int   = 0          # approx size of the step buffer
    solved:         bool  = False      # all disks on the destination peg


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        trace   : The recorded Trace (available after record()).
        metrics : Computed TraceMetrics (available after record()).
    """

    def __init__(self):
        self.trace:      Optional[Trace]        = None
        self.metrics:    Optional[TraceMetrics] = None
        self._num_disks: int                    = 0

    def record(self, num_disks: int, cached: bool = True) -> TraceMetrics:
        """Generate (or fetch) the trace for `num_disks` and compute metrics."""
        self.trace, wall_ms = _cached_trace(num_disks) if cached else _timed_generate(num_disks)

        self._num_disks = num_disks
        self.metrics = self._compute_metrics(wall_ms)
        return self.metrics

    def get_metrics(self) -> Optional[TraceMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        if self.trace is None:
            raise RuntimeError("Call record() first.")
        return {
            "num_disks": self._num_disks,
            "metrics":   asdict(self.metrics) if self.metrics else {},
            "steps":     [s.to_dict() for s in self.trace.steps],
            "tree":      self.trace.tree.to_list(),
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> TraceMetrics:
        steps, tree = self.trace
        last = steps[-1] if steps else None

        mem = sys.getsizeof(steps)
        for s in steps:
            mem += sys.getsizeof(s)

        solved = bool(last) and RodState.from_snapshot(last.rods).is_solved(DEST_PEG)

        return TraceMetrics(
            num_disks=self._num_disks,
            total_steps=len(steps),
            move_count=last.move_count if last else 0,
            optimal_moves=optimal_move_count(self._num_disks),
            call_count=len(tree),
            max_depth=tree.max_depth(),
            wall_time_ms=round(wall_ms, 3),
            memory_bytes=mem,
            solved=solved,
        )
