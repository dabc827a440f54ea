"""
algorithms/
-----------
Trace generation layer.

    from algorithms import generate, Trace, Step, Phase, CallTree

`generate(n)` runs the Tower of Hanoi recursion once and hands back the
flat list of Steps plus the recursion tree.  Everything downstream
(navigator, recorder, renderer) only ever reads those two.
"""

from algorithms.step           import Step, StepBuilder, Phase, Move, MOVE_PHASES, RETURN_PHASES
from algorithms.call_tree      import CallNode, CallTree, node_status
from algorithms.tower_of_hanoi import (
    tower_of_hanoi,
    generate,
    optimal_move_count,
    Trace,
    PSEUDOCODE,
)

__all__ = [
    "Step",
    "StepBuilder",
    "Phase",
    "Move",
    "MOVE_PHASES",
    "RETURN_PHASES",
    "CallNode",
    "CallTree",
    "node_status",
    "tower_of_hanoi",
    "generate",
    "optimal_move_count",
    "Trace",
    "PSEUDOCODE",
]
