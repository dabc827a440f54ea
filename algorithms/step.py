"""
step.py — Algorithm Step Snapshot
==================================
The trace generator yields Step objects.  A Step is a frozen-in-time
picture of everything the visualizer needs to render one frame:

    • Where every disk sits on the three rods
    • The call stack of `solve(...)` frames currently open
    • Which recursion-tree node is active, and in which Phase
    • The disk move just performed (if any)
    • Which line of pseudocode is executing right now
    • A plain-English description of what just happened

Design decisions:
  - Step is a frozen dataclass.  It is a SNAPSHOT.  The generator is the
    only writer; the navigator / renderer are pure readers.
  - `rods` and `call_stack` are COPIES taken by StepBuilder.build().  The
    generator mutates its live rods in place, and a later move must never
    reach back into an earlier Step.
  - Phase values are the strings the front-end keys its colours on.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


# ---------------------------------------------------------------------------
# Phase — what kind of event a Step records
# ---------------------------------------------------------------------------
class Phase(Enum):
    NOT_STARTED            = "initial"                  # pseudo-step before the trace
    INITIAL_SETUP          = "initial_setup"
    ENTERING_CALL          = "entering_call"
    BEFORE_RECURSION_1     = "before_recursion_1"
    PROCESSING_MOVE_BASE   = "processing_move_base"     # count == 1, disk moved
    PROCESSING_MOVE_N      = "processing_move_N"        # about to move the big disk
    PROCESSING_MOVE_N_DONE = "processing_move_N_done"   # big disk moved
    BEFORE_RECURSION_2     = "before_recursion_2"
    RETURNING_BASE         = "returning_base"
    RETURNING_N            = "returning_N"
    FINISHED               = "finished"

    @property
    def is_move(self) -> bool:
        return self in MOVE_PHASES

    @property
    def is_return(self) -> bool:
        return self in RETURN_PHASES


MOVE_PHASES   = frozenset({Phase.PROCESSING_MOVE_BASE, Phase.PROCESSING_MOVE_N_DONE})
RETURN_PHASES = frozenset({Phase.RETURNING_BASE, Phase.RETURNING_N})


# ---------------------------------------------------------------------------
# Move
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Move:
    disk:   int
    source: str
    target: str

    def to_dict(self) -> dict:
        return {"disk": self.disk, "from": self.source, "to": self.target}


# ---------------------------------------------------------------------------
# Step
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Step:
    """
    Attributes:
        step_number     : 0-based index of this step in the trace (-1 for the
                          "not started" pseudo-step).
        phase           : Phase of the event.
        rods            : {peg: (disk, …)} bottom → top, an independent copy.
        call_stack      : Call signatures, outermost first.
        description     : Human-readable "what happened" text.
        move            : The disk relocation this step performed, if any.
        is_call         : True on `entering_call` steps.
        is_return       : True on `returning_*` steps.
        node_id         : Call-tree node the step belongs to (None for bookends).
        pseudocode_line : 0-based index of the pseudocode line, -1 for none.
        move_count      : Disk moves made up to and including this step.
        depth           : Recursion depth of the active call (0 for bookends).
    """

    step_number:      int                         = 0
    phase:            Phase                       = Phase.INITIAL_SETUP
    rods:             Dict[str, Tuple[int, ...]]  = field(default_factory=dict)
    call_stack:       Tuple[str, ...]             = ()
    description:      str                         = ""
    move:             Optional[Move]              = None
    is_call:          bool                        = False
    is_return:        bool                        = False
    node_id:          Optional[str]               = None
    pseudocode_line:  int                         = -1
    move_count:       int                         = 0
    depth:            int                         = 0

    @property
    def is_move(self) -> bool:
        return self.phase.is_move

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_number":     self.step_number,
            "phase":           self.phase.value,
            "rods":            {peg: list(disks) for peg, disks in self.rods.items()},
            "call_stack":      list(self.call_stack),
            "description":     self.description,
            "move":            self.move.to_dict() if self.move else None,
            "is_call":         self.is_call,
            "is_return":       self.is_return,
            "node_id":         self.node_id,
            "pseudocode_line": self.pseudocode_line,
            "move_count":      self.move_count,
            "depth":           self.depth,
        }


# ---------------------------------------------------------------------------
# Convenience builder so the generator doesn't have to spell out every kwarg
# ---------------------------------------------------------------------------
class StepBuilder:
    """
    Mutable scratch-pad the generator records Steps through.

    It keeps a reference to the LIVE rod state and call stack, and copies
    both at build() time:
        sb = StepBuilder(rods)
        sb.call_stack.append("solve(1, 'A', 'C', 'B')")
        yield sb.build(Phase.ENTERING_CALL, "CALL: …", node_id="node-1")
    """

    def __init__(self, rods):
        self.rods                    = rods
        self.call_stack: List[str]   = []
        self.step_number: int        = 0
        self.move_count: int         = 0

    def build(
        self,
        phase: Phase,
        description: str,
        node_id: Optional[str] = None,
        move: Optional[Move] = None,
        pseudocode_line: int = -1,
        depth: int = 0,
    ) -> Step:
        if phase.is_move:
            self.move_count += 1
        step = Step(
            step_number=self.step_number,
            phase=phase,
            rods=self.rods.snapshot(),
            call_stack=tuple(self.call_stack),
            description=description,
            move=move,
            is_call=phase is Phase.ENTERING_CALL,
            is_return=phase.is_return,
            node_id=node_id,
            pseudocode_line=pseudocode_line,
            move_count=self.move_count,
            depth=depth,
        )
        self.step_number += 1
        return step
