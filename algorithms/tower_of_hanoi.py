"""
tower_of_hanoi.py — Recursive Tower of Hanoi Trace
====================================================
Generator-based simulation of the classic three-peg recursion.  The
recursion runs ONCE, up front; every event is captured as a Step, and every
activation as a CallNode carrying the step window it is live for.

Yields a Step at:
  1. Initial setup             →  all disks on A
  2. Enter solve(n, …)         →  frame pushed onto the call stack
  3. Base case                 →  move disk, then return
  4. Recursive case            →  before 1st call, about to move disk n,
                                  disk n moved, before 2nd call, return
  5. Finished

For N disks this is 9·2^(N-1) - 4 steps, 2^N - 1 of which are disk moves.
"""

import logging
import time
from typing import Generator, List, NamedTuple, Optional, Tuple

from hanoi import RodState, SOURCE_PEG, AUX_PEG, DEST_PEG, validate_disk_count
from algorithms.step import Step, StepBuilder, Phase, Move
from algorithms.call_tree import CallNode, CallTree


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def solve(n, src, dst, aux):",            # 0
    "    if n == 1:",                          # 1
    "        move disk 1 from src to dst",     # 2
    "        return",                          # 3
    "    solve(n - 1, src, aux, dst)",         # 4
    "    move disk n from src to dst",         # 5
    "    solve(n - 1, aux, dst, src)",         # 6
    "    return",                              # 7
]

PSEUDOCODE_LINES = {
    Phase.ENTERING_CALL:          0,
    Phase.PROCESSING_MOVE_BASE:   2,
    Phase.RETURNING_BASE:         3,
    Phase.BEFORE_RECURSION_1:     4,
    Phase.PROCESSING_MOVE_N:      5,
    Phase.PROCESSING_MOVE_N_DONE: 5,
    Phase.BEFORE_RECURSION_2:     6,
    Phase.RETURNING_N:            7,
}


class Trace(NamedTuple):
    steps: Tuple[Step, ...]
    tree:  CallTree


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
class _Run:
    """Local simulation state shared by every frame of one generation pass."""

    def __init__(self, num_disks: int, tree: CallTree):
        self.rods    = RodState.initial(num_disks, SOURCE_PEG)
        self.sb      = StepBuilder(self.rods)
        self.tree    = tree
        self.next_id = 0

    def record(self, phase: Phase, description: str, node: Optional[CallNode] = None,
               move: Optional[Move] = None) -> Step:
        return self.sb.build(
            phase,
            description,
            node_id=node.id if node else None,
            move=move,
            pseudocode_line=PSEUDOCODE_LINES.get(phase, -1),
            depth=node.depth if node else 0,
        )

    def move(self, source: str, target: str) -> Move:
        disk = self.rods.move(source, target)
        return Move(disk=disk, source=source, target=target)


def tower_of_hanoi(
    num_disks: int,
    tree: Optional[CallTree] = None,
) -> Generator[Step, None, None]:
    """
    Yield every Step of solving `num_disks` disks from A to C via B.

    Call nodes are added to `tree` as they are entered, so the tree is only
    complete once the generator is exhausted.  Use generate() to get both
    halves atomically.
    """
    validate_disk_count(num_disks)
    run = _Run(num_disks, tree if tree is not None else CallTree())

    yield run.record(Phase.INITIAL_SETUP, f"Initial state with {num_disks} disks on Rod {SOURCE_PEG}.")
    if num_disks > 0:
        yield from _solve(run, num_disks, SOURCE_PEG, DEST_PEG, AUX_PEG, None)
    yield run.record(Phase.FINISHED, "Algorithm finished.")


def _solve(
    run: _Run,
    count: int,
    source: str,
    target: str,
    aux: str,
    parent: Optional[CallNode],
) -> Generator[Step, None, None]:
    run.next_id += 1
    node = run.tree.add(CallNode(
        id=f"node-{run.next_id}",
        parent_id=parent.id if parent else None,
        count=count,
        source=source,
        target=target,
        aux=aux,
        first_step_index=run.sb.step_number,
        depth=parent.depth + 1 if parent else 0,
    ))

    run.sb.call_stack.append(node.signature)
    yield run.record(Phase.ENTERING_CALL, f"CALL: {node.signature}", node)

    if count == 1:
        move = run.move(source, target)
        yield run.record(
            Phase.PROCESSING_MOVE_BASE,
            f"MOVE: Disk {move.disk} from Rod {source} to Rod {target}",
            node, move,
        )
        run.sb.call_stack.pop()
        # the return step is the first step at which the node counts as returned
        run.tree.close(node.id, run.sb.step_number)
        yield run.record(Phase.RETURNING_BASE, f"RETURN from {node.signature}", node)
        return

    yield run.record(
        Phase.BEFORE_RECURSION_1,
        f"Preparing for 1st recursive call from {node.label} "
        f"(move {count - 1} disks from {source} to {aux})",
        node,
    )
    yield from _solve(run, count - 1, source, aux, target, node)

    yield run.record(
        Phase.PROCESSING_MOVE_N,
        f"Returned from 1st call. Moving disk {count} from {source} to {target} for {node.label}",
        node,
    )
    move = run.move(source, target)
    yield run.record(
        Phase.PROCESSING_MOVE_N_DONE,
        f"MOVE: Disk {move.disk} from Rod {source} to Rod {target}",
        node, move,
    )

    yield run.record(
        Phase.BEFORE_RECURSION_2,
        f"Preparing for 2nd recursive call from {node.label} "
        f"(move {count - 1} disks from {aux} to {target})",
        node,
    )
    yield from _solve(run, count - 1, aux, target, source, node)

    run.sb.call_stack.pop()
    run.tree.close(node.id, run.sb.step_number)
    yield run.record(Phase.RETURNING_N, f"RETURN from {node.signature}", node)


# ---------------------------------------------------------------------------
# Whole-trace entry point
# ---------------------------------------------------------------------------
def generate(num_disks: int) -> Trace:
    """
    Run the simulation to completion and return (steps, tree).

    Either the full trace comes back or an exception propagates; a partly
    built trace is never returned.
    """
    validate_disk_count(num_disks)
    started = time.perf_counter()
    tree = CallTree()
    try:
        steps = tuple(tower_of_hanoi(num_disks, tree))
    except Exception:
        logger.exception("Trace generation failed for %d disks", num_disks)
        raise
    tree.seal()
    logger.info(
        "Generated trace for %d disks: %d steps, %d calls in %.2f ms",
        num_disks, len(steps), len(tree), (time.perf_counter() - started) * 1000,
    )
    return Trace(steps=steps, tree=tree)


def optimal_move_count(num_disks: int) -> int:
    return 2 ** num_disks - 1
