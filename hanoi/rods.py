"""
rods.py — Three-Peg Rod State
==============================
The live, mutable stack model the trace generator plays the algorithm on.

Responsibilities:
  1. Build the starting tower                (all disks on the source peg)
  2. Pop / push / move with legality checks  (empty peg, larger-on-smaller)
  3. Snapshot for Steps                      (independent tuples, never shared)
  4. Validity queries                        (is_valid, is_solved)

Design decisions:
  - Pegs are the plain strings "A", "B", "C" so they double as dict keys
    and serialise to JSON as-is.
  - Each peg is a list ordered bottom → top; the top disk is `[-1]`.
  - `snapshot()` returns a NEW dict of tuples every call.  The generator
    keeps mutating the live lists, so a Step must never hold them.
"""

from typing import Dict, List, Optional, Tuple

from hanoi.errors import EmptyPegError, IllegalMoveError, InvalidDiskCountError


PEGS: Tuple[str, str, str] = ("A", "B", "C")

# canonical assignment for the top-level call
SOURCE_PEG = "A"
AUX_PEG    = "B"
DEST_PEG   = "C"

# the trace holds 9·2^(N-1) - 4 steps; 16 disks is already ~295k steps
MAX_TRACE_DISKS = 16


def validate_disk_count(num_disks: int, max_disks: int = MAX_TRACE_DISKS) -> int:
    """Return `num_disks` unchanged, or raise InvalidDiskCountError."""
    if isinstance(num_disks, bool) or not isinstance(num_disks, int):
        raise InvalidDiskCountError(f"Disk count must be an integer, got {num_disks!r}")
    if num_disks < 0:
        raise InvalidDiskCountError(f"Disk count must be >= 0, got {num_disks}")
    if num_disks > max_disks:
        raise InvalidDiskCountError(
            f"Disk count {num_disks} exceeds the supported maximum of {max_disks}"
        )
    return num_disks


class RodState:
    """
    Attributes:
        rods      : {peg: [disk, …]}  bottom → top.
        num_disks : Total disks in play (constant for the lifetime of the state).
    """

    __slots__ = ("rods", "num_disks")

    def __init__(self, num_disks: int = 0):
        self.num_disks: int = num_disks
        self.rods: Dict[str, List[int]] = {peg: [] for peg in PEGS}

    @classmethod
    def initial(cls, num_disks: int, peg: str = SOURCE_PEG) -> "RodState":
        """All disks stacked on `peg`, largest at the bottom."""
        state = cls(num_disks)
        state.rods[peg].extend(range(num_disks, 0, -1))
        return state

    @classmethod
    def from_snapshot(cls, snapshot: Dict[str, Tuple[int, ...]]) -> "RodState":
        state = cls(sum(len(disks) for disks in snapshot.values()))
        for peg in PEGS:
            state.rods[peg].extend(snapshot.get(peg, ()))
        return state

    # ------------------------------------------------------------------
    # Stack operations
    # ------------------------------------------------------------------
    def top(self, peg: str) -> Optional[int]:
        disks = self.rods[peg]
        return disks[-1] if disks else None

    def pop(self, peg: str) -> int:
        disks = self.rods[peg]
        if not disks:
            raise EmptyPegError(peg)
        return disks.pop()

    def push(self, peg: str, disk: int) -> None:
        top = self.top(peg)
        if top is not None and top < disk:
            raise IllegalMoveError(disk, peg, top)
        self.rods[peg].append(disk)

    def move(self, source: str, target: str) -> int:
        """Move the top disk of `source` onto `target`; returns the disk moved."""
        disk = self.pop(source)
        try:
            self.push(target, disk)
        except IllegalMoveError:
            self.rods[source].append(disk)
            raise
        return disk

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def snapshot(self) -> Dict[str, Tuple[int, ...]]:
        return {peg: tuple(self.rods[peg]) for peg in PEGS}

    def is_valid(self) -> bool:
        """Every peg strictly decreasing bottom → top, disks exactly {1..N}."""
        seen: List[int] = []
        for peg in PEGS:
            disks = self.rods[peg]
            if any(lower <= upper for lower, upper in zip(disks, disks[1:])):
                return False
            seen.extend(disks)
        return sorted(seen) == list(range(1, self.num_disks + 1))

    def is_solved(self, peg: str = DEST_PEG) -> bool:
        return self.rods[peg] == list(range(self.num_disks, 0, -1))

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        pegs = ", ".join(f"{peg}={self.rods[peg]}" for peg in PEGS)
        return f"RodState({pegs})"

    def __eq__(self, other) -> bool:
        return isinstance(other, RodState) and self.rods == other.rods
