"""
hanoi/
------
Core data layer.  Public API:

    from hanoi import RodState, PEGS, SOURCE_PEG, AUX_PEG, DEST_PEG
    from hanoi import validate_disk_count, MAX_TRACE_DISKS
    from hanoi import InvalidDiskCountError, TraceInvariantError
"""

from hanoi.rods   import (
    RodState,
    PEGS, SOURCE_PEG, AUX_PEG, DEST_PEG,
    MAX_TRACE_DISKS,
    validate_disk_count,
)
from hanoi.errors import (
    HanoiError,
    InvalidDiskCountError,
    TraceInvariantError,
    EmptyPegError,
    IllegalMoveError,
)

__all__ = [
    "RodState",
    "PEGS", "SOURCE_PEG", "AUX_PEG", "DEST_PEG",
    "MAX_TRACE_DISKS",
    "validate_disk_count",
    "HanoiError",
    "InvalidDiskCountError",
    "TraceInvariantError",
    "EmptyPegError",
    "IllegalMoveError",
]
