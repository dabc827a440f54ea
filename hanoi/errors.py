"""
errors.py — Exception Types
============================
Two families of failure exist in the simulator:

  • InvalidDiskCountError – bad configuration, raised BEFORE a trace is
                            generated.  Callers may catch and report it.
  • TraceInvariantError   – the recursion bookkeeping went wrong
                            (empty peg, illegal stacking, unknown node id).
                            This is a programming error and aborts the
                            whole generation pass.
"""


class HanoiError(Exception):
    """Base class for everything raised by this package."""


class InvalidDiskCountError(HanoiError, ValueError):
    pass


class TraceInvariantError(HanoiError, RuntimeError):
    pass


class EmptyPegError(TraceInvariantError):
    def __init__(self, peg: str):
        super().__init__(f"Cannot pop from empty peg '{peg}'")
        self.peg = peg


class IllegalMoveError(TraceInvariantError):
    def __init__(self, disk: int, peg: str, top: int):
        super().__init__(f"Cannot place disk {disk} on top of disk {top} (peg '{peg}')")
        self.disk = disk
        self.peg = peg
        self.top = top
