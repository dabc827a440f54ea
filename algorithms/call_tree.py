"""
call_tree.py — Recursion Tree
==============================
One CallNode per activation of `solve(...)`, each annotated with the
step-index window during which it is on the stack.  The renderer never
replays the recursion: to draw the tree at cursor `i` it only compares `i`
against each node's window.

Design decisions:
  - Nodes live in an ordered list (creation order == pre-order) plus a
    dict keyed by id for O(1) lookup.  Children are referenced by id, never
    by object, so a node can be rendered on its own.
  - A failed lookup of an id the generator itself handed out is a bug, so
    `get()` raises TraceInvariantError instead of returning None.
  - Nodes are frozen.  The tree swaps in an updated copy when a child is
    linked or a call returns, and refuses both once sealed, so a cached
    trace can be shared by every session.
"""

from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Optional, Tuple

from hanoi.errors import TraceInvariantError
from algorithms.step import Phase


# ---------------------------------------------------------------------------
# Node status — maps 1-to-1 with the tree palette in ui.canvas
# ---------------------------------------------------------------------------
HIDDEN         = "hidden"          # not called yet at this cursor
LIVE           = "live"            # on the stack, not the active frame
ENTERING       = "entering"        # active, just called
RECURSING      = "recursing"       # active, about to recurse
PREPARING_MOVE = "preparing_move"  # active, about to move its big disk
MOVING         = "moving"          # active, a disk just moved
RETURNING      = "returning"       # active, returning now
RETURNED       = "returned"        # completed

_ACTIVE_STATUS = {
    Phase.ENTERING_CALL:          ENTERING,
    Phase.BEFORE_RECURSION_1:     RECURSING,
    Phase.BEFORE_RECURSION_2:     RECURSING,
    Phase.PROCESSING_MOVE_N:      PREPARING_MOVE,
    Phase.PROCESSING_MOVE_BASE:   MOVING,
    Phase.PROCESSING_MOVE_N_DONE: MOVING,
    Phase.RETURNING_BASE:         RETURNING,
    Phase.RETURNING_N:            RETURNING,
}


@dataclass(frozen=True)
class CallNode:
    """
    Attributes:
        id               : "node-<k>", k counting calls in execution order.
        parent_id        : Id of the calling frame (None for the root).
        count            : Disks this call moves.
        source / target / aux : Peg roles for this call.
        children_ids     : Ids of recursive calls, in spawn order.
        first_step_index : Index of this call's `entering_call` step.
        last_step_index  : Index of its `returning_*` step (None until it returns).
        depth            : 0 for the root.
    """

    id:               str
    parent_id:        Optional[str]
    count:            int
    source:           str
    target:           str
    aux:              str
    first_step_index: int
    last_step_index:  Optional[int]   = None
    depth:            int             = 0
    children_ids:     Tuple[str, ...] = ()

    @property
    def label(self) -> str:
        return f"H({self.count}, {self.source}, {self.target}, {self.aux})"

    @property
    def signature(self) -> str:
        return f"solve({self.count}, '{self.source}', '{self.target}', '{self.aux}')"

    @property
    def is_leaf(self) -> bool:
        return not self.children_ids

    def is_visible(self, cursor: int) -> bool:
        return 0 <= self.first_step_index <= cursor

    def has_returned(self, cursor: int) -> bool:
        return self.last_step_index is not None and cursor >= self.last_step_index

    def to_dict(self) -> dict:
        return {
            "id":               self.id,
            "parent_id":        self.parent_id,
            "label":            self.label,
            "count":            self.count,
            "from":             self.source,
            "to":               self.target,
            "aux":              self.aux,
            "children_ids":     list(self.children_ids),
            "first_step_index": self.first_step_index,
            "last_step_index":  self.last_step_index,
            "depth":            self.depth,
        }


class CallTree:
    """Forest of CallNodes.  For Tower of Hanoi there is at most one root."""

    def __init__(self):
        self._nodes:  List[CallNode]      = []
        self._by_id:  Dict[str, CallNode] = {}
        self._index:  Dict[str, int]      = {}
        self._sealed: bool                = False

    # ------------------------------------------------------------------
    # Construction (generator only)
    # ------------------------------------------------------------------
    def add(self, node: CallNode) -> CallNode:
        self._check_open()
        if node.id in self._by_id:
            raise TraceInvariantError(f"Duplicate call node id '{node.id}'")
        if node.parent_id is not None:
            parent = self.get(node.parent_id)
            self._swap(replace(parent, children_ids=parent.children_ids + (node.id,)))
        self._index[node.id] = len(self._nodes)
        self._nodes.append(node)
        self._by_id[node.id] = node
        return node

    def close(self, node_id: str, last_step_index: int) -> CallNode:
        """Record the index of the step on which `node_id` returns."""
        self._check_open()
        return self._swap(replace(self.get(node_id), last_step_index=last_step_index))

    def seal(self) -> None:
        """Refuse any further add() / close(); called once the trace is complete."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def _swap(self, node: CallNode) -> CallNode:
        self._nodes[self._index[node.id]] = node
        self._by_id[node.id] = node
        return node

    def _check_open(self) -> None:
        if self._sealed:
            raise TraceInvariantError("Call tree is sealed")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get(self, node_id: str) -> CallNode:
        try:
            return self._by_id[node_id]
        except KeyError:
            raise TraceInvariantError(f"Unknown call node id '{node_id}'") from None

    def find(self, node_id: Optional[str]) -> Optional[CallNode]:
        if node_id is None:
            return None
        return self._by_id.get(node_id)

    def roots(self) -> List[CallNode]:
        return [n for n in self._nodes if n.parent_id is None]

    def children(self, node_id: str) -> List[CallNode]:
        return [self.get(cid) for cid in self.get(node_id).children_ids]

    def visible_at(self, cursor: int) -> List[CallNode]:
        return [n for n in self._nodes if n.is_visible(cursor)]

    def max_depth(self) -> int:
        return max((n.depth for n in self._nodes), default=0)

    def to_list(self) -> List[dict]:
        return [n.to_dict() for n in self._nodes]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[CallNode]:
        return iter(self._nodes)

    def __contains__(self, node_id) -> bool:
        return node_id in self._by_id


def node_status(
    node: CallNode,
    cursor: int,
    active_node_id: Optional[str],
    phase: Phase,
) -> str:
    """Status string the tree renderer colours a node by at `cursor`."""
    if not node.is_visible(cursor):
        return HIDDEN
    is_active = node.id == active_node_id
    if is_active and phase in _ACTIVE_STATUS:
        return _ACTIVE_STATUS[phase]
    if node.has_returned(cursor):
        return RETURNED
    return LIVE
