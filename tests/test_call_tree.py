import dataclasses

import pytest

from hanoi import TraceInvariantError
from algorithms import CallNode, CallTree, Phase, node_status
from algorithms import call_tree as ct


def status_at(trace, cursor):
    steps, tree = trace
    step = steps[cursor]
    return {n.id: node_status(n, cursor, step.node_id, step.phase) for n in tree}


def test_labels_and_signatures():
    node = CallNode(id="node-1", parent_id=None, count=3, source="A", target="C", aux="B",
                    first_step_index=1)
    assert node.label == "H(3, A, C, B)"
    assert node.signature == "solve(3, 'A', 'C', 'B')"
    assert node.to_dict()["children_ids"] == []


def test_unknown_id_lookup_is_fatal():
    tree = CallTree()
    with pytest.raises(TraceInvariantError):
        tree.get("node-42")
    assert tree.find("node-42") is None
    assert tree.find(None) is None


def test_duplicate_and_orphan_nodes_rejected():
    tree = CallTree()
    tree.add(CallNode("node-1", None, 2, "A", "C", "B", 1))
    with pytest.raises(TraceInvariantError):
        tree.add(CallNode("node-1", None, 2, "A", "C", "B", 1))
    with pytest.raises(TraceInvariantError):
        tree.add(CallNode("node-2", "node-9", 1, "A", "B", "C", 3))


def test_add_links_child_to_parent():
    tree = CallTree()
    tree.add(CallNode("node-1", None, 2, "A", "C", "B", 1))
    tree.add(CallNode("node-2", "node-1", 1, "A", "B", "C", 3, depth=1))
    assert [c.id for c in tree.children("node-1")] == ["node-2"]
    assert "node-2" in tree
    assert tree.max_depth() == 1


def test_everything_hidden_before_first_call(trace2):
    assert set(status_at(trace2, 0).values()) == {ct.HIDDEN}


def test_status_follows_the_active_phase(trace2):
    assert status_at(trace2, 1) == {"node-1": ct.ENTERING, "node-2": ct.HIDDEN, "node-3": ct.HIDDEN}
    assert status_at(trace2, 2)["node-1"] == ct.RECURSING
    assert status_at(trace2, 3) == {"node-1": ct.LIVE, "node-2": ct.ENTERING, "node-3": ct.HIDDEN}
    assert status_at(trace2, 4)["node-2"] == ct.MOVING
    assert status_at(trace2, 5)["node-2"] == ct.RETURNING
    assert status_at(trace2, 6) == {"node-1": ct.PREPARING_MOVE, "node-2": ct.RETURNED, "node-3": ct.HIDDEN}
    assert status_at(trace2, 12)["node-1"] == ct.RETURNING


def test_all_nodes_returned_when_finished(trace2):
    assert set(status_at(trace2, 13).values()) == {ct.RETURNED}


def test_visible_at(trace2):
    _, tree = trace2
    assert [n.id for n in tree.visible_at(-1)] == []
    assert [n.id for n in tree.visible_at(3)] == ["node-1", "node-2"]
    assert len(tree.visible_at(13)) == 3


def test_not_started_phase_shows_nothing(trace2):
    _, tree = trace2
    for node in tree:
        assert node_status(node, -1, None, Phase.NOT_STARTED) == ct.HIDDEN


def test_close_swaps_in_a_returned_copy():
    tree = CallTree()
    node = tree.add(CallNode("node-1", None, 1, "A", "C", "B", 1))
    closed = tree.close("node-1", 3)
    assert closed.last_step_index == 3
    assert tree.get("node-1") is closed
    assert node.last_step_index is None


def test_generated_nodes_are_read_only(trace2):
    _, tree = trace2
    root = tree.get("node-1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        root.last_step_index = 99
    assert isinstance(root.children_ids, tuple)


def test_generated_tree_is_sealed(trace2):
    _, tree = trace2
    assert tree.sealed
    with pytest.raises(TraceInvariantError):
        tree.add(CallNode("node-4", "node-1", 1, "A", "B", "C", 20, depth=1))
    with pytest.raises(TraceInvariantError):
        tree.close("node-2", 0)
    assert len(tree) == 3
    assert tree.get("node-2").last_step_index == 5
