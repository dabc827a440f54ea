import dataclasses

import pytest

from hanoi import RodState, InvalidDiskCountError, TraceInvariantError, EmptyPegError
from algorithms import (
    generate, tower_of_hanoi, optimal_move_count, PSEUDOCODE,
    Phase, Move, MOVE_PHASES, RETURN_PHASES, CallTree,
)


def phases(steps):
    return [s.phase.value for s in steps]


# ---------------------------------------------------------------------------
# Counting properties
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("n", range(0, 9))
def test_move_steps_match_optimal_count(n):
    steps, _ = generate(n)
    moves = [s for s in steps if s.phase in MOVE_PHASES]
    assert len(moves) == 2 ** n - 1 == optimal_move_count(n)
    assert steps[-1].move_count == 2 ** n - 1


@pytest.mark.parametrize("n", range(1, 9))
def test_total_step_count(n):
    steps, _ = generate(n)
    assert len(steps) == 9 * 2 ** (n - 1) - 4


@pytest.mark.parametrize("n", range(1, 9))
def test_tree_is_full_binary(n):
    _, tree = generate(n)
    assert len(tree) == 2 ** n - 1
    assert len(tree.roots()) == 1
    for node in tree:
        assert len(node.children_ids) in (0, 2)
        assert (len(node.children_ids) == 0) == (node.count == 1)


def test_zero_disks_only_has_bookends():
    steps, tree = generate(0)
    assert phases(steps) == ["initial_setup", "finished"]
    assert len(tree) == 0


# ---------------------------------------------------------------------------
# Replay & final state
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("n", range(0, 9))
def test_replaying_moves_is_always_legal(n):
    steps, _ = generate(n)
    replay = RodState.initial(n)
    for step in steps:
        if step.move:
            # raises on an empty peg or larger-on-smaller
            assert replay.move(step.move.source, step.move.target) == step.move.disk
            assert replay.snapshot() == step.rods
    assert replay.is_solved("C")


@pytest.mark.parametrize("n", range(0, 9))
def test_last_move_leaves_every_disk_on_destination(n):
    steps, _ = generate(n)
    last_move = [s for s in steps if s.phase.is_move][-1:] or steps[-1:]
    rods = last_move[0].rods
    assert rods["C"] == tuple(range(n, 0, -1))
    assert rods["A"] == rods["B"] == ()


@pytest.mark.parametrize("n", [1, 3, 5])
def test_every_step_holds_a_valid_configuration(n):
    steps, _ = generate(n)
    for step in steps:
        assert RodState.from_snapshot(step.rods).is_valid()


# ---------------------------------------------------------------------------
# Concrete scenarios
# ---------------------------------------------------------------------------
def test_one_disk_scenario():
    steps, tree = generate(1)
    assert phases(steps) == [
        "initial_setup", "entering_call", "processing_move_base", "returning_base", "finished",
    ]
    assert len(tree) == 1
    root = tree.roots()[0]
    assert root.children_ids == ()
    assert (root.first_step_index, root.last_step_index) == (1, 3)
    assert steps[2].move == Move(disk=1, source="A", target="C")
    assert steps[-1].move_count == 1


def test_two_disk_scenario(trace2):
    steps, tree = trace2
    assert phases(steps) == [
        "initial_setup",
        "entering_call", "before_recursion_1",
        "entering_call", "processing_move_base", "returning_base",
        "processing_move_N", "processing_move_N_done",
        "before_recursion_2",
        "entering_call", "processing_move_base", "returning_base",
        "returning_N",
        "finished",
    ]
    assert [s.move for s in steps if s.move] == [
        Move(1, "A", "B"), Move(2, "A", "C"), Move(1, "B", "C"),
    ]
    root, left, right = list(tree)
    assert root.children_ids == (left.id, right.id)
    assert (left.source, left.target, left.aux) == ("A", "B", "C")
    assert (right.source, right.target, right.aux) == ("B", "C", "A")
    assert (root.first_step_index, root.last_step_index) == (1, 12)
    assert (left.first_step_index, left.last_step_index) == (3, 5)
    assert (right.first_step_index, right.last_step_index) == (9, 11)


def test_processing_move_n_does_not_mutate_rods(trace2):
    steps, _ = trace2
    about_to_move, moved = steps[6], steps[7]
    assert about_to_move.move is None
    assert about_to_move.rods == steps[5].rods
    assert moved.rods != about_to_move.rods


# ---------------------------------------------------------------------------
# Call stack & node windows
# ---------------------------------------------------------------------------
def test_call_stack_tracks_open_frames(trace2):
    steps, _ = trace2
    assert steps[3].call_stack == ("solve(2, 'A', 'C', 'B')", "solve(1, 'A', 'B', 'C')")
    # popped before the return step is recorded
    assert steps[5].call_stack == ("solve(2, 'A', 'C', 'B')",)
    assert steps[12].call_stack == ()
    assert steps[3].description == "CALL: solve(1, 'A', 'B', 'C')"


def test_node_windows_point_at_call_and_return_steps(trace3):
    steps, tree = trace3
    for node in tree:
        call = steps[node.first_step_index]
        ret = steps[node.last_step_index]
        assert call.phase is Phase.ENTERING_CALL and call.node_id == node.id and call.is_call
        assert ret.phase in RETURN_PHASES and ret.node_id == node.id and ret.is_return
        if node.count == 1:
            assert steps[node.last_step_index - 1].phase is Phase.PROCESSING_MOVE_BASE


def test_children_run_inside_parent_window(trace3):
    _, tree = trace3
    for node in tree:
        for child in tree.children(node.id):
            assert node.first_step_index < child.first_step_index
            assert child.last_step_index < node.last_step_index
            assert child.depth == node.depth + 1


def test_depth_matches_call_stack(trace3):
    steps, _ = trace3
    for step in steps:
        if step.phase is Phase.ENTERING_CALL:
            assert len(step.call_stack) == step.depth + 1


def test_bookends_have_no_node(trace3):
    steps, _ = trace3
    assert steps[0].node_id is None and steps[-1].node_id is None
    assert steps[0].pseudocode_line == steps[-1].pseudocode_line == -1


def test_pseudocode_lines_in_range(trace3):
    steps, _ = trace3
    for step in steps[1:-1]:
        assert 0 <= step.pseudocode_line < len(PSEUDOCODE)


# ---------------------------------------------------------------------------
# Snapshots, determinism
# ---------------------------------------------------------------------------
def test_steps_are_frozen(trace2):
    steps, _ = trace2
    with pytest.raises(dataclasses.FrozenInstanceError):
        steps[0].description = "changed"


def test_early_snapshots_survive_later_moves(trace3):
    steps, _ = trace3
    assert steps[0].rods == {"A": (3, 2, 1), "B": (), "C": ()}
    assert steps[0].rods is not steps[1].rods


def test_step_numbers_are_sequential(trace3):
    steps, _ = trace3
    assert [s.step_number for s in steps] == list(range(len(steps)))


def test_generation_is_deterministic():
    a, b = generate(4), generate(4)
    assert a.steps == b.steps
    assert a.tree.to_list() == b.tree.to_list()


def test_generator_fills_supplied_tree_lazily():
    tree = CallTree()
    gen = tower_of_hanoi(2, tree)
    next(gen)
    assert len(tree) == 0
    list(gen)
    assert len(tree) == 3


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("bad", [-1, 17, "3", None])
def test_invalid_disk_count_rejected(bad):
    with pytest.raises(InvalidDiskCountError):
        generate(bad)


def test_broken_bookkeeping_aborts_generation(monkeypatch):
    # start with no disks on the pegs at all, so the very first move is illegal
    monkeypatch.setattr(RodState, "initial", classmethod(lambda cls, n, peg="A": cls(n)))
    with pytest.raises(EmptyPegError) as excinfo:
        generate(2)
    assert isinstance(excinfo.value, TraceInvariantError)
