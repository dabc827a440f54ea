import pytest

from hanoi import InvalidDiskCountError
from algorithms import Phase, MOVE_PHASES
from engine import Navigator, PlaybackState, SPEED_PRESETS


def play_to_end(nav):
    ticks = 0
    while nav.play_tick():
        ticks += 1
    return ticks


# ---------------------------------------------------------------------------
# Before any reset
# ---------------------------------------------------------------------------
def test_fresh_navigator_shows_not_started(nav):
    assert nav.cursor == -1
    assert nav.state is PlaybackState.IDLE
    assert nav.total_steps == 0
    assert not nav.is_finished
    assert nav.actual_move_count == 0
    assert not nav.step_forward()
    assert not nav.step_backward()
    assert not nav.play()


def test_not_started_step_shows_initial_tower():
    nav = Navigator(num_disks=4)
    step = nav.current_step
    assert step.phase is Phase.NOT_STARTED
    assert step.step_number == -1
    assert step.rods == {"A": (4, 3, 2, 1), "B": (), "C": ()}
    assert step.call_stack == ()
    assert "currently 4" in step.description
    assert nav.active_node is None


# ---------------------------------------------------------------------------
# Reset
# ---------------------------------------------------------------------------
def test_reset_lands_on_initial_setup(nav):
    nav.reset(3)
    assert nav.cursor == 0
    assert nav.total_steps == 32
    assert nav.current_step.phase is Phase.INITIAL_SETUP
    assert nav.state is PlaybackState.PAUSED
    assert nav.trace_disks == 3


def test_reset_with_zero_disks_still_has_bookends(nav):
    nav.reset(0)
    assert nav.cursor == 0
    assert nav.total_steps == 2
    assert nav.step_forward()
    assert nav.current_step.phase is Phase.FINISHED
    assert nav.is_finished


def test_reset_bumps_generation_and_stops_playback(nav):
    nav.reset(3)
    gen = nav.generation
    nav.play()
    nav.play_tick()
    nav.reset(2)
    assert nav.generation == gen + 1
    assert not nav.is_playing
    assert nav.cursor == 0
    assert nav.total_steps == 14


def test_invalid_reset_keeps_previous_trace(nav):
    nav.reset(2)
    nav.step_forward()
    with pytest.raises(InvalidDiskCountError):
        nav.reset(-1)
    assert nav.total_steps == 14
    assert nav.cursor == 1


# ---------------------------------------------------------------------------
# Manual navigation
# ---------------------------------------------------------------------------
def test_step_forward_stops_at_last_index(nav):
    nav.reset(1)
    while nav.step_forward():
        pass
    assert nav.cursor == nav.last_index == 4
    assert nav.is_finished
    assert not nav.step_forward()
    assert nav.cursor == 4
    assert nav.is_finished


def test_stepping_back_from_end_returns_to_not_started(nav):
    nav.reset(2)
    nav.jump_to_end()
    assert nav.cursor == 13
    for _ in range(nav.total_steps):
        assert nav.step_backward()
    assert nav.cursor == -1
    assert nav.current_step.rods == {"A": (2, 1), "B": (), "C": ()}
    assert nav.current_step.call_stack == ()
    assert not nav.step_backward()
    assert nav.cursor == -1


def test_actual_move_count_matches_literal_count(nav):
    nav.reset(3)
    while True:
        expected = sum(1 for s in nav.steps[:nav.cursor + 1] if s.phase in MOVE_PHASES)
        assert nav.actual_move_count == expected
        if not nav.step_forward():
            break
    assert nav.actual_move_count == 7


def test_goto_bounds(nav):
    nav.reset(2)
    assert nav.goto(7)
    assert nav.current_step.phase is Phase.PROCESSING_MOVE_N_DONE
    assert nav.active_node.id == "node-1"
    assert nav.goto(-1)
    assert not nav.goto(-2)
    assert not nav.goto(14)
    assert nav.cursor == -1
    assert nav.rewind()
    assert nav.cursor == 0


def test_on_step_fires_on_every_cursor_change():
    seen = []
    nav = Navigator(on_step=lambda step: seen.append(step.step_number))
    nav.reset(1)
    nav.step_forward()
    nav.step_backward()
    nav.step_backward()
    assert seen == [0, 1, 0, -1]


# ---------------------------------------------------------------------------
# Playback
# ---------------------------------------------------------------------------
def test_play_runs_to_the_end_and_pauses(nav):
    nav.reset(2)
    assert nav.play()
    assert play_to_end(nav) == 13
    assert nav.is_finished
    assert nav.state is PlaybackState.PAUSED
    assert not nav.play()


def test_manual_actions_rejected_while_playing(nav):
    nav.reset(3)
    nav.play()
    nav.play_tick()
    cursor = nav.cursor
    assert not nav.step_forward()
    assert not nav.step_backward()
    assert not nav.goto(0)
    assert not nav.set_num_disks(5)
    assert nav.cursor == cursor
    assert nav.num_disks == 3


def test_tick_does_nothing_when_paused(nav):
    nav.reset(2)
    assert not nav.play_tick()
    assert nav.cursor == 0


def test_stale_tick_is_ignored_after_reset(nav):
    nav.reset(3)
    nav.play()
    stale = nav.generation
    nav.reset(3)
    nav.play()
    assert not nav.play_tick(stale)
    assert nav.cursor == 0
    assert nav.play_tick(nav.generation)
    assert nav.cursor == 1


def test_toggle_play(nav):
    nav.reset(2)
    assert nav.toggle_play()
    assert not nav.toggle_play()
    assert nav.state is PlaybackState.PAUSED


def test_play_from_not_started_display(nav):
    nav.reset(1)
    nav.step_backward()
    assert nav.play()
    assert nav.play_tick()
    assert nav.cursor == 0


# ---------------------------------------------------------------------------
# Settings & serialisation
# ---------------------------------------------------------------------------
def test_set_num_disks_only_affects_not_started_display(nav):
    nav.reset(2)
    assert nav.set_num_disks(5)
    assert nav.total_steps == 14
    nav.goto(-1)
    assert nav.current_step.rods["A"] == (5, 4, 3, 2, 1)


def test_speed_presets(nav):
    nav.set_speed("fast")
    assert nav.interval_ms == SPEED_PRESETS["fast"]
    nav.set_speed("warp")
    assert nav.interval_ms == SPEED_PRESETS["medium"]
    nav.set_interval_ms(1)
    assert nav.interval_ms == 20


def test_dict_round_trip(nav):
    nav.reset(3)
    nav.goto(10)
    nav.play()
    data = nav.to_dict()
    restored = Navigator.from_dict(data)
    assert restored.to_dict() == data
    assert restored.current_step == nav.current_step
    assert restored.is_playing


def test_from_dict_without_trace():
    restored = Navigator.from_dict({"num_disks": 4})
    assert restored.cursor == -1
    assert restored.state is PlaybackState.IDLE
    assert restored.current_step.rods["A"] == (4, 3, 2, 1)
