"""
navigator.py — Step-by-Step Timeline Navigator
================================================
The Navigator is the ONLY object the UI talks to while scrubbing a trace.
It owns the (steps, tree, cursor) triple and exposes a play/pause/next/
prev/seek API.  It runs no simulation itself: every position is just an
index into the trace produced by algorithms.generate().

State machine:
    IDLE     →  reset(n)       →  PAUSED
    PAUSED   →  play()         →  PLAYING
    PLAYING  →  pause()        →  PAUSED
    PLAYING  →  (last step)    →  PAUSED
    any      →  reset(n)       →  PAUSED   (generation += 1)

Cursor:
    -1 is the pristine "not started" display; 0 … last_index index steps.

Playback:
    The Navigator does no timing.  Whoever owns the timer (engine.ticker
    or the browser's setInterval) calls play_tick(generation) on each tick.
    reset() bumps `generation`, so a tick scheduled against the old trace
    is ignored.  While PLAYING, manual steps, seeks and disk-count changes
    are refused.

Thread safety:
  This class is NOT thread-safe.  Drive it from one thread at a time;
  engine.ticker serialises its own ticks.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Tuple

from hanoi import RodState, validate_disk_count
from algorithms import Step, Phase, CallNode, CallTree, Trace
from engine.recorder import load_trace


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class PlaybackState(Enum):
    IDLE    = "idle"
    PAUSED  = "paused"
    PLAYING = "playing"


# ---------------------------------------------------------------------------
# Speed presets (milliseconds per tick)
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slow":   1500,   # teaching mode
    "medium": 800,
    "fast":   300,
    "turbo":  80,
}

MIN_INTERVAL_MS = 20


# ---------------------------------------------------------------------------
# Navigator
# ---------------------------------------------------------------------------
class Navigator:
    """
    Attributes:
        steps       : The current trace (empty until reset()).
        tree        : The recursion tree for the current trace.
        cursor      : Index into `steps` currently displayed (-1 = not started).
        num_disks   : Disk count shown by the "not started" display.
        trace_disks : Disk count the loaded trace was generated for (None if IDLE).
        state       : Current PlaybackState.
        generation  : Bumped on every reset(); ticks carry it to detect staleness.
        interval_ms : Milliseconds between auto-play ticks.
        on_step     : Optional callback(Step) fired whenever the cursor moves.
    """

    def __init__(
        self,
        num_disks: int = 0,
        on_step: Optional[Callable[[Step], None]] = None,
        loader: Callable[[int], Trace] = load_trace,
    ):
        self.steps:       Tuple[Step, ...]  = ()
        self.tree:        CallTree          = CallTree()
        self.cursor:      int               = -1
        self.num_disks:   int               = num_disks
        self.trace_disks: Optional[int]     = None
        self.state:       PlaybackState     = PlaybackState.IDLE
        self.generation:  int               = 0
        self.interval_ms: int               = SPEED_PRESETS["medium"]
        self.on_step:     Optional[Callable[[Step], None]] = on_step

        self._loader = loader

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self, num_disks: int) -> None:
        """Stop playback, regenerate for `num_disks` and show step 0."""
        validate_disk_count(num_disks)
        # invalidate in-flight ticks before anything else changes
        self.generation += 1
        if self.state is PlaybackState.PLAYING:
            self.state = PlaybackState.PAUSED

        steps, tree = self._loader(num_disks)

        self.steps       = steps
        self.tree        = tree
        self.num_disks   = num_disks
        self.trace_disks = num_disks
        self.state       = PlaybackState.PAUSED if steps else PlaybackState.IDLE
        logger.debug("Reset to %d disks (%d steps, generation %d)", num_disks, len(steps), self.generation)
        self._goto(0 if steps else -1)

    def set_num_disks(self, num_disks: int) -> bool:
        """Change the pending disk count.  Refused while playing."""
        if self.is_playing:
            logger.debug("Disk count change to %s rejected: playing", num_disks)
            return False
        self.num_disks = validate_disk_count(num_disks)
        if self.cursor == -1:
            self._notify()
        return True

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def step_forward(self) -> bool:
        """Advance one step.  Returns False at the end or while playing."""
        if self.is_playing:
            logger.debug("Manual step forward rejected: playing")
            return False
        return self._advance()

    def step_backward(self) -> bool:
        """Rewind one step; from step 0 back to the not-started display."""
        if self.is_playing:
            logger.debug("Manual step backward rejected: playing")
            return False
        if self.cursor < 0:
            return False
        self._goto(self.cursor - 1)
        return True

    def goto(self, idx: int) -> bool:
        """Jump to any index in [-1, last_index]."""
        if self.is_playing:
            logger.debug("Seek to %s rejected: playing", idx)
            return False
        if not -1 <= idx <= self.last_index:
            return False
        self._goto(idx)
        return True

    def rewind(self) -> bool:
        """Jump back to step 0."""
        return self.goto(0) if self.steps else False

    def jump_to_end(self) -> bool:
        return self.goto(self.last_index) if self.steps else False

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def play(self) -> bool:
        if not self.steps or self.is_finished:
            return False
        self.state = PlaybackState.PLAYING
        logger.debug("Playing from step %d (generation %d)", self.cursor, self.generation)
        return True

    def pause(self) -> None:
        if self.state is PlaybackState.PLAYING:
            self.state = PlaybackState.PAUSED
            logger.debug("Paused at step %d", self.cursor)

    def toggle_play(self) -> bool:
        """Returns True if playing afterwards."""
        if self.is_playing:
            self.pause()
        else:
            self.play()
        return self.is_playing

    # ------------------------------------------------------------------
    # Tick  (called by the timer owner)
    # ------------------------------------------------------------------
    def play_tick(self, generation: Optional[int] = None) -> bool:
        """
        Advance one step if playing.  A tick carrying a `generation` other
        than the current one belongs to a trace that has since been
        replaced and is ignored.  Playback pauses itself once the last step
        is shown or an advance is refused.  Returns True if a step was taken.
        """
        if self.state is not PlaybackState.PLAYING:
            return False
        if generation is not None and generation != self.generation:
            logger.debug("Dropped stale tick (generation %d, current %d)", generation, self.generation)
            return False
        if not self._advance():
            self.pause()
            return False
        if self.is_finished:
            self.pause()
        return True

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, preset: str) -> None:
        self.interval_ms = SPEED_PRESETS.get(preset, SPEED_PRESETS["medium"])

    def set_interval_ms(self, ms: int) -> None:
        self.interval_ms = max(MIN_INTERVAL_MS, int(ms))

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def current_step(self) -> Step:
        if 0 <= self.cursor < len(self.steps):
            return self.steps[self.cursor]
        return self._not_started_step()

    @property
    def active_node(self) -> Optional[CallNode]:
        return self.tree.find(self.current_step.node_id)

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def last_index(self) -> int:
        return len(self.steps) - 1

    @property
    def is_finished(self) -> bool:
        return bool(self.steps) and self.cursor == self.last_index

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    @property
    def actual_move_count(self) -> int:
        """Disk moves among steps [0, cursor]."""
        if self.cursor < 0:
            return 0
        return self.steps[self.cursor].move_count

    # ------------------------------------------------------------------
    # Serialisation  (Flask session round-trip)
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "num_disks":   self.num_disks,
            "trace_disks": self.trace_disks,
            "cursor":      self.cursor,
            "state":       self.state.value,
            "generation":  self.generation,
            "interval_ms": self.interval_ms,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict,
        on_step: Optional[Callable[[Step], None]] = None,
        loader: Callable[[int], Trace] = load_trace,
    ) -> "Navigator":
        nav = cls(num_disks=data.get("num_disks", 0), on_step=on_step, loader=loader)
        trace_disks = data.get("trace_disks")
        if trace_disks is not None:
            nav.steps, nav.tree = loader(trace_disks)
            nav.trace_disks = trace_disks
            nav.state = PlaybackState(data.get("state", PlaybackState.PAUSED.value))
        nav.cursor      = max(-1, min(data.get("cursor", -1), nav.last_index))
        nav.generation  = data.get("generation", 0)
        nav.interval_ms = data.get("interval_ms", SPEED_PRESETS["medium"])
        return nav

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _advance(self) -> bool:
        if self.cursor >= self.last_index:
            return False
        self._goto(self.cursor + 1)
        return True

    def _goto(self, idx: int) -> None:
        self.cursor = idx
        self._notify()

    def _notify(self) -> None:
        if self.on_step:
            self.on_step(self.current_step)

    def _not_started_step(self) -> Step:
        return Step(
            step_number=-1,
            phase=Phase.NOT_STARTED,
            rods=RodState.initial(self.num_disks).snapshot(),
            description=f"Set number of disks (currently {self.num_disks}) and press Start/Reset.",
        )
