"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • disk_selector        – disk-count input + Start/Reset
  • playback_controls    – back / play-pause / forward, speed, step counter
  • call_stack_panel     – open solve(...) frames, innermost on top
  • pseudocode_viewer    – with live line highlighting
  • explanation_panel    – what the current step did
  • analytics_panel      – steps, moves vs optimal, calls, depth, …

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine).
  - The main app stitches them together.
"""

from typing import List, Optional, Sequence

from engine import TraceMetrics, SPEED_PRESETS


def _escape(text: str) -> str:
    return text.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


# ---------------------------------------------------------------------------
# Disk Selector
# ---------------------------------------------------------------------------
def disk_selector(
    num_disks: int = 3,
    min_disks: int = 1,
    max_disks: int = 8,
    disabled: bool = False,
) -> str:
    return f"""
    <div class="panel disk-selector">
      <h3>🗼 Disks</h3>
      <label for="num-disks">Number of Disks ({min_disks}-{max_disks}):</label>
      <input type="number" id="num-disks" value="{num_disks}" min="{min_disks}" max="{max_disks}"
             {'disabled' if disabled else ''}>
      <button id="btn-reset" class="btn-primary">Start / Reset</button>
    </div>
    """


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    is_playing: bool = False,
    cursor: int = -1,
    total_steps: int = 0,
    speed: str = "medium",
    is_finished: bool = False,
) -> str:
    if is_playing:
        play_icon, play_label = "⏸", "Pause"
    elif is_finished:
        play_icon, play_label = "✔", "Finished"
    else:
        play_icon, play_label = "▶", "Play"

    back_disabled    = 'disabled' if is_playing or cursor < 0 else ''
    forward_disabled = 'disabled' if is_playing or is_finished or not total_steps else ''
    play_disabled    = 'disabled' if (is_finished and not is_playing) or not total_steps else ''

    options = []
    for preset, ms in SPEED_PRESETS.items():
        sel = 'selected' if preset == speed else ''
        options.append(f'<option value="{preset}" {sel}>{preset.capitalize()} ({ms} ms)</option>')

    counter = ""
    if total_steps:
        counter = f"""
      <div class="step-info">
        Step <span id="current-step">{cursor + 1}</span> / <span id="total-steps">{total_steps}</span>
        {' <span class="finished-badge">FINISHED</span>' if is_finished else ''}
      </div>"""

    return f"""
    <div class="panel playback-controls">
      <h3>⏯ Playback</h3>
      <div class="button-row">
        <button id="btn-prev" title="Step back" {back_disabled}>◀ Back</button>
        <button id="btn-play" title="{play_label}" {play_disabled}>{play_icon} {play_label}</button>
        <button id="btn-next" title="Step forward" {forward_disabled}>Forward ▶</button>
      </div>{counter}
      <div class="speed-control">
        <label>Speed:</label>
        <select id="speed-selector">
          {''.join(options)}
        </select>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Call Stack
# ---------------------------------------------------------------------------
def call_stack_panel(call_stack: Sequence[str] = (), returning: bool = False) -> str:
    """
    Innermost frame first, tagged `current`.  On a return step the frame
    has already been popped, so `returning` only adds a hint.
    """
    if not call_stack:
        return """
        <div class="call-stack empty">
          <div class="stack-empty">📚 Stack is empty</div>
        </div>
        """

    frames = []
    top = len(call_stack) - 1
    for depth in range(top, -1, -1):
        cls = "current" if depth == top else ""
        frames.append(
            f'<div class="stack-frame {cls}" style="margin-left: {depth * 8}px">'
            f'{_escape(call_stack[depth])}</div>'
        )
    note = '<div class="hint">↩ returning to the frame above</div>' if returning else ""
    return f"""
    <div class="call-stack">
      {''.join(frames)}
      {note}
    </div>
    """


# ---------------------------------------------------------------------------
# Pseudocode Viewer
# ---------------------------------------------------------------------------
def pseudocode_viewer(pseudocode_lines: List[str], current_line: int = -1) -> str:
    lines_html = []
    for i, line in enumerate(pseudocode_lines):
        highlight = 'highlight' if i == current_line else ''
        lines_html.append(f'<div class="code-line {highlight}" data-line="{i}">{_escape(line)}</div>')

    return f"""
    <div class="code-block">
      {''.join(lines_html)}
    </div>
    """


# ---------------------------------------------------------------------------
# Explanation Panel
# ---------------------------------------------------------------------------
def explanation_panel(description: str = "") -> str:
    if not description:
        description = "Press <strong>Start / Reset</strong> to begin."
    else:
        description = _escape(description)
    return f"""<div class="explanation-text">{description}</div>"""


# ---------------------------------------------------------------------------
# Analytics Panel
# ---------------------------------------------------------------------------
def analytics_panel(metrics: Optional[TraceMetrics] = None, moves_so_far: int = 0) -> str:
    if not metrics:
        return """
        <div class="panel analytics-panel">
          <h3>📊 Analytics</h3>
          <p class="placeholder">Start a run to see metrics.</p>
        </div>
        """

    status = "✅ Solved" if metrics.solved else "❌ Not solved"

    return f"""
    <div class="panel analytics-panel">
      <h3>📊 Analytics — {metrics.num_disks} disks</h3>
      <table>
        <tr><td>Moves so far:</td><td><strong>{moves_so_far}</strong></td></tr>
        <tr><td>Total Moves:</td><td><strong>{metrics.move_count} / {metrics.optimal_moves} optimal</strong></td></tr>
        <tr><td>Total Steps:</td><td><strong>{metrics.total_steps}</strong></td></tr>
        <tr><td>Calls:</td><td><strong>{metrics.call_count}</strong></td></tr>
        <tr><td>Max Depth:</td><td><strong>{metrics.max_depth}</strong></td></tr>
        <tr><td>Generation Time:</td><td><strong>{metrics.wall_time_ms:.2f} ms</strong></td></tr>
        <tr><td>Memory:</td><td><strong>{metrics.memory_bytes // 1024} KB</strong></td></tr>
        <tr><td>Result:</td><td><strong>{status}</strong></td></tr>
      </table>
    </div>
    """
