"""
main.py — Tower of Hanoi Visualizer Flask App
===============================================
The web server that powers the visualizer, plus a terminal player.

Routes:
  GET  /                       – main UI
  POST /api/reset              – generate a trace for {disks} and show step 0
  POST /api/step/next          – advance one step
  POST /api/step/prev          – rewind one step
  POST /api/step/goto          – jump to step {index}
  POST /api/play               – toggle play/pause
  POST /api/play/tick          – auto-play tick carrying {generation}
  POST /api/config/disks       – change the pending disk count
  POST /api/config/speed       – change the auto-play speed preset
  GET  /api/state              – navigator state + current step as JSON
  GET  /api/trace/export       – full trace, tree and metrics as JSON

State management:
  The Flask session holds only the navigator's small state dict
  (disk counts, cursor, play state, generation, interval).  Traces are
  deterministic, so each request rebuilds the Navigator from the cached
  trace for that disk count instead of storing thousands of steps.

Auto-play:
  The browser owns the timer (setInterval) and sends the generation it
  started with on every tick.  Start/Reset aborts the tick in flight and
  bumps the generation.  The newest generation per session is also kept
  server-side, so a tick carrying a pre-reset cookie is refused with 409
  and never overwrites the reset session.

CLI:
  python main.py                       – serve on http://127.0.0.1:5000
  python main.py --play 4 --speed fast – auto-play 4 disks in the terminal
"""

from flask import Flask, render_template_string, request, jsonify, session
import argparse
import logging
import secrets
import sys
import os
import threading
from typing import Dict

# add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import Config, clamp_disk_count
from hanoi import InvalidDiskCountError, PEGS
from algorithms import PSEUDOCODE, Step
from engine import Navigator, Recorder, Ticker, SPEED_PRESETS
from ui import (
    render_rods,
    render_tree,
    disk_selector,
    playback_controls,
    call_stack_panel,
    pseudocode_viewer,
    explanation_panel,
    analytics_panel,
)


logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.from_object(Config)
app.config.from_prefixed_env("HANOI")
if not app.config.get("SECRET_KEY"):
    app.secret_key = secrets.token_hex(32)


# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
# The cookie carries the navigator, so a request sent before a reset still
# holds the old generation.  The newest generation per session is kept here,
# on the server, to tell such requests apart.
_generations: Dict[str, int] = {}
_generations_lock = threading.Lock()


def get_navigator() -> Navigator:
    """Rebuild the navigator from the session, or create a fresh one."""
    data = session.get("navigator")
    if data is None:
        nav = Navigator(num_disks=app.config["DEFAULT_DISKS"])
        nav.set_interval_ms(app.config["TICK_INTERVAL_MS"])
        return nav
    return Navigator.from_dict(data)


def save_navigator(nav: Navigator) -> None:
    session["navigator"] = nav.to_dict()
    sid = session.setdefault("sid", secrets.token_hex(16))
    with _generations_lock:
        _generations[sid] = max(nav.generation, _generations.get(sid, 0))


def latest_generation() -> int:
    """Newest generation saved for this browser session, 0 if none."""
    sid = session.get("sid")
    if sid is None:
        return 0
    with _generations_lock:
        return _generations.get(sid, 0)


def get_speed() -> str:
    return session.get("speed", app.config["DEFAULT_SPEED"])


def get_json() -> dict:
    return request.get_json(silent=True) or {}


def clamp(value) -> int:
    return clamp_disk_count(value, app.config["MIN_DISKS"], app.config["MAX_DISKS"])


def displayed_disks(nav: Navigator) -> int:
    if nav.cursor >= 0 and nav.trace_disks is not None:
        return nav.trace_disks
    return nav.num_disks


def render_payload(nav: Navigator) -> dict:
    """Every fragment the page swaps in after a navigator change."""
    step = nav.current_step
    return {
        "rods":        render_rods(step, displayed_disks(nav), nav.actual_move_count),
        "tree":        render_tree(nav.tree, nav.cursor, step.node_id, step.phase),
        "call_stack":  call_stack_panel(step.call_stack, step.is_return),
        "pseudocode":  pseudocode_viewer(PSEUDOCODE, step.pseudocode_line),
        "explanation": explanation_panel(step.description),
        "playback":    playback_controls(
            is_playing=nav.is_playing,
            cursor=nav.cursor,
            total_steps=nav.total_steps,
            speed=get_speed(),
            is_finished=nav.is_finished,
        ),
        "cursor":      nav.cursor,
        "total_steps": nav.total_steps,
        "move_count":  nav.actual_move_count,
        "phase":       step.phase.value,
        "is_playing":  nav.is_playing,
        "is_finished": nav.is_finished,
        "generation":  nav.generation,
        "interval_ms": nav.interval_ms,
    }


def playing_conflict():
    return jsonify({"error": "Pause playback first"}), 409


@app.errorhandler(InvalidDiskCountError)
def handle_invalid_disk_count(e):
    return jsonify({"error": str(e)}), 400


# ---------------------------------------------------------------------------
# Main UI Route
# ---------------------------------------------------------------------------
@app.route("/")
def index():
    nav = get_navigator()
    payload = render_payload(nav)

    metrics = None
    if nav.trace_disks is not None:
        rec = Recorder()
        metrics = rec.record(nav.trace_disks)

    html = render_template_string(INDEX_TEMPLATE,
        disks=disk_selector(
            num_disks=nav.num_disks,
            min_disks=app.config["MIN_DISKS"],
            max_disks=app.config["MAX_DISKS"],
            disabled=nav.is_playing,
        ),
        playback=payload["playback"],
        analytics=analytics_panel(metrics, nav.actual_move_count),
        rods=payload["rods"],
        call_stack=payload["call_stack"],
        pseudocode=payload["pseudocode"],
        explanation=payload["explanation"],
        tree=payload["tree"],
        generation=nav.generation,
        interval_ms=nav.interval_ms,
        is_playing="true" if nav.is_playing else "false",
    )
    save_navigator(nav)
    return html


# ---------------------------------------------------------------------------
# API: Reset
# ---------------------------------------------------------------------------
@app.route("/api/reset", methods=["POST"])
def api_reset():
    nav = get_navigator()
    n = clamp(get_json().get("disks", nav.num_disks))

    # a stale cookie must not reuse a generation that is already taken
    nav.generation = max(nav.generation, latest_generation())
    nav.reset(n)
    save_navigator(nav)

    rec = Recorder()
    metrics = rec.record(n)
    logger.info("Session reset to %d disks (%d steps)", n, nav.total_steps)

    payload = render_payload(nav)
    payload["analytics"] = analytics_panel(metrics, nav.actual_move_count)
    payload["num_disks"] = n
    return jsonify(payload)


# ---------------------------------------------------------------------------
# API: Step Navigation
# ---------------------------------------------------------------------------
@app.route("/api/step/next", methods=["POST"])
def api_step_next():
    nav = get_navigator()
    if nav.is_playing:
        return playing_conflict()

    moved = nav.step_forward()
    save_navigator(nav)
    return jsonify(dict(render_payload(nav), moved=moved))


@app.route("/api/step/prev", methods=["POST"])
def api_step_prev():
    nav = get_navigator()
    if nav.is_playing:
        return playing_conflict()

    moved = nav.step_backward()
    save_navigator(nav)
    return jsonify(dict(render_payload(nav), moved=moved))


@app.route("/api/step/goto", methods=["POST"])
def api_step_goto():
    nav = get_navigator()
    if nav.is_playing:
        return playing_conflict()

    idx = get_json().get("index")
    if isinstance(idx, bool) or not isinstance(idx, int) or not nav.goto(idx):
        return jsonify({"error": "Invalid step index"}), 400

    save_navigator(nav)
    return jsonify(dict(render_payload(nav), moved=True))


# ---------------------------------------------------------------------------
# API: Play / Pause
# ---------------------------------------------------------------------------
@app.route("/api/play", methods=["POST"])
def api_play():
    nav = get_navigator()
    if not nav.total_steps:
        return jsonify({"error": "Press Start / Reset first"}), 400

    nav.toggle_play()
    save_navigator(nav)
    return jsonify(render_payload(nav))


@app.route("/api/play/tick", methods=["POST"])
def api_play_tick():
    nav = get_navigator()
    generation = get_json().get("generation")
    if generation is not None and (isinstance(generation, bool) or not isinstance(generation, int)):
        return jsonify({"error": "Invalid generation"}), 400

    latest = latest_generation()
    if nav.generation < latest:
        # sent against a trace that has since been reset; leave the session alone
        logger.debug("Dropped tick from stale session (generation %d, latest %d)", nav.generation, latest)
        return jsonify({"error": "Stale tick", "moved": False, "generation": latest}), 409

    moved = nav.play_tick(generation)
    save_navigator(nav)
    return jsonify(dict(render_payload(nav), moved=moved))


# ---------------------------------------------------------------------------
# API: Config Changes
# ---------------------------------------------------------------------------
@app.route("/api/config/disks", methods=["POST"])
def api_config_disks():
    nav = get_navigator()
    if nav.is_playing:
        return playing_conflict()

    nav.set_num_disks(clamp(get_json().get("disks")))
    save_navigator(nav)
    return jsonify(dict(render_payload(nav), num_disks=nav.num_disks))


@app.route("/api/config/speed", methods=["POST"])
def api_config_speed():
    speed = get_json().get("speed", app.config["DEFAULT_SPEED"])
    if speed not in SPEED_PRESETS:
        return jsonify({"error": f"Unknown speed '{speed}'"}), 400

    nav = get_navigator()
    nav.set_speed(speed)
    session["speed"] = speed
    save_navigator(nav)
    return jsonify({"speed": speed, "interval_ms": nav.interval_ms})


# ---------------------------------------------------------------------------
# API: State / Export
# ---------------------------------------------------------------------------
@app.route("/api/state")
def api_state():
    nav = get_navigator()
    return jsonify({
        **nav.to_dict(),
        "speed":        get_speed(),
        "total_steps":  nav.total_steps,
        "is_finished":  nav.is_finished,
        "move_count":   nav.actual_move_count,
        "current_step": nav.current_step.to_dict(),
    })


@app.route("/api/trace/export")
def api_trace_export():
    nav = get_navigator()
    if nav.trace_disks is None:
        return jsonify({"error": "Press Start / Reset first"}), 400

    rec = Recorder()
    rec.record(nav.trace_disks)
    return jsonify(rec.export())


# ---------------------------------------------------------------------------
# Terminal player
# ---------------------------------------------------------------------------
def format_rods(step: Step) -> str:
    return " | ".join(f"{peg}: {list(step.rods.get(peg, ()))}" for peg in PEGS)


def print_step(step: Step) -> None:
    indent = "  " * len(step.call_stack)
    print(f"[{step.step_number:>4}] {indent}{step.description}")
    if step.move:
        print(f"       {indent}{format_rods(step)}")


def play_in_terminal(num_disks: int, speed: str) -> Navigator:
    """Auto-play a whole trace on stdout, one step per tick."""
    nav = Navigator(num_disks=num_disks, on_step=print_step)
    nav.set_speed(speed)
    nav.reset(num_disks)
    nav.play()

    generation = nav.generation
    ticker = Ticker(lambda: nav.play_tick(generation) and nav.is_playing, nav.interval_ms)
    ticker.start()
    try:
        ticker.wait()
    except KeyboardInterrupt:
        ticker.cancel()
        nav.pause()
        print("\nStopped.")

    print(f"\n{nav.actual_move_count} moves, step {nav.cursor + 1} / {nav.total_steps}")
    return nav


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Tower of Hanoi recursion visualizer")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("--play", type=int, metavar="DISKS",
                        help="auto-play DISKS disks in the terminal instead of serving")
    parser.add_argument("--speed", choices=list(SPEED_PRESETS), default=app.config["DEFAULT_SPEED"])
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.play is not None:
        play_in_terminal(clamp(args.play), args.speed)
        return

    print("=" * 60)
    print("  Tower of Hanoi Visualizer")
    print("  Starting Flask server...")
    print(f"  Open http://{args.host}:{args.port}")
    print("=" * 60)
    app.run(host=args.host, port=args.port, debug=args.debug)


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Tower of Hanoi Visualizer</title>
  <link rel="preconnect" href="https://fonts.googleapis.com">
  <link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
  <link href="https://fonts.googleapis.com/css2?family=JetBrains+Mono:wght@400;500;700&family=DM+Sans:wght@400;500;700&display=swap" rel="stylesheet">
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }

    :root {
      --bg-dark: #0d1117;
      --bg-darker: #010409;
      --bg-panel: #161b22;
      --bg-panel-hover: #1c2128;
      --border: #30363d;
      --border-bright: #484f58;
      --text-primary: #e6edf3;
      --text-secondary: #7d8590;
      --text-muted: #484f58;
      --accent-cyan: #0ea5e9;
      --accent-teal: #06b6d4;
      --accent-emerald: #10b981;
      --accent-rose: #f43f5e;
      --glow-cyan: rgba(14, 165, 233, 0.4);
    }

    body {
      font-family: 'DM Sans', -apple-system, BlinkMacSystemFont, sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
      display: flex;
      height: 100vh;
      overflow: hidden;
    }

    /* Sidebar */
    #sidebar {
      width: 320px;
      background: linear-gradient(180deg, var(--bg-dark) 0%, var(--bg-darker) 100%);
      border-right: 1px solid var(--border);
      overflow-y: auto;
      padding: 24px 16px;
    }

    /* Main area */
    #main {
      flex: 1;
      display: flex;
      flex-direction: column;
      overflow-y: auto;
    }

    #rods-container {
      display: flex;
      justify-content: center;
      padding: 20px;
      border-bottom: 1px solid var(--border);
    }

    #middle-panel {
      display: grid;
      grid-template-columns: 1fr 1fr 1fr;
      gap: 20px;
      padding: 20px;
      background: var(--bg-dark);
    }

    .box {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 20px;
      max-height: 320px;
      overflow-y: auto;
    }

    .box h3, .panel h3 {
      font-size: 13px;
      font-weight: 700;
      text-transform: uppercase;
      letter-spacing: 0.5px;
      margin-bottom: 14px;
      color: var(--accent-cyan);
    }

    #tree-container {
      margin: 0 20px 20px;
      overflow: auto;
    }

    .code-block {
      background: var(--bg-darker);
      border: 1px solid var(--border);
      border-radius: 8px;
      padding: 16px;
      font-family: 'JetBrains Mono', 'Courier New', monospace;
      font-size: 13px;
      line-height: 1.6;
    }

    .code-line { padding: 4px 12px; border-radius: 6px; white-space: pre; }

    .code-line.highlight {
      background: linear-gradient(90deg, rgba(6, 182, 212, 0.15) 0%, transparent 100%);
      border-left: 3px solid var(--accent-cyan);
      padding-left: 9px;
      box-shadow: 0 0 20px var(--glow-cyan);
    }

    .explanation-text { color: var(--text-secondary); line-height: 1.8; font-size: 14px; font-family: 'JetBrains Mono', monospace; }
    .explanation-text strong { color: var(--text-primary); }

    .stack-frame {
      font-family: 'JetBrains Mono', monospace;
      font-size: 12px;
      padding: 8px;
      margin-bottom: 6px;
      border-radius: 6px;
      border: 1px solid var(--border);
      background: var(--bg-darker);
    }
    .stack-frame.current { border-color: var(--accent-cyan); color: var(--accent-cyan); font-weight: 700; }
    .stack-empty { color: var(--text-secondary); text-align: center; padding: 16px; }

    .panel {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 18px;
      margin-bottom: 16px;
    }

    .button-row { display: flex; gap: 8px; margin-bottom: 12px; }

    button {
      background: linear-gradient(135deg, var(--accent-cyan), var(--accent-teal));
      color: #fff;
      border: none;
      padding: 10px 14px;
      border-radius: 8px;
      cursor: pointer;
      font-size: 13px;
      font-weight: 600;
      font-family: 'DM Sans', sans-serif;
    }
    button:disabled { opacity: 0.4; cursor: not-allowed; }
    .btn-primary { background: linear-gradient(135deg, var(--accent-emerald), #059669); width: 100%; margin-top: 10px; }

    select, input[type="number"] {
      width: 100%;
      padding: 10px 12px;
      margin: 6px 0;
      background: var(--bg-darker);
      border: 1px solid var(--border);
      border-radius: 8px;
      color: var(--text-primary);
      font-size: 13px;
    }

    label {
      display: block;
      margin: 10px 0 4px;
      font-size: 12px;
      color: var(--text-secondary);
      text-transform: uppercase;
    }

    .step-info {
      font-size: 13px;
      margin: 10px 0;
      color: var(--text-secondary);
      font-family: 'JetBrains Mono', monospace;
      padding: 8px 12px;
      background: var(--bg-darker);
      border-radius: 6px;
      border-left: 3px solid var(--accent-cyan);
    }

    .finished-badge {
      background: linear-gradient(135deg, var(--accent-emerald), #059669);
      color: #fff;
      padding: 4px 10px;
      border-radius: 6px;
      font-size: 11px;
      font-weight: 700;
    }

    table { width: 100%; font-size: 13px; }
    table td { padding: 6px 4px; }
    table td:first-child { color: var(--text-secondary); }
    table td:last-child { text-align: right; color: var(--accent-cyan); font-family: 'JetBrains Mono', monospace; }

    .hint, .placeholder { font-size: 12px; color: var(--text-muted); margin-top: 8px; font-style: italic; }
  </style>
</head>
<body>
  <div id="sidebar">
    <div id="disks">{{ disks|safe }}</div>
    <div id="playback">{{ playback|safe }}</div>
    <div id="analytics">{{ analytics|safe }}</div>
    <a href="/api/trace/export" class="hint">Download trace (JSON)</a>
  </div>

  <div id="main">
    <div id="rods-container"><div id="rods">{{ rods|safe }}</div></div>

    <div id="middle-panel">
      <div class="box">
        <h3>Current Action</h3>
        <div id="explanation">{{ explanation|safe }}</div>
      </div>
      <div class="box">
        <h3>Call Stack</h3>
        <div id="call-stack">{{ call_stack|safe }}</div>
      </div>
      <div class="box">
        <h3>Pseudocode</h3>
        <div id="pseudocode">{{ pseudocode|safe }}</div>
      </div>
    </div>

    <div id="tree-container" class="box">
      <h3>Recursion Tree</h3>
      <div id="tree">{{ tree|safe }}</div>
    </div>
  </div>

  <script>
    let generation = {{ generation }};
    let intervalMs = {{ interval_ms }};
    let timer = null;
    let pendingTick = null;
    let tickAbort = null;

    async function post(url, data, signal) {
      const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(data || {}),
        signal: signal,
      });
      return await res.json();
    }

    function render(data) {
      if (data.error) return;
      for (const id of ['rods', 'tree', 'pseudocode', 'explanation', 'playback', 'analytics']) {
        if (data[id] !== undefined) document.getElementById(id).innerHTML = data[id];
      }
      if (data.call_stack !== undefined) document.getElementById('call-stack').innerHTML = data.call_stack;
      if (data.generation !== undefined) generation = data.generation;
      if (data.interval_ms !== undefined) intervalMs = data.interval_ms;
      const input = document.getElementById('num-disks');
      if (input && data.is_playing !== undefined) input.disabled = data.is_playing;
      if (!data.is_playing) stopTimer();
    }

    function stopTimer() {
      if (timer !== null) clearInterval(timer);
      timer = null;
      if (tickAbort !== null) tickAbort.abort();
      return pendingTick || Promise.resolve();
    }

    async function sendTick(started) {
      tickAbort = new AbortController();
      try {
        const data = await post('/api/play/tick', {generation: started}, tickAbort.signal);
        // a reset since this tick was sent owns the page now
        if (started === generation && data.generation === generation) render(data);
      } catch (err) {
        if (err.name !== 'AbortError') throw err;
      } finally {
        tickAbort = null;
        pendingTick = null;
      }
    }

    function startTimer() {
      stopTimer();
      const started = generation;
      timer = setInterval(() => {
        if (pendingTick === null) pendingTick = sendTick(started);
      }, intervalMs);
    }

    document.addEventListener('click', async (e) => {
      const id = e.target.id;
      if (id === 'btn-reset') {
        await stopTimer();
        render(await post('/api/reset', {disks: +document.getElementById('num-disks').value}));
      } else if (id === 'btn-next') {
        render(await post('/api/step/next'));
      } else if (id === 'btn-prev') {
        render(await post('/api/step/prev'));
      } else if (id === 'btn-play') {
        const data = await post('/api/play');
        render(data);
        if (data.is_playing) startTimer();
      }
    });

    document.addEventListener('change', async (e) => {
      if (e.target.id === 'num-disks') {
        const data = await post('/api/config/disks', {disks: +e.target.value});
        if (data.num_disks !== undefined) e.target.value = data.num_disks;
        render(data);
      } else if (e.target.id === 'speed-selector') {
        const data = await post('/api/config/speed', {speed: e.target.value});
        if (data.interval_ms !== undefined) intervalMs = data.interval_ms;
        if (timer !== null) { await stopTimer(); startTimer(); }
      }
    });

    if ({{ is_playing }}) startTimer();
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    main()
