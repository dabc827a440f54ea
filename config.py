"""
config.py — Application Settings
=================================
Defaults for the web app and the terminal player.  Flask loads this class
with `app.config.from_object(Config)` and then lets any `HANOI_<NAME>`
environment variable override a key (`app.config.from_prefixed_env`).

Visual settings (colours, sizes) live in ui.canvas.CanvasConfig instead.
"""

from hanoi import MAX_TRACE_DISKS


class Config:
    # disk-count input range offered by the UI
    MIN_DISKS:        int = 1
    MAX_DISKS:        int = 8
    DEFAULT_DISKS:    int = 3

    # auto-play
    TICK_INTERVAL_MS: int = 800
    DEFAULT_SPEED:    str = "medium"

    LOG_LEVEL:        str = "INFO"

    # None → main.py generates a random key at startup
    SECRET_KEY = None


def clamp_disk_count(value, lo: int = Config.MIN_DISKS, hi: int = Config.MAX_DISKS) -> int:
    """
    Coerce user input into [lo, hi].  Anything that is not a number falls
    back to `lo`, the same way an empty form field does.
    """
    try:
        n = int(value)
    except (TypeError, ValueError):
        n = lo
    return max(lo, min(hi, MAX_TRACE_DISKS, n))
