"""
engine/
-------
Playback & recording layer.

    from engine import Navigator, Ticker, Recorder, load_trace
"""

from engine.navigator import Navigator, PlaybackState, SPEED_PRESETS
from engine.recorder  import Recorder, TraceMetrics, load_trace
from engine.ticker    import Ticker

__all__ = [
    "Navigator",
    "PlaybackState",
    "SPEED_PRESETS",
    "Recorder",
    "TraceMetrics",
    "load_trace",
    "Ticker",
]
