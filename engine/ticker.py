"""
ticker.py — Cancelable Auto-Play Timer
========================================
A repeating timer that drives Navigator.play_tick() outside the browser
(the terminal player uses it; the web UI uses setInterval instead).

    ticker = Ticker(lambda: nav.play_tick(gen) and nav.is_playing, interval_ms=800)
    ticker.start()
    ticker.wait()            # returns once the callback says stop

The callback returns True to keep ticking, False to halt.

Cancellation:
  Each start() and cancel() bumps a private token.  A timer thread that
  wakes up holding an old token does nothing, and callbacks run under the
  same lock cancel() takes, so once cancel() returns no tick can land.
"""

import logging
import threading
from typing import Callable, Optional


logger = logging.getLogger(__name__)


class Ticker:
    """
    Attributes:
        callback    : Called once per tick; a falsy return stops the ticker.
        interval_ms : Delay between ticks.
    """

    def __init__(self, callback: Callable[[], bool], interval_ms: float = 800):
        self.callback    = callback
        self.interval_ms = interval_ms

        self._lock    = threading.RLock()
        self._timer:  Optional[threading.Timer] = None
        self._token   = 0
        self._running = False
        self._stopped = threading.Event()
        self._stopped.set()

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------
    def start(self) -> None:
        with self._lock:
            self._halt()
            self._token   += 1
            self._running  = True
            self._stopped.clear()
            self._schedule(self._token)

    def cancel(self) -> None:
        with self._lock:
            if self._running:
                logger.debug("Ticker cancelled")
            self._halt()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the ticker stops.  Returns False on timeout."""
        return self._stopped.wait(timeout)

    @property
    def running(self) -> bool:
        return self._running

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _schedule(self, token: int) -> None:
        timer = threading.Timer(self.interval_ms / 1000.0, self._fire, args=(token,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _halt(self) -> None:
        self._token += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._running = False
        self._stopped.set()

    def _fire(self, token: int) -> None:
        with self._lock:
            if token != self._token or not self._running:
                return
            try:
                keep_going = self.callback()
            except Exception:
                logger.exception("Tick callback failed; stopping ticker")
                self._halt()
                raise
            if token != self._token:
                return      # the callback cancelled or restarted us
            if keep_going:
                self._schedule(token)
            else:
                self._halt()
