import threading

from engine import Navigator, Ticker


def test_ticker_stops_when_callback_says_so():
    calls = []

    def tick():
        calls.append(1)
        return len(calls) < 3

    ticker = Ticker(tick, interval_ms=5)
    ticker.start()
    assert ticker.wait(2)
    assert len(calls) == 3
    assert not ticker.running


def test_cancel_before_first_tick():
    fired = threading.Event()
    ticker = Ticker(lambda: fired.set() or True, interval_ms=10_000)
    ticker.start()
    assert ticker.running
    ticker.cancel()
    assert ticker.wait(0)
    assert not ticker.running
    assert not fired.wait(0.05)


def test_callback_can_cancel_its_own_ticker():
    calls = []
    ticker = None

    def tick():
        calls.append(1)
        ticker.cancel()
        return True

    ticker = Ticker(tick, interval_ms=5)
    ticker.start()
    assert ticker.wait(2)
    assert calls == [1]


def test_ticker_drives_navigator_to_the_end():
    nav = Navigator()
    nav.reset(2)
    nav.play()
    generation = nav.generation

    ticker = Ticker(lambda: nav.play_tick(generation) and nav.is_playing, interval_ms=5)
    ticker.start()
    assert ticker.wait(5)
    assert nav.is_finished
    assert not nav.is_playing


def test_reset_mid_play_stops_stale_ticker():
    nav = Navigator()
    nav.reset(3)
    nav.play()
    generation = nav.generation
    ticker = Ticker(lambda: nav.play_tick(generation) and nav.is_playing, interval_ms=5)

    nav.reset(3)
    nav.play()
    ticker.start()
    assert ticker.wait(2)
    assert nav.cursor == 0
