from blinkkit.runtime.rate import RateMonitor

def test_reports_after_one_second():
    rm = RateMonitor()
    out = [rm.tick(t) for t in range(0, 1000, 33)]
    assert all(o is None for o in out) and rm.fps == 0
    assert rm.tick(1000.0) == 32
    assert rm.fps == 32 and rm.frames == 0

def test_window_restarts():
    rm = RateMonitor(window_ms=100)
    for t in (0, 50, 100):
        rm.tick(t)
    assert rm.fps == 3
    rm.tick(150)
    assert rm.tick(200) == 2
