import asyncio
from blinkkit.runtime.scheduler import ManualScheduler, AsyncioScheduler

def test_manual_runs_pending_once():
    s = ManualScheduler(); calls = []
    s.request(lambda: calls.append(1))
    assert s.tick() and calls == [1]
    assert not s.tick() and calls == [1]

def test_manual_cancel_drops_only_current_handle():
    s = ManualScheduler(); calls = []
    old = s.request(lambda: calls.append("old"))
    s.request(lambda: calls.append("new"))
    s.cancel(old)
    assert s.pending
    h = s.request(lambda: calls.append("x"))
    s.cancel(h)
    assert not s.pending and s.run() == 0 and calls == []

def test_manual_run_follows_rescheduling():
    s = ManualScheduler(); n = {"i": 0}
    def cb():
        n["i"] += 1
        if n["i"] < 5: s.request(cb)
    s.request(cb)
    assert s.run() == 5
    s.request(cb)
    assert s.run(max_ticks=0) == 0

def test_asyncio_cancel_prevents_call():
    calls = []
    async def main():
        s = AsyncioScheduler(fps=200)
        h = s.request(lambda: calls.append("a"))
        s.cancel(h)
        s.request(lambda: calls.append("b"))
        await asyncio.sleep(0.05)
    asyncio.run(main())
    assert calls == ["b"]
