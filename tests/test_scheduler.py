"""Tests for Debouncer and AsyncioScheduler."""

import asyncio

import pytest

from qrstudio.scheduler import AsyncioScheduler, Debouncer


class TestDebouncer:
    def test_fires_once_after_delay(self, scheduler):
        fired = []
        d = Debouncer(scheduler, 0.18, lambda: fired.append(scheduler.now))
        d.trigger()
        scheduler.advance(0.1)
        assert fired == []
        scheduler.advance(0.1)
        assert fired == [pytest.approx(0.18)]
        assert not d.pending

    def test_retrigger_restarts_window(self, scheduler):
        fired = []
        d = Debouncer(scheduler, 0.18, lambda: fired.append(scheduler.now))
        d.trigger()
        scheduler.advance(0.1)
        d.trigger()
        scheduler.advance(0.1)
        assert fired == []
        scheduler.advance(0.1)
        assert fired == [pytest.approx(0.28)]

    def test_only_one_timer_outstanding(self, scheduler):
        d = Debouncer(scheduler, 0.18, lambda: None)
        for _ in range(5):
            d.trigger()
        assert scheduler.outstanding == 1

    def test_cancel(self, scheduler):
        fired = []
        d = Debouncer(scheduler, 0.18, lambda: fired.append(1))
        d.trigger()
        d.cancel()
        scheduler.advance(1.0)
        assert fired == []
        assert not d.pending


class TestAsyncioScheduler:
    def test_debounce_on_event_loop(self):
        fired = []

        async def scenario():
            d = Debouncer(AsyncioScheduler(), 0.01, lambda: fired.append(1))
            for _ in range(3):
                d.trigger()
                await asyncio.sleep(0)
            await asyncio.sleep(0.05)

        asyncio.run(scenario())
        assert fired == [1]
