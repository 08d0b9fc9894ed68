"""Tests for the keyed debounce schedulers."""

import asyncio

from tablekit.core.debounce import AsyncioDebounceScheduler, DebounceScheduler


class TestDebounceScheduler:
    """Tests for the polling scheduler driven by an injected clock."""

    def _make(self, clock):
        flushed = []
        scheduler = DebounceScheduler(lambda key, value: flushed.append((key, value)), clock=clock)
        return scheduler, flushed

    def test_rapid_calls_coalesce_into_latest_value(self, clock):
        """Five calls inside the window produce one flush with the fifth value."""
        scheduler, flushed = self._make(clock)

        for i in range(1, 6):
            scheduler.schedule("search", f"v{i}", 300)
            clock.advance_ms(50)

        assert scheduler.run_pending() == 0
        assert flushed == []

        clock.advance_ms(300)
        assert scheduler.run_pending() == 1
        assert flushed == [("search", "v5")]
        assert not scheduler.has_pending()

    def test_each_call_restarts_the_window(self, clock):
        scheduler, flushed = self._make(clock)

        scheduler.schedule("k", 1, 300)
        clock.advance_ms(250)
        scheduler.schedule("k", 2, 300)
        clock.advance_ms(250)

        assert scheduler.run_pending() == 0
        clock.advance_ms(50)
        scheduler.run_pending()
        assert flushed == [("k", 2)]

    def test_keys_are_independent(self, clock):
        scheduler, flushed = self._make(clock)

        scheduler.schedule("a", "x", 100)
        scheduler.schedule("b", "y", 300)
        clock.advance_ms(150)
        scheduler.run_pending()

        assert flushed == [("a", "x")]
        assert scheduler.pending_keys() == ["b"]

    def test_due_keys_fire_in_deadline_order(self, clock):
        scheduler, flushed = self._make(clock)

        scheduler.schedule("late", 1, 200)
        scheduler.schedule("early", 2, 100)
        clock.advance_ms(500)
        scheduler.run_pending()

        assert [key for key, _ in flushed] == ["early", "late"]

    def test_cancel_all_drops_everything(self, clock):
        scheduler, flushed = self._make(clock)

        scheduler.schedule("a", 1, 100)
        scheduler.schedule("b", 2, 100)
        scheduler.cancel_all()
        clock.advance_ms(1000)

        assert scheduler.run_pending() == 0
        assert flushed == []

    def test_cancel_single_key(self, clock):
        scheduler, flushed = self._make(clock)

        scheduler.schedule("a", 1, 100)
        assert scheduler.cancel("a") is True
        assert scheduler.cancel("a") is False
        clock.advance_ms(200)
        scheduler.run_pending()

        assert flushed == []

    def test_next_deadline(self, clock):
        scheduler, _ = self._make(clock)

        assert scheduler.next_deadline() is None
        scheduler.schedule("a", 1, 300)
        scheduler.schedule("b", 1, 100)
        assert scheduler.next_deadline() == 0.1

    def test_zero_delay_is_due_immediately(self, clock):
        scheduler, flushed = self._make(clock)

        scheduler.schedule("a", 1, 0)
        assert scheduler.run_pending() == 1
        assert flushed == [("a", 1)]


class TestAsyncioDebounceScheduler:
    """Tests for the scheduler firing on an asyncio loop."""

    def test_coalesces_on_event_loop(self):
        flushed = []

        async def scenario():
            scheduler = AsyncioDebounceScheduler(lambda key, value: flushed.append(value))
            for i in range(5):
                scheduler.schedule("search", i, 20)
            await asyncio.sleep(0.1)
            return scheduler

        scheduler = asyncio.run(scenario())

        assert flushed == [4]
        assert not scheduler.has_pending()

    def test_cancel_all_prevents_flush(self):
        flushed = []

        async def scenario():
            scheduler = AsyncioDebounceScheduler(lambda key, value: flushed.append(value))
            scheduler.schedule("search", "x", 20)
            scheduler.cancel_all()
            await asyncio.sleep(0.06)

        asyncio.run(scenario())

        assert flushed == []

    def test_replaced_timer_does_not_fire_newer_entry_early(self):
        flushed = []

        async def scenario():
            loop = asyncio.get_running_loop()
            scheduler = AsyncioDebounceScheduler(
                lambda key, value: flushed.append((value, loop.time())), loop=loop
            )
            start = loop.time()
            scheduler.schedule("k", "old", 30)
            await asyncio.sleep(0.01)
            scheduler.schedule("k", "new", 60)
            await asyncio.sleep(0.12)
            return start

        start = asyncio.run(scenario())

        assert [value for value, _ in flushed] == ["new"]
        assert flushed[0][1] - start >= 0.06
