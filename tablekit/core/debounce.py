"""Keyed debounce scheduling for coalescing rapid state changes."""

import asyncio
import time
from typing import Any, Callable, Dict, Hashable, List, Optional

FlushCallback = Callable[[Hashable, Any], None]


class _PendingFlush:
    __slots__ = ("value", "deadline", "handle")

    def __init__(self, value: Any, deadline: float, handle: Any = None):
        self.value = value
        self.deadline = deadline
        self.handle = handle


class DebounceScheduler:
    """
    Coalesces repeated schedule() calls per key into a single flush.

    Each schedule() call replaces the pending value for its key and restarts
    the key's window. When a window elapses without another call for that
    key, ``flush(key, value)`` is called once with the latest value;
    intermediate values are dropped.

    This implementation is cooperative: nothing fires on its own. The host's
    event loop calls run_pending(), which fires every key whose deadline has
    passed. Use AsyncioDebounceScheduler to have flushes fire on an asyncio
    loop instead.

    Example:
        scheduler = DebounceScheduler(on_flush)
        scheduler.schedule("search", "a", 300)
        scheduler.schedule("search", "ab", 300)
        ...
        scheduler.run_pending()  # after 300 ms: on_flush("search", "ab")
    """

    def __init__(
        self,
        flush: FlushCallback,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the scheduler.

        Args:
            flush: Called as ``flush(key, value)`` when a key's window elapses
            clock: Monotonic clock returning seconds. Injectable so hosts can
                drive time explicitly.
        """
        self._flush = flush
        self._clock = clock
        self._pending: Dict[Hashable, _PendingFlush] = {}

    def schedule(self, key: Hashable, value: Any, delay_ms: float) -> None:
        """
        Schedule ``value`` for ``key``, cancelling any pending timer for it.

        Args:
            key: Coalescing key
            value: Value delivered to flush() if no newer call arrives
            delay_ms: Window length in milliseconds (negative means 0)
        """
        delay = max(float(delay_ms), 0.0) / 1000.0
        existing = self._pending.pop(key, None)
        if existing is not None:
            self._disarm(existing)

        entry = _PendingFlush(value, self._clock() + delay)
        self._pending[key] = entry
        entry.handle = self._arm(key, entry, delay)

    def cancel(self, key: Hashable) -> bool:
        """Drop the pending value for ``key``. Returns True if one existed."""
        entry = self._pending.pop(key, None)
        if entry is None:
            return False
        self._disarm(entry)
        return True

    def cancel_all(self) -> None:
        """Clear every pending timer without flushing anything."""
        pending = list(self._pending.values())
        self._pending.clear()
        for entry in pending:
            self._disarm(entry)

    def has_pending(self, key: Optional[Hashable] = None) -> bool:
        if key is None:
            return bool(self._pending)
        return key in self._pending

    def pending_keys(self) -> List[Hashable]:
        return list(self._pending.keys())

    def next_deadline(self) -> Optional[float]:
        """Clock time of the earliest pending flush, or None when idle."""
        if not self._pending:
            return None
        return min(entry.deadline for entry in self._pending.values())

    def run_pending(self) -> int:
        """
        Fire every flush whose deadline has passed, earliest first.

        Returns:
            Number of flushes fired
        """
        now = self._clock()
        due = sorted(
            (entry.deadline, index, key)
            for index, (key, entry) in enumerate(self._pending.items())
            if entry.deadline <= now
        )
        fired = 0
        for _, _, key in due:
            # A previous flush may have rescheduled or cancelled this key.
            entry = self._pending.get(key)
            if entry is None or entry.deadline > now:
                continue
            self._fire(key, entry)
            fired += 1
        return fired

    def _fire(self, key: Hashable, entry: _PendingFlush) -> None:
        # Ignore timers belonging to an entry that was replaced or cancelled.
        if self._pending.get(key) is not entry:
            return
        del self._pending[key]
        self._disarm(entry)
        self._flush(key, entry.value)

    def _arm(self, key: Hashable, entry: _PendingFlush, delay: float) -> Any:
        """Start a timer for ``entry``. Polling schedulers have nothing to arm."""
        return None

    def _disarm(self, entry: _PendingFlush) -> None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(pending={self.pending_keys()})"


class AsyncioDebounceScheduler(DebounceScheduler):
    """
    Debounce scheduler whose flushes fire on an asyncio event loop.

    Timers are armed with ``loop.call_later`` so no polling is needed. The
    loop defaults to the running loop at construction time; construct it
    inside a coroutine or pass ``loop`` explicitly.
    """

    def __init__(
        self,
        flush: FlushCallback,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        if loop is None:
            loop = asyncio.get_running_loop()
        self._loop = loop
        super().__init__(flush, clock=loop.time)

    def _arm(self, key: Hashable, entry: _PendingFlush, delay: float) -> Any:
        return self._loop.call_later(delay, self._fire, key, entry)

    def _disarm(self, entry: _PendingFlush) -> None:
        if entry.handle is not None:
            entry.handle.cancel()
