"""Timers with cancellable handles.

`LoopScheduler` schedules on the asyncio event loop, `ManualScheduler` keeps a
virtual clock that only moves on `advance()` (tests, offline runs). Both
provide

- `call_later(delay_s, callback, *args)` -> handle with `cancel()`
- `call_every(interval_s, callback, *args)` -> handle with `cancel()`
- `time()` in seconds
"""

import asyncio
import heapq
import itertools


class Repeating:
    """Re-arms `callback` every `interval` seconds until cancelled."""

    def __init__(self, scheduler, interval, callback, args):
        self.scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.handle = scheduler.call_later(interval, self._fire)

    def _fire(self):
        if self.cancelled:
            return
        self.handle = self.scheduler.call_later(self.interval, self._fire)
        self.callback(*self.args)

    def cancel(self):
        self.cancelled = True
        self.handle.cancel()


class LoopScheduler:

    def __init__(self, loop=None):
        self.loop = loop

    def _loop(self):
        return self.loop or asyncio.get_event_loop()

    def time(self):
        return self._loop().time()

    def call_later(self, delay, callback, *args):
        return self._loop().call_later(max(0., delay), callback, *args)

    def call_every(self, interval, callback, *args):
        return Repeating(self, interval, callback, args)


class ManualHandle:

    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Deterministic clock; callbacks run in (due time, arming order)."""

    def __init__(self, t0=0.):
        self.now = t0
        self.queue = []
        self.counter = itertools.count()

    def time(self):
        return self.now

    def call_later(self, delay, callback, *args):
        handle = ManualHandle(self.now + max(0., delay), callback, args)
        heapq.heappush(self.queue, (handle.when, next(self.counter), handle))
        return handle

    def call_every(self, interval, callback, *args):
        return Repeating(self, interval, callback, args)

    def pending(self):
        """Number of armed, non-cancelled callbacks."""
        return sum(1 for _, _, handle in self.queue if not handle.cancelled)

    def advance(self, secs, max_calls=100000):
        """Moves the clock by `secs`, running everything that comes due."""
        until = self.now + secs
        calls = 0
        while self.queue and self.queue[0][0] <= until:
            when, _, handle = heapq.heappop(self.queue)
            if handle.cancelled:
                continue
            self.now = max(self.now, when)
            handle.callback(*handle.args)
            calls += 1
            if calls >= max_calls:
                raise RuntimeError(f'More than {max_calls} callbacks')
        self.now = until
