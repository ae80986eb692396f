#!/usr/bin/env python3
"""
vehicle_ai/timers.py
====================
Deterministic one-shot timers driven by simulation time.

:class:`TimerManager` is a deadline-ordered event queue.  The world
advances it once per tick; due callbacks fire synchronously inside that
call, so they never run concurrently with a controller tick.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

log = logging.getLogger("timers")


@dataclass(eq=False)
class TimerHandle:
    """Reference to a scheduled callback returned by :meth:`TimerManager.set_timer`."""

    deadline: float
    callback: Callable[[], None] = field(repr=False)
    cancelled: bool = False
    fired: bool = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)


class TimerManager:
    """Schedules callbacks at absolute simulation times.

    Parameters
    ----------
    start_time : float
        Initial clock value in seconds.
    """

    def __init__(self, start_time: float = 0.0) -> None:
        self._now = float(start_time)
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        """Current simulation time.  Equals the deadline while a callback runs."""
        return self._now

    def set_timer(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Fire *callback* once, *delay* seconds from now."""
        handle = TimerHandle(deadline=self._now + max(0.0, float(delay)), callback=callback)
        heapq.heappush(self._queue, (handle.deadline, next(self._seq), handle))
        return handle

    def clear_timer(self, handle: Optional[TimerHandle]) -> None:
        """Cancel *handle*.  Safe on ``None`` and on already fired handles."""
        if handle is not None and handle.pending:
            handle.cancelled = True

    def is_active(self, handle: Optional[TimerHandle]) -> bool:
        return handle is not None and handle.pending

    def remaining(self, handle: Optional[TimerHandle]) -> float:
        """Seconds left on *handle*, or 0 when it is not pending."""
        if not self.is_active(handle):
            return 0.0
        return max(0.0, handle.deadline - self._now)

    def pending_count(self) -> int:
        return sum(1 for _, _, h in self._queue if h.pending)

    def advance(self, dt: float) -> int:
        """Advance the clock by *dt* seconds.  Returns the number of callbacks fired."""
        return self.advance_to(self._now + max(0.0, float(dt)))

    def advance_to(self, time_s: float) -> int:
        """Fire every pending timer with ``deadline <= time_s`` in deadline order."""
        fired = 0
        while self._queue and self._queue[0][0] <= time_s:
            deadline, _, handle = heapq.heappop(self._queue)
            if not handle.pending:
                continue
            # Callbacks may reschedule relative to their own deadline.
            self._now = max(self._now, deadline)
            handle.fired = True
            handle.callback()
            fired += 1
        self._now = max(self._now, float(time_s))
        if fired:
            log.debug("t=%.3f fired %d timer(s)", self._now, fired)
        return fired
