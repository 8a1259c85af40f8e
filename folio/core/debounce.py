from __future__ import annotations

from dataclasses import dataclass, field
import heapq
import itertools
from typing import Callable, Protocol

from loguru import logger


class ScheduledCall(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall: ...


@dataclass(order=True, slots=True)
class _VirtualCall:
    due_ms: int
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class VirtualScheduler:
    """Scheduler driven by an explicit virtual clock.

    Nothing fires until ``advance`` moves the clock past a call's due time.
    Calls due at the same instant fire in the order they were scheduled.
    """

    def __init__(self) -> None:
        self._now_ms = 0
        self._queue: list[_VirtualCall] = []
        self._seq = itertools.count()

    @property
    def now(self) -> int:
        return self._now_ms

    @property
    def pending_count(self) -> int:
        return sum(1 for call in self._queue if not call.cancelled)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> _VirtualCall:
        call = _VirtualCall(self._now_ms + max(0, delay_ms), next(self._seq), callback)
        heapq.heappush(self._queue, call)
        return call

    def advance(self, ms: int) -> None:
        target = self._now_ms + ms
        while self._queue and self._queue[0].due_ms <= target:
            call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            self._now_ms = call.due_ms
            call.callback()
        self._now_ms = target


class DebounceTimer:
    """Runs an action once after a quiet period.

    Every ``arm`` cancels the previous pending call, so a burst of arms
    collapses into one firing ``delay_ms`` after the last of them.
    """

    def __init__(self, scheduler: Scheduler, name: str = "debounce") -> None:
        self._scheduler = scheduler
        self._name = name
        self._pending: ScheduledCall | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def arm(self, delay_ms: int, action: Callable[[], None]) -> None:
        self.cancel()

        def fire() -> None:
            if self._pending is not handle:
                return
            self._pending = None
            logger.debug(f"Debounce '{self._name}' fired")
            action()

        handle = self._scheduler.call_later(delay_ms, fire)
        self._pending = handle

    def cancel(self) -> None:
        if self._pending is None:
            return
        self._pending.cancel()
        self._pending = None
