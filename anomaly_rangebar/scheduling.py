from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable


@dataclass
class DeferredCall:
    """One-shot callback handle returned by ``DeferredQueue.call_later``."""

    callback: Callable[[], None]
    due_tick: int
    cancelled: bool = False
    fired: bool = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class DeferredQueue:
    """Tick-driven queue of deferred callbacks for a single-threaded host loop."""

    tick_count: int = 0
    _calls: list[DeferredCall] = field(default_factory=list)

    def call_later(self, callback: Callable[[], None], ticks: int = 1) -> DeferredCall:
        if ticks < 1:
            raise ValueError("ticks must be >= 1")
        call = DeferredCall(callback=callback, due_tick=self.tick_count + ticks)
        self._calls.append(call)
        return call

    def advance(self) -> int:
        """Run calls due by the new tick in FIFO order.

        If a callback raises, the exception propagates and the calls after it
        stay queued for the next ``advance()``.
        """
        self.tick_count += 1
        due = [c for c in self._calls if c.due_tick <= self.tick_count and c.pending]
        fired = 0
        try:
            for call in due:
                if call.cancelled:
                    continue
                call.fired = True
                call.callback()
                fired += 1
        finally:
            self._calls = [c for c in self._calls if c.pending]
        return fired

    def pending_count(self) -> int:
        return sum(1 for c in self._calls if c.pending)
