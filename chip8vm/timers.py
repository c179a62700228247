"""Delay/sound countdown timers and their wall-clock schedule."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from .constants import TIMER_HZ

Clock = Callable[[], float]


@dataclass
class Timers:
    """The two 8-bit countdown counters."""

    delay: int = 0
    sound: int = 0

    def tick(self) -> None:
        """Decrement each counter by one, flooring at zero."""
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1

    def set_delay(self, value: int) -> None:
        self.delay = value & 0xFF

    def set_sound(self, value: int) -> None:
        self.sound = value & 0xFF

    @property
    def sound_active(self) -> bool:
        return self.sound > 0

    def reset(self) -> None:
        self.delay = 0
        self.sound = 0


@dataclass
class TimerClock:
    """Deterministic 60 Hz schedule driven by an injectable clock.

    ``advance()`` samples the clock, accumulates the elapsed time and returns
    how many whole timer periods are due.  Callers that can only apply one
    tick per step use ``consume()`` so that the remaining periods carry over.
    """

    hz: int = TIMER_HZ
    clock: Clock = time.perf_counter
    enabled: bool = True
    _accumulated: float = field(default=0.0, init=False, repr=False)
    _last: float = field(default=0.0, init=False, repr=False)

    def __post_init__(self) -> None:
        self.hz = int(self.hz)
        if self.hz <= 0:
            raise ValueError(f"Timer frequency must be positive, got {self.hz}")
        self._last = self.clock()

    @property
    def period(self) -> float:
        return 1.0 / self.hz

    @property
    def accumulated(self) -> float:
        return self._accumulated

    def reset(self) -> None:
        """Drop any pending time and restart from the current clock reading."""

        self._accumulated = 0.0
        self._last = self.clock()

    def advance(self) -> int:
        """Accumulate elapsed wall-clock time and return due periods."""

        now = self.clock()
        elapsed = now - self._last
        self._last = now
        if not self.enabled or elapsed <= 0:
            return self.pending()
        self._accumulated += elapsed
        return self.pending()

    def pending(self) -> int:
        return int(self._accumulated // self.period)

    def consume(self, limit: int = 1) -> int:
        """Take at most ``limit`` due periods off the accumulator.

        The backlog left behind is capped at one period so a host that stalls
        for a long time does not see a burst of catch-up decrements.
        """

        taken = min(self.pending(), limit)
        self._accumulated -= taken * self.period
        self._accumulated = min(self._accumulated, self.period)
        return taken


__all__ = ["Clock", "TimerClock", "Timers"]
