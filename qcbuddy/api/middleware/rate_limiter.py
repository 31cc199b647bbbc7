"""
AI call budget.

A fixed one-minute window caps how many requests may use the generator.
Requests over budget are still answered, offline.
"""

import threading
import time
from typing import Callable, Dict

WINDOW_SECONDS = 60.0


class CallBudget:
    """
    Fixed-window counter shared by all requests of one app.

    Args:
        max_per_minute: Calls allowed per window. Zero disables generation.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        max_per_minute: int = 30,
        clock: Callable[[], float] = time.monotonic,
        window_seconds: float = WINDOW_SECONDS,
    ) -> None:
        if max_per_minute < 0:
            raise ValueError("max_per_minute must be >= 0")
        self.max_per_minute = max_per_minute
        self.window_seconds = window_seconds
        self._clock = clock
        self._window_start = clock()
        self._count = 0
        self._lock = threading.Lock()

    def _roll(self, now: float) -> None:
        if now - self._window_start >= self.window_seconds:
            self._window_start = now
            self._count = 0

    def try_acquire(self) -> bool:
        """Consume one call if the current window has budget left."""
        with self._lock:
            self._roll(self._clock())
            if self._count >= self.max_per_minute:
                return False
            self._count += 1
            return True

    @property
    def remaining(self) -> int:
        with self._lock:
            self._roll(self._clock())
            return max(0, self.max_per_minute - self._count)

    def snapshot(self) -> Dict[str, int]:
        return {"maxPerMin": self.max_per_minute, "remaining": self.remaining}
