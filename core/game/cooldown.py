"""Debounce policy for player commands."""

import time
from typing import Callable

Clock = Callable[[], float]


class ActionCooldown:
    """
    Reject commands that arrive too soon after the last accepted one.

    The clock returns seconds and is injectable so tests can control time.
    """

    def __init__(self, window_ms: int = 500, clock: Clock = time.monotonic) -> None:
        """
        Initialize the cooldown.

        Args:
            window_ms: Minimum gap between accepted commands, in milliseconds
            clock: Monotonic time source returning seconds
        """
        if window_ms < 0:
            raise ValueError("Cooldown window cannot be negative")
        self._window = window_ms / 1000
        self._clock = clock
        self._last_accepted: float | None = None

    @property
    def window_ms(self) -> int:
        return round(self._window * 1000)

    def ready(self) -> bool:
        """Check whether a command would be accepted now."""
        if self._last_accepted is None:
            return True
        return self._clock() - self._last_accepted >= self._window

    def try_acquire(self) -> bool:
        """Accept a command if the window has elapsed, starting a new window."""
        if not self.ready():
            return False
        self._last_accepted = self._clock()
        return True

    def reset(self) -> None:
        """Forget the last accepted command."""
        self._last_accepted = None
