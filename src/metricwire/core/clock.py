"""Clock implementations used to timestamp samples."""

import threading
import time


class SystemClock:
    """Wall clock reporting whole Unix seconds."""

    def now(self) -> int:
        """Return the current Unix time in whole seconds."""
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to.

    Starts at the Unix epoch unless given another start time, which keeps
    timestamps in tests fully deterministic.

    Example:
        ```python
        clock = ManualClock()
        clock.advance(5)
        assert clock.now() == 5
        ```
    """

    def __init__(self, start: int = 0) -> None:
        self._now = start
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            return self._now

    def advance(self, seconds: int) -> None:
        """Move the clock forward by the given number of seconds.

        Raises:
            ValueError: If seconds is negative.
        """
        if seconds < 0:
            raise ValueError("clock cannot move backwards")
        with self._lock:
            self._now += seconds

    def set(self, timestamp: int) -> None:
        """Jump the clock to an absolute timestamp."""
        with self._lock:
            self._now = timestamp
