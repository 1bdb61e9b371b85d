"""
Logical clock supplying the recorded-at value of measurements
"""

import threading


class LogicalClock:
    """Monotonic sequence counter, the service's equivalent of a block height"""

    def __init__(self, start: int = 0):
        self._height = start
        self._lock = threading.Lock()

    @property
    def height(self) -> int:
        with self._lock:
            return self._height

    def tick(self) -> int:
        """Advance the clock and return the new height"""
        with self._lock:
            self._height += 1
            return self._height

    def advance_to(self, height: int) -> None:
        """Move forward to at least height (used after replaying the journal)"""
        with self._lock:
            if height > self._height:
                self._height = height
