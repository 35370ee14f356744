"""Monotonic request generations for discarding superseded work."""

import threading


class RequestGeneration:
    """Counter bumped by every new request; older tokens become stale."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def begin(self) -> int:
        """Start a new generation and return its token."""
        with self._lock:
            self._value += 1
            return self._value

    @property
    def current(self) -> int:
        with self._lock:
            return self._value

    def is_current(self, token: int) -> bool:
        return token == self.current
