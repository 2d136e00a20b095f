"""Thread-safe counters for timeouts and failed connections."""

from __future__ import annotations

import threading


class ErrorCount:
    """Counts timeouts and other errors across threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timeout_count = 0
        self._error_count = 0

    def reset(self) -> None:
        """Set both counters back to zero."""
        with self._lock:
            self._timeout_count = 0
            self._error_count = 0

    def timeout(self) -> None:
        """Record one timeout."""
        with self._lock:
            self._timeout_count += 1

    def error(self) -> None:
        """Record one error."""
        with self._lock:
            self._error_count += 1

    def get_timeout(self) -> int:
        """Return the number of recorded timeouts."""
        with self._lock:
            return self._timeout_count

    def get_error(self) -> int:
        """Return the number of recorded errors."""
        with self._lock:
            return self._error_count