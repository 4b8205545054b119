"""Per-run delivered-row counter."""

from __future__ import annotations

import threading


class ProgressCounter:
    """Thread-safe count of rows delivered to the handler in one run."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def reset(self) -> None:
        """Reset the count to zero at the start of a run."""
        with self._lock:
            self._value = 0

    def increment(self) -> None:
        """Record one delivered row."""
        with self._lock:
            self._value += 1

    @property
    def value(self) -> int:
        """Current delivered-row count."""
        with self._lock:
            return self._value
