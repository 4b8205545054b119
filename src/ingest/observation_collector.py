"""Thread-safe row collecting handler."""

from __future__ import annotations

import threading

from core.types import ObservationRow
from transforms.observation_deduplication import remove_duplicate_observations


class ObservationCollector:
    """Row handler that gathers delivered observations.

    Safe to use with concurrent dispatch; appends are lock-guarded.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rows: list[ObservationRow] = []

    def __call__(self, row: ObservationRow) -> None:
        with self._lock:
            self._rows.append(row)

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)

    @property
    def rows(self) -> list[ObservationRow]:
        """Snapshot of collected rows in delivery order."""
        with self._lock:
            return list(self._rows)

    def unique_rows(self) -> list[ObservationRow]:
        """Collected rows with repeated observations removed."""
        return remove_duplicate_observations(self.rows)
