"""Observation identity deduplication.

This module removes repeated observations using the row identity:
scientific name, location id, and combined observation date/time.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from core.types import ObservationRow

ObservationKey = tuple[str, str, datetime]


def remove_duplicate_observations(rows: Iterable[ObservationRow]) -> list[ObservationRow]:
    """Remove duplicate observations, keeping the first of each identity.

    Args:
        rows: Observation rows to evaluate.

    Returns:
        Ordered rows with duplicates removed.
    """
    unique_rows: list[ObservationRow] = []
    seen_keys: set[ObservationKey] = set()
    for row in rows:
        key = build_observation_key(row)
        if key in seen_keys:
            continue
        seen_keys.add(key)
        unique_rows.append(row)
    return unique_rows


def build_observation_key(row: ObservationRow) -> ObservationKey:
    """Build the identity key for one observation.

    Args:
        row: Parsed observation row.

    Returns:
        Tuple of scientific name, location id, and date/time.
    """
    return row.identity()
