"""Chronological ordering keys for source records.

This module derives the comparable timestamp used by date pre-sorting.
Blank times sort as midnight; the stored row time is never affected.
"""

from __future__ import annotations

from datetime import datetime, time

from core.types import SourceRecord
from ingest.record_extractor import is_header, parse_observation_date, parse_observation_time


def ordering_key(record: SourceRecord) -> datetime:
    """Return the sort key for one source record.

    Args:
        record: Tokenized source record.

    Returns:
        ``datetime.min`` for the header, else date combined with time,
        using midnight when the time column is blank.

    Raises:
        MalformedRecordError: If the date or time cannot be parsed.
    """
    if is_header(record):
        return datetime.min
    observation_date = parse_observation_date(record)
    observation_time = parse_observation_time(record)
    if observation_time is None:
        observation_time = time.min
    return datetime.combine(observation_date, observation_time)
