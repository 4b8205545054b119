"""Unit tests for chronological ordering keys."""

from __future__ import annotations

from datetime import datetime

import pytest

from core.errors import MalformedRecordError
from core.types import SourceRecord
from ingest.ordering import ordering_key
from ingest.record_extractor import parse_record
from tests.record_builders import build_record


def test_ordering_key_puts_header_first() -> None:
    """The header record should map to the minimum key without parsing."""
    header = SourceRecord(record_number=1, fields=("Submission ID", "Date", "Time"))

    assert ordering_key(header) == datetime.min


def test_ordering_key_combines_date_and_time() -> None:
    """Data records should sort by their combined date and time."""
    record = build_record(overrides={11: "2024-05-03", 12: "06:40 PM"})

    assert ordering_key(record) == datetime(2024, 5, 3, 18, 40)


def test_ordering_key_uses_midnight_for_blank_time_without_touching_row() -> None:
    """Blank time should sort as midnight while the row keeps no time."""
    record = build_record(overrides={12: ""})

    key = ordering_key(record)
    row = parse_record(record)

    assert key == datetime(2024, 5, 4, 0, 0)
    assert row is not None and row.time is None


def test_ordering_key_raises_for_malformed_date() -> None:
    """Malformed dates should fail key derivation like extraction does."""
    record = build_record(record_number=9, overrides={11: "2024-13-40"})

    with pytest.raises(MalformedRecordError) as error_info:
        ordering_key(record)

    assert error_info.value.record_number == 9
