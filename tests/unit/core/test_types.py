"""Unit tests for observation row identity."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time

from core.types import ObservationRow


def _row(**overrides: object) -> ObservationRow:
    row = ObservationRow(
        submission_id="S1",
        common_name="Mallard",
        scientific_name="Anas platyrhynchos",
        taxon_order=352.0,
        count_text="4",
        subnational1_code="US-MA",
        subnational2_name="Middlesex",
        location_id="L123",
        location_name="Fresh Pond",
        latitude=42.3876,
        longitude=-71.1452,
        date=date(2024, 5, 4),
        time=time(7, 15),
        protocol="eBird - Traveling Count",
        duration_minutes=45,
        complete_checklist=True,
    )
    return replace(row, **overrides)


def test_date_time_combines_date_and_time() -> None:
    """Derived date/time should join the stored date and time."""
    assert _row().date_time == datetime(2024, 5, 4, 7, 15)


def test_date_time_uses_start_of_day_without_time() -> None:
    """Rows without a time should derive the start of their date."""
    row = _row(time=None)

    assert row.date_time == datetime(2024, 5, 4, 0, 0)
    assert row.time is None


def test_rows_with_same_identity_are_equal() -> None:
    """Species, location, and date/time should define equality."""
    first = _row()
    second = _row(submission_id="S2", count_text="X", common_name="Mallard (Domestic)")

    assert first == second
    assert hash(first) == hash(second)


def test_rows_with_different_time_are_not_equal() -> None:
    """A different observation time should be a different observation."""
    assert _row() != _row(time=time(8, 0))


def test_blank_time_matches_explicit_midnight_identity() -> None:
    """Identity uses derived date/time, so absent time equals midnight."""
    assert _row(time=None) == _row(time=time(0, 0))
