"""Positional record extraction for eBird exports.

This module maps one tokenized source record onto a typed observation row.
Column positions are fixed; trailing optional columns are read only when
the record is wide enough to contain them.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Callable, TypeVar

from core.constants import (
    AREA_HECTARES_COLUMN,
    ASSET_ID_SEPARATOR,
    ASSET_IDS_COLUMN,
    BREEDING_CODE_COLUMN,
    COMMON_NAME_COLUMN,
    COMPLETE_CHECKLIST_COLUMN,
    COMPLETE_CHECKLIST_FLAG,
    COUNT_COLUMN,
    DATE_COLUMN,
    DATE_FORMAT,
    DISTANCE_KM_COLUMN,
    DURATION_COLUMN,
    HEADER_RECORD_NUMBER,
    LATITUDE_COLUMN,
    LOCATION_ID_COLUMN,
    LOCATION_NAME_COLUMN,
    LONGITUDE_COLUMN,
    PARTY_SIZE_COLUMN,
    PROTOCOL_COLUMN,
    SCIENTIFIC_NAME_COLUMN,
    SUBMISSION_ID_COLUMN,
    SUBNATIONAL1_CODE_COLUMN,
    SUBNATIONAL2_NAME_COLUMN,
    TAXON_ORDER_COLUMN,
    TIME_COLUMN,
    TIME_FORMAT,
)
from core.errors import MalformedRecordError
from core.types import ObservationRow, SourceRecord

_T = TypeVar("_T")

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIME_PATTERN = re.compile(r"[0-9]{2}:[0-9]{2} [AP]M")
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_DECIMAL_PATTERN = re.compile(
    r"[+-]?(?:NaN|Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)


def is_header(record: SourceRecord) -> bool:
    """Return whether the record is the export header."""
    return record.record_number == HEADER_RECORD_NUMBER


def parse_record(record: SourceRecord) -> ObservationRow | None:
    """Parse one source record into an observation row.

    Args:
        record: Tokenized source record.

    Returns:
        Parsed row, or None for the header record.

    Raises:
        MalformedRecordError: If a required column is missing or a value
            cannot be coerced to its column type.
    """
    if is_header(record):
        return None
    return ObservationRow(
        submission_id=_required(record, SUBMISSION_ID_COLUMN),
        common_name=_required(record, COMMON_NAME_COLUMN),
        scientific_name=_required(record, SCIENTIFIC_NAME_COLUMN),
        taxon_order=_coerce(record, TAXON_ORDER_COLUMN, parse_decimal),
        count_text=_required(record, COUNT_COLUMN),
        subnational1_code=_required(record, SUBNATIONAL1_CODE_COLUMN),
        subnational2_name=_required(record, SUBNATIONAL2_NAME_COLUMN),
        location_id=_required(record, LOCATION_ID_COLUMN),
        location_name=_required(record, LOCATION_NAME_COLUMN),
        latitude=_coerce(record, LATITUDE_COLUMN, parse_decimal),
        longitude=_coerce(record, LONGITUDE_COLUMN, parse_decimal),
        date=parse_observation_date(record),
        time=parse_observation_time(record),
        protocol=_required(record, PROTOCOL_COLUMN),
        duration_minutes=_parse_duration(record),
        complete_checklist=_required(record, COMPLETE_CHECKLIST_COLUMN) == COMPLETE_CHECKLIST_FLAG,
        distance_km=_optional_number(record, DISTANCE_KM_COLUMN, parse_decimal),
        area_hectares=_optional_number(record, AREA_HECTARES_COLUMN, parse_decimal),
        party_size=_optional_number(record, PARTY_SIZE_COLUMN, parse_integer),
        breeding_code=_optional_text(record, BREEDING_CODE_COLUMN),
        asset_ids=_parse_asset_ids(record),
    )


def parse_observation_date(record: SourceRecord) -> date:
    """Parse the ``yyyy-MM-dd`` date column.

    Raises:
        MalformedRecordError: If the date is missing or invalid.
    """
    raw_value = _required(record, DATE_COLUMN)
    try:
        if not _DATE_PATTERN.fullmatch(raw_value):
            raise ValueError(f"date does not match {DATE_FORMAT}")
        return datetime.strptime(raw_value, DATE_FORMAT).date()
    except ValueError as error:
        raise MalformedRecordError(
            record.record_number, DATE_COLUMN, raw_value, "expected date as yyyy-MM-dd"
        ) from error


def parse_observation_time(record: SourceRecord) -> time | None:
    """Parse the 12-hour ``hh:mm AM/PM`` time column.

    Returns:
        Parsed time, or None when the column is blank.

    Raises:
        MalformedRecordError: If the column is missing or the time is invalid.
    """
    raw_value = _required(record, TIME_COLUMN)
    if not raw_value.strip():
        return None
    try:
        if not _TIME_PATTERN.fullmatch(raw_value):
            raise ValueError(f"time does not match {TIME_FORMAT}")
        return datetime.strptime(raw_value, TIME_FORMAT).time()
    except ValueError as error:
        raise MalformedRecordError(
            record.record_number, TIME_COLUMN, raw_value, "expected time as hh:mm AM/PM"
        ) from error


def parse_integer(raw_value: str) -> int:
    """Parse a plain signed decimal integer.

    Whitespace, digit separators and non-ASCII digits are rejected.

    Raises:
        ValueError: If the text is not a plain integer.
    """
    if not _INTEGER_PATTERN.fullmatch(raw_value):
        raise ValueError(f"invalid integer text: {raw_value!r}")
    return int(raw_value)


def parse_decimal(raw_value: str) -> float:
    """Parse a decimal or scientific-notation number.

    Surrounding whitespace is ignored; ``NaN`` and ``Infinity`` are accepted
    in that exact spelling. Digit separators and ``inf``/``nan`` are rejected.

    Raises:
        ValueError: If the text is not a decimal number.
    """
    text = raw_value.strip()
    if not _DECIMAL_PATTERN.fullmatch(text):
        raise ValueError(f"invalid decimal text: {raw_value!r}")
    return float(text)


_VALUE_KINDS: dict[Callable[[str], object], str] = {
    parse_integer: "integer",
    parse_decimal: "decimal",
}


def _required(record: SourceRecord, column_index: int) -> str:
    """Return a required column value."""
    if column_index >= record.size:
        raise MalformedRecordError(
            record.record_number,
            column_index,
            None,
            f"record has {record.size} columns, expected at least {column_index + 1}",
        )
    return record.fields[column_index]


def _coerce(record: SourceRecord, column_index: int, converter: Callable[[str], _T]) -> _T:
    """Convert a required column with the given numeric converter."""
    raw_value = _required(record, column_index)
    try:
        return converter(raw_value)
    except ValueError as error:
        raise MalformedRecordError(
            record.record_number,
            column_index,
            raw_value,
            f"expected {_VALUE_KINDS.get(converter, 'numeric')} value",
        ) from error


def _parse_duration(record: SourceRecord) -> int:
    if not _required(record, DURATION_COLUMN):
        return 0
    return _coerce(record, DURATION_COLUMN, parse_integer)


def _optional_number(
    record: SourceRecord,
    column_index: int,
    converter: Callable[[str], _T],
) -> _T | None:
    """Convert an optional trailing column, None when absent or blank."""
    if record.size <= column_index or not record.fields[column_index]:
        return None
    return _coerce(record, column_index, converter)


def _optional_text(record: SourceRecord, column_index: int) -> str | None:
    # Blank is kept: an empty breeding code differs from a missing column.
    if record.size <= column_index:
        return None
    return record.fields[column_index]


def _parse_asset_ids(record: SourceRecord) -> tuple[int, ...]:
    """Parse space-separated media asset ids."""
    if record.size <= ASSET_IDS_COLUMN:
        return ()
    raw_value = record.fields[ASSET_IDS_COLUMN]
    if not raw_value:
        return ()
    tokens = raw_value.split(ASSET_ID_SEPARATOR)
    # Trailing separators add no ids; empty tokens elsewhere are malformed.
    while tokens and not tokens[-1]:
        tokens.pop()
    try:
        return tuple(parse_integer(token) for token in tokens)
    except ValueError as error:
        raise MalformedRecordError(
            record.record_number,
            ASSET_IDS_COLUMN,
            raw_value,
            "expected space-separated integer asset ids",
        ) from error
