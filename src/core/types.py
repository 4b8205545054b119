"""Shared typed models.

This module defines immutable data models used by the source reader,
record extractor, dispatch pipeline, and SDK layers to keep interfaces
explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum


class DispatchMode(str, Enum):
    """How parsed rows are delivered to the row handler."""

    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"


class PreSort(str, Enum):
    """Optional ordering applied to source records before dispatch."""

    NONE = "none"
    DATE = "date"


class PipelineState(str, Enum):
    """Lifecycle states of one parse run."""

    IDLE = "idle"
    LOADING = "loading"
    SORTING = "sorting"
    DISPATCHING = "dispatching"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class SourceRecord:
    """One tokenized source record.

    Attributes:
        record_number: One-based record number in file order, header is 1.
        fields: Ordered raw string fields.
    """

    record_number: int
    fields: tuple[str, ...]

    @property
    def size(self) -> int:
        """Number of fields in the record."""
        return len(self.fields)


@dataclass(frozen=True, eq=False)
class ObservationRow:
    """Typed observation parsed from one export row.

    Equality and hashing use the observation identity
    (scientific name, location id, combined date/time).

    Attributes:
        submission_id: Checklist identifier.
        common_name: Species common name.
        scientific_name: Species scientific name.
        taxon_order: Taxonomic sort rank.
        count_text: Raw count, may be non-numeric such as ``X``.
        subnational1_code: State/province code.
        subnational2_name: County name.
        location_id: Location identifier.
        location_name: Location display name.
        latitude: Location latitude.
        longitude: Location longitude.
        date: Observation date.
        time: Observation start time, None when not recorded.
        protocol: Survey protocol name.
        duration_minutes: Checklist duration, 0 when blank.
        complete_checklist: Whether all detected species were reported.
        distance_km: Travelled distance when recorded.
        area_hectares: Covered area when recorded.
        party_size: Number of observers when recorded.
        breeding_code: Breeding code, empty string when the column is blank.
        asset_ids: Attached media identifiers.
    """

    submission_id: str
    common_name: str
    scientific_name: str
    taxon_order: float
    count_text: str
    subnational1_code: str | None
    subnational2_name: str | None
    location_id: str
    location_name: str
    latitude: float
    longitude: float
    date: date
    time: time | None
    protocol: str
    duration_minutes: int
    complete_checklist: bool
    distance_km: float | None = None
    area_hectares: float | None = None
    party_size: int | None = None
    breeding_code: str | None = None
    asset_ids: tuple[int, ...] = ()

    @property
    def date_time(self) -> datetime:
        """Observation date combined with time, or start of day when time is absent."""
        if self.time is None:
            return datetime.combine(self.date, time.min)
        return datetime.combine(self.date, self.time)

    def identity(self) -> tuple[str, str, datetime]:
        """Return the fields that identify one observation."""
        return (self.scientific_name, self.location_id, self.date_time)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ObservationRow):
            return NotImplemented
        return self.identity() == other.identity()

    def __hash__(self) -> int:
        return hash(self.identity())


@dataclass(frozen=True)
class ParseOptions:
    """Parse request options.

    Attributes:
        source_uri: Local file path or ``s3://bucket/key`` URI.
        dispatch_mode: Sequential or concurrent row delivery.
        pre_sort: Optional ordering applied before dispatch.
    """

    source_uri: str
    dispatch_mode: DispatchMode = DispatchMode.SEQUENTIAL
    pre_sort: PreSort = PreSort.NONE


@dataclass(frozen=True)
class ParseResult:
    """Outcome of one successful parse run.

    Attributes:
        source_uri: Parsed source.
        processed_count: Rows delivered to the handler.
        record_count: Source records read, header included.
        elapsed_seconds: Wall-clock run duration.
        dispatch_mode: Dispatch mode used.
        pre_sort: Pre-sort option used.
    """

    source_uri: str
    processed_count: int
    record_count: int
    elapsed_seconds: float
    dispatch_mode: DispatchMode
    pre_sort: PreSort
