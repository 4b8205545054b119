"""Seabird exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class SeabirdError(Exception):
    """Base exception for all Seabird failures."""


class SeabirdConfigError(SeabirdError):
    """Raised for invalid runtime configuration."""


class SeabirdIngestError(SeabirdError):
    """Raised for source reading and record parsing failures."""


class SourceUnavailableError(SeabirdIngestError):
    """Raised when an input source cannot be opened or read."""


class MalformedRecordError(SeabirdIngestError):
    """Raised when one source record fails type coercion or layout checks.

    Attributes:
        record_number: One-based record number in the source.
        column_index: Zero-based column index that failed.
        raw_value: Raw field text, or None when the column is missing.
    """

    def __init__(
        self,
        record_number: int,
        column_index: int,
        raw_value: str | None,
        reason: str,
    ) -> None:
        self.record_number = record_number
        self.column_index = column_index
        self.raw_value = raw_value
        super().__init__(
            f"Malformed record {record_number} at column {column_index} "
            f"(value {raw_value!r}): {reason}. "
            "Fix the export row and retry parsing."
        )


class HandlerFailureError(SeabirdError):
    """Raised when the caller-supplied row handler fails.

    Attributes:
        record_number: Source record number whose row was being handled.
    """

    def __init__(self, record_number: int, error: BaseException) -> None:
        self.record_number = record_number
        super().__init__(
            f"Row handler failed for record {record_number}: "
            f"{type(error).__name__}: {error}"
        )


class SeabirdDependencyError(SeabirdError):
    """Raised when an optional runtime dependency is missing."""
