"""Runtime configuration model for Seabird.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import DEFAULT_MAX_PENDING_RECORDS
from core.errors import SeabirdConfigError


@dataclass(frozen=True)
class SeabirdConfig:
    """Validated runtime configuration.

    Attributes:
        max_workers: Worker thread count for concurrent dispatch.
        max_pending_records: Upper bound on records submitted but not yet handled.
        s3_region: Optional default AWS region for S3 sources.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    max_workers: int
    max_pending_records: int = DEFAULT_MAX_PENDING_RECORDS
    s3_region: str | None = None
    s3_profile: str | None = None

    @classmethod
    def from_env(cls) -> "SeabirdConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            SeabirdConfigError: If environment values are invalid.
        """
        max_workers = parse_positive_int(
            "SEABIRD_MAX_WORKERS",
            os.getenv("SEABIRD_MAX_WORKERS", str(default_max_workers())),
        )
        max_pending_records = parse_positive_int(
            "SEABIRD_MAX_PENDING_RECORDS",
            os.getenv("SEABIRD_MAX_PENDING_RECORDS", str(DEFAULT_MAX_PENDING_RECORDS)),
        )
        return cls(
            max_workers=max_workers,
            max_pending_records=max_pending_records,
            s3_region=os.getenv("SEABIRD_S3_REGION"),
            s3_profile=os.getenv("SEABIRD_S3_PROFILE"),
        )


def default_max_workers() -> int:
    """Return the host's available parallelism, at least one."""
    return os.cpu_count() or 1


def parse_positive_int(variable_name: str, raw_value: str) -> int:
    """Parse a positive integer setting.

    Args:
        variable_name: Environment variable or CLI flag name for error context.
        raw_value: Raw string from the environment or command line.

    Returns:
        Parsed positive integer.

    Raises:
        SeabirdConfigError: If value is not a positive integer.
    """
    try:
        value = int(raw_value)
    except ValueError as error:
        raise SeabirdConfigError(
            f"Invalid {variable_name} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {variable_name} to a numeric value."
        ) from error
    if value < 1:
        raise SeabirdConfigError(
            f"Invalid {variable_name} value: expected a positive integer, got {value}. "
            f"Set {variable_name} to 1 or more."
        )
    return value
