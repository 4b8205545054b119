"""Public SDK surface for Seabird.

This module provides a stable import path for export parsing users.
It re-exports the client, the parse entry point, and typed models.
"""

from __future__ import annotations

from core.config import SeabirdConfig
from core.errors import (
    HandlerFailureError,
    MalformedRecordError,
    SeabirdError,
    SourceUnavailableError,
)
from core.types import DispatchMode, ObservationRow, ParseOptions, ParseResult, PreSort
from ingest.observation_collector import ObservationCollector
from ingest.observation_sdk import SeabirdClient
from ingest.pipeline import parse_observations
from transforms.observation_deduplication import remove_duplicate_observations

__all__ = [
    "DispatchMode",
    "HandlerFailureError",
    "MalformedRecordError",
    "ObservationCollector",
    "ObservationRow",
    "ParseOptions",
    "ParseResult",
    "PreSort",
    "SeabirdClient",
    "SeabirdConfig",
    "SeabirdError",
    "SourceUnavailableError",
    "parse_observations",
    "remove_duplicate_observations",
]
