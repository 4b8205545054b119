"""Export source readers for observation ingest.

This module opens eBird CSV exports from local paths or S3 objects and
tokenizes them into numbered source records for the record extractor.
"""

from __future__ import annotations

import codecs
import csv
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator

from core.config import SeabirdConfig
from core.constants import S3_URI_SCHEME, SOURCE_ENCODING
from core.errors import SeabirdDependencyError, SourceUnavailableError
from core.s3_uri import S3Location, parse_s3_uri
from core.types import SourceRecord


@contextmanager
def open_source_records(source_uri: str, config: SeabirdConfig) -> Iterator[Iterator[SourceRecord]]:
    """Open an export and yield a lazy record iterator.

    The underlying stream stays open until the context exits.

    Args:
        source_uri: Local file path or ``s3://bucket/key`` URI.
        config: Runtime configuration for S3 session defaults.

    Yields:
        Source records in file order, header first.

    Raises:
        SourceUnavailableError: If the source cannot be opened.
    """
    with _open_text_stream(source_uri, config) as stream:
        yield tokenize_records(stream, source_uri)


def tokenize_records(lines: Iterable[str], source_uri: str) -> Iterator[SourceRecord]:
    """Split CSV text into numbered source records.

    Blank lines are skipped and do not consume a record number.

    Args:
        lines: Text lines of a CSV document.
        source_uri: Source identifier for error context.

    Yields:
        Source records numbered from one.

    Raises:
        SourceUnavailableError: If the stream fails mid-read.
    """
    reader = csv.reader(lines)
    record_number = 0
    try:
        for fields in reader:
            if not fields:
                continue
            record_number += 1
            yield SourceRecord(record_number=record_number, fields=tuple(fields))
    except (OSError, UnicodeDecodeError, csv.Error) as error:
        raise SourceUnavailableError(
            f"Failed to read source at {source_uri} after record {record_number}: {error}. "
            "Check that the export is a readable UTF-8 CSV file."
        ) from error


@contextmanager
def _open_text_stream(source_uri: str, config: SeabirdConfig) -> Iterator[Iterable[str]]:
    """Open a text stream for a local or S3 source."""
    if source_uri.startswith(S3_URI_SCHEME):
        with _open_s3_text(source_uri, config) as stream:
            yield stream
        return
    source_path = Path(source_uri).expanduser()
    try:
        stream = source_path.open("r", encoding=SOURCE_ENCODING, newline="")
    except OSError as error:
        raise SourceUnavailableError(
            f"Failed to open source at {source_path}: {error.strerror or error}. "
            "Provide an existing, readable export file."
        ) from error
    with stream:
        yield stream


@contextmanager
def _open_s3_text(source_uri: str, config: SeabirdConfig) -> Iterator[Iterable[str]]:
    """Stream one S3 object body as decoded text lines.

    The body is decoded incrementally and closed when the context exits,
    so large exports are never held in memory whole.

    Args:
        source_uri: ``s3://bucket/key`` URI.
        config: Runtime config containing optional profile/region.

    Yields:
        Line iterator over the object body.

    Raises:
        SourceUnavailableError: If the object cannot be fetched.
    """
    location = parse_s3_uri(source_uri)
    s3_client = _create_s3_client(config)
    body = _open_s3_body(s3_client, location, source_uri)
    try:
        yield codecs.getreader(SOURCE_ENCODING)(body)
    finally:
        body.close()


def _open_s3_body(s3_client: Any, location: S3Location, source_uri: str) -> Any:
    """Request an object and return its streaming body."""
    try:
        response = s3_client.get_object(Bucket=location.bucket, Key=location.key)
        return response["Body"]
    except Exception as error:
        raise SourceUnavailableError(
            f"Failed to download {source_uri}: {error}. "
            "Check the bucket, key, and AWS credentials."
        ) from error


def _create_s3_client(config: SeabirdConfig) -> Any:
    """Create a boto3 S3 client.

    Args:
        config: Runtime config containing optional profile/region.

    Returns:
        Boto3 S3 client.

    Raises:
        SeabirdDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise SeabirdDependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install boto3 to parse s3:// sources."
        ) from error
    session_kwargs = _build_boto3_session_kwargs(config)
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def _build_boto3_session_kwargs(config: SeabirdConfig) -> dict[str, str]:
    """Build boto3 Session kwargs from config.

    Args:
        config: Runtime config.

    Returns:
        Session keyword arguments.
    """
    kwargs: dict[str, str] = {}
    if config.s3_profile:
        kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        kwargs["region_name"] = config.s3_region
    return kwargs
