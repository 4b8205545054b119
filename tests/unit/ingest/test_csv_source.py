"""Unit tests for export source reading."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from core.config import SeabirdConfig
from core.errors import SourceUnavailableError
from ingest.csv_source import open_source_records, tokenize_records
from tests.fixture_paths import export_fixture


class _FakeBody(io.BytesIO):
    def __init__(self, payload: bytes) -> None:
        super().__init__(payload)
        self.read_sizes: list[int] = []

    def read(self, size: int | None = -1) -> bytes:
        self.read_sizes.append(-1 if size is None else size)
        return super().read(size)


class _FakeS3Client:
    def __init__(self, body: _FakeBody | None = None) -> None:
        self.body = body
        self.requests: list[tuple[str, str]] = []

    def get_object(self, Bucket: str, Key: str) -> dict[str, object]:
        self.requests.append((Bucket, Key))
        if self.body is None:
            raise RuntimeError("NoSuchKey")
        return {"Body": self.body}


def test_open_source_records_numbers_records_from_header() -> None:
    """Records should be numbered from one with the header first."""
    config = SeabirdConfig(max_workers=1)

    with open_source_records(str(export_fixture("my_ebird_data.csv")), config) as records:
        collected = list(records)

    assert [record.record_number for record in collected] == [1, 2, 3, 4, 5, 6, 7]
    assert collected[0].fields[0] == "Submission ID"


def test_open_source_records_keeps_quoted_commas_in_one_field() -> None:
    """Quoted fields containing commas should stay a single column."""
    config = SeabirdConfig(max_workers=1)

    with open_source_records(str(export_fixture("my_ebird_data.csv")), config) as records:
        song_sparrow = [record for record in records if record.record_number == 4][0]

    assert song_sparrow.size == 23
    assert song_sparrow.fields[21] == "Windy, light rain"


def test_open_source_records_raises_for_missing_path(tmp_path: Path) -> None:
    """Opening a missing export should fail as an unavailable source."""
    config = SeabirdConfig(max_workers=1)
    missing_path = tmp_path / "missing.csv"

    with pytest.raises(SourceUnavailableError):
        with open_source_records(str(missing_path), config):
            pass

    assert missing_path.exists() is False


def test_open_source_records_raises_for_invalid_s3_uri() -> None:
    """S3 URIs without an object key should be rejected before any download."""
    config = SeabirdConfig(max_workers=1)

    with pytest.raises(SourceUnavailableError):
        with open_source_records("s3://bucket-only", config):
            pass


def test_tokenize_records_skips_blank_lines_without_numbering_them() -> None:
    """Blank lines should not consume record numbers."""
    lines = ["a,b\n", "\n", "c,d\n", "e,f\n"]

    records = list(tokenize_records(lines, "inline"))

    assert [(record.record_number, record.fields) for record in records] == [
        (1, ("a", "b")),
        (2, ("c", "d")),
        (3, ("e", "f")),
    ]


def test_tokenize_records_strips_utf8_bom(tmp_path: Path) -> None:
    """A UTF-8 byte order mark should not leak into the first header field."""
    export_path = tmp_path / "bom.csv"
    export_path.write_bytes("\ufeffSubmission ID,Common Name\nS1,Mallard\n".encode("utf-8"))

    with open_source_records(str(export_path), SeabirdConfig(max_workers=1)) as records:
        header = next(records)

    assert header.fields[0] == "Submission ID"


def test_open_source_records_streams_s3_body_and_closes_it(monkeypatch) -> None:
    """S3 exports should be decoded incrementally and closed on exit."""
    body = _FakeBody(export_fixture("my_ebird_data.csv").read_bytes())
    client = _FakeS3Client(body)
    monkeypatch.setattr("ingest.csv_source._create_s3_client", lambda config: client)
    config = SeabirdConfig(max_workers=1)

    with open_source_records("s3://exports/2024/my_ebird_data.csv", config) as records:
        collected = list(records)

    assert client.requests == [("exports", "2024/my_ebird_data.csv")]
    assert [record.record_number for record in collected] == [1, 2, 3, 4, 5, 6, 7]
    assert collected[3].fields[21] == "Windy, light rain"
    assert -1 not in body.read_sizes
    assert body.closed


def test_open_source_records_strips_bom_from_s3_body(monkeypatch) -> None:
    """A UTF-8 BOM at the start of an S3 object should not reach the header."""
    payload = "\ufeffSubmission ID,Common Name\nS1,Mallard\n".encode("utf-8")
    client = _FakeS3Client(_FakeBody(payload))
    monkeypatch.setattr("ingest.csv_source._create_s3_client", lambda config: client)

    with open_source_records("s3://exports/bom.csv", SeabirdConfig(max_workers=1)) as records:
        collected = list(records)

    assert collected[0].fields == ("Submission ID", "Common Name")


def test_open_source_records_maps_s3_client_failures(monkeypatch) -> None:
    """Failed S3 requests should surface as unavailable sources."""
    monkeypatch.setattr("ingest.csv_source._create_s3_client", lambda config: _FakeS3Client())

    with pytest.raises(SourceUnavailableError) as error_info:
        with open_source_records("s3://exports/missing.csv", SeabirdConfig(max_workers=1)):
            pass

    assert isinstance(error_info.value.__cause__, RuntimeError)


def test_open_source_records_maps_s3_decode_failures(monkeypatch) -> None:
    """Invalid UTF-8 in an S3 body should fail while reading and still close it."""
    body = _FakeBody(b"Submission ID\n\xff\xfe\n")
    monkeypatch.setattr("ingest.csv_source._create_s3_client", lambda config: _FakeS3Client(body))
    config = SeabirdConfig(max_workers=1)

    with pytest.raises(SourceUnavailableError):
        with open_source_records("s3://exports/latin1.csv", config) as records:
            list(records)

    assert body.closed
