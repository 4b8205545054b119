"""Unit tests for CLI command handling."""

from __future__ import annotations

import pytest

from cli.main import build_parser, main
from tests.fixture_paths import export_fixture


def test_cli_parse_prints_summary(capsys) -> None:
    """CLI parse should print counts for the export."""
    args = ["parse", str(export_fixture("my_ebird_data.csv"))]

    exit_code = main(args)
    output = capsys.readouterr().out.strip().splitlines()

    assert exit_code == 0
    assert output == [
        "processed_count=6",
        "unique_observations=5",
        "species_count=4",
        "checklist_count=5",
    ]


def test_cli_parse_supports_concurrent_date_sorted_runs(capsys) -> None:
    """Concurrent dispatch with pre-sort should report the same totals."""
    args = [
        "parse",
        str(export_fixture("my_ebird_data.csv")),
        "--max-workers",
        "2",
        "--mode",
        "concurrent",
        "--pre-sort",
        "date",
    ]

    exit_code = main(args)
    output = capsys.readouterr().out

    assert exit_code == 0 and "processed_count=6" in output


def test_cli_parse_reports_malformed_record(capsys) -> None:
    """Parse failures should print the error and exit non-zero."""
    exit_code = main(["parse", str(export_fixture("malformed_date.csv"))])
    error_output = capsys.readouterr().err

    assert exit_code == 1
    assert "Malformed record 3 at column 11" in error_output


def test_build_parser_defaults_to_sequential_unsorted() -> None:
    """Default options should match the convenience parse form."""
    args = build_parser().parse_args(["parse", "export.csv"])

    assert (args.mode, args.pre_sort) == ("sequential", "none")


@pytest.mark.parametrize("max_workers", ["0", "-2", "four"])
def test_cli_parse_rejects_invalid_max_workers(capsys, max_workers: str) -> None:
    """Worker overrides below one should fail with a config error."""
    args = ["parse", str(export_fixture("my_ebird_data.csv")), "--max-workers", max_workers]

    exit_code = main(args)
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Invalid --max-workers value" in captured.err
    assert captured.out == ""
