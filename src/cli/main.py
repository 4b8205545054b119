"""Seabird CLI entry points.
This module exposes the export parse command.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import Any, Sequence

from core.config import SeabirdConfig, parse_positive_int
from core.errors import SeabirdError
from core.types import DispatchMode, ParseOptions, PreSort
from ingest.observation_collector import ObservationCollector
from ingest.observation_sdk import SeabirdClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="seabird", description="eBird export parser")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_parse_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Seabird CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == "parse":
            client = _build_client(args.max_workers)
            return _run_parse_command(client, args)
    except SeabirdError as error:
        print(str(error), file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(max_workers: str | None) -> SeabirdClient:
    """Build SDK client with optional worker override.

    Args:
        max_workers: Raw worker count override from the command line.

    Returns:
        Configured SDK client.

    Raises:
        SeabirdConfigError: If the override is not a positive integer.
    """
    config = SeabirdConfig.from_env()
    if max_workers is not None:
        config = replace(config, max_workers=parse_positive_int("--max-workers", max_workers))
    return SeabirdClient(config)


def _run_parse_command(client: SeabirdClient, args: argparse.Namespace) -> int:
    """Handle parse command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    options = ParseOptions(
        source_uri=args.source,
        dispatch_mode=DispatchMode(args.mode),
        pre_sort=PreSort(args.pre_sort),
    )
    collector = ObservationCollector()
    result = client.parse(options, collector)
    rows = collector.rows
    print(f"processed_count={result.processed_count}")
    print(f"unique_observations={len(collector.unique_rows())}")
    print(f"species_count={len({row.scientific_name for row in rows})}")
    print(f"checklist_count={len({row.submission_id for row in rows})}")
    return 0


def _add_parse_command(subparsers: Any) -> None:
    """Register parse subcommand."""
    parser = subparsers.add_parser("parse", help="Parse an eBird CSV export and summarize it")
    parser.add_argument("source", help="Export file path or s3://bucket/key")
    parser.add_argument(
        "--mode",
        default=DispatchMode.SEQUENTIAL.value,
        choices=[mode.value for mode in DispatchMode],
        help="Row dispatch mode",
    )
    parser.add_argument(
        "--pre-sort",
        default=PreSort.NONE.value,
        choices=[option.value for option in PreSort],
        help="Optional ordering before dispatch",
    )
    parser.add_argument(
        "--max-workers",
        help="Override SEABIRD_MAX_WORKERS for concurrent dispatch",
    )
