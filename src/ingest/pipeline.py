"""Observation parse orchestration.

This module coordinates source loading, optional chronological pre-sort,
and sequential or concurrent delivery of parsed rows to a caller handler.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import FIRST_COMPLETED, FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Callable, Iterable, Iterator

from core.config import SeabirdConfig
from core.errors import HandlerFailureError, SeabirdError
from core.logging_config import get_logger
from core.types import (
    DispatchMode,
    ObservationRow,
    ParseOptions,
    ParseResult,
    PipelineState,
    PreSort,
    SourceRecord,
)
from ingest.csv_source import open_source_records
from ingest.ordering import ordering_key
from ingest.progress import ProgressCounter
from ingest.record_extractor import parse_record

_LOGGER = get_logger(__name__)

RowHandler = Callable[[ObservationRow], None]


class ObservationPipelineRunner:
    """Stateful runner for one observation parse request."""

    def __init__(self, options: ParseOptions, config: SeabirdConfig) -> None:
        self._options = options
        self._config = config
        self._progress = ProgressCounter()
        self._record_count = 0
        self._state = PipelineState.IDLE
        self._abort = threading.Event()

    @property
    def state(self) -> PipelineState:
        """Current lifecycle state."""
        return self._state

    def run(self, handler: RowHandler) -> ParseResult:
        """Parse the source and deliver every row to ``handler``.

        Args:
            handler: Callable invoked once per parsed row. Must be
                thread-safe under concurrent dispatch.

        Returns:
            Run summary with the delivered-row count.

        Raises:
            SourceUnavailableError: If the source cannot be read.
            MalformedRecordError: If any record fails to parse.
            HandlerFailureError: If the handler raises.
        """
        started_at = time.monotonic()
        self._state = PipelineState.LOADING
        self._progress.reset()
        self._record_count = 0
        self._abort.clear()
        _log_parse_started(self._options)
        try:
            with open_source_records(self._options.source_uri, self._config) as records:
                ordered_records = self._load_ordered_records(self._counted(records), started_at)
                self._state = PipelineState.DISPATCHING
                self._dispatch(ordered_records, handler)
        except SeabirdError as error:
            failed_state = self._state
            self._state = PipelineState.FAILED
            _LOGGER.error(
                "observation_parse_failed",
                source_uri=self._options.source_uri,
                state=failed_state.value,
                error_type=type(error).__name__,
                error=str(error),
                processed_count=self._progress.value,
            )
            raise
        except BaseException:
            self._state = PipelineState.FAILED
            raise
        self._state = PipelineState.DONE
        result = ParseResult(
            source_uri=self._options.source_uri,
            processed_count=self._progress.value,
            record_count=self._record_count,
            elapsed_seconds=time.monotonic() - started_at,
            dispatch_mode=self._options.dispatch_mode,
            pre_sort=self._options.pre_sort,
        )
        _log_parse_completed(result)
        return result

    def _counted(self, records: Iterable[SourceRecord]) -> Iterator[SourceRecord]:
        for record in records:
            self._record_count += 1
            yield record

    def _load_ordered_records(
        self,
        records: Iterator[SourceRecord],
        started_at: float,
    ) -> Iterable[SourceRecord]:
        """Return records in dispatch order, materializing only for date pre-sort."""
        if self._options.pre_sort is PreSort.NONE:
            return records
        materialized = list(records)
        self._state = PipelineState.SORTING
        materialized.sort(key=ordering_key)
        _LOGGER.info(
            "observation_records_sorted",
            source_uri=self._options.source_uri,
            record_count=len(materialized),
            elapsed_seconds=round(time.monotonic() - started_at, 3),
        )
        return materialized

    def _dispatch(self, records: Iterable[SourceRecord], handler: RowHandler) -> None:
        if self._options.dispatch_mode is DispatchMode.CONCURRENT:
            self._dispatch_concurrent(records, handler)
            return
        for record in records:
            self._deliver(record, handler)

    def _dispatch_concurrent(self, records: Iterable[SourceRecord], handler: RowHandler) -> None:
        """Fan records out to a bounded worker pool and wait for all of them.

        At most ``max_pending_records`` futures are outstanding, so lazy
        sources are never fully buffered. The first failure observed stops
        submission and cancels queued work before it is re-raised.
        """
        pending: set[Future[None]] = set()
        with ThreadPoolExecutor(
            max_workers=self._config.max_workers,
            thread_name_prefix="seabird-dispatch",
        ) as executor:
            try:
                for record in records:
                    if self._abort.is_set():
                        break
                    if len(pending) >= self._config.max_pending_records:
                        pending = _drain(pending, FIRST_COMPLETED)
                    pending.add(executor.submit(self._deliver_in_worker, record, handler))
                while pending:
                    pending = _drain(pending, FIRST_EXCEPTION)
            except BaseException:
                executor.shutdown(wait=True, cancel_futures=True)
                raise

    def _deliver_in_worker(self, record: SourceRecord, handler: RowHandler) -> None:
        try:
            self._deliver(record, handler)
        except BaseException:
            self._abort.set()
            raise

    def _deliver(self, record: SourceRecord, handler: RowHandler) -> None:
        """Extract one record and hand the row to the handler."""
        row = parse_record(record)
        if row is None:
            return
        try:
            handler(row)
        except Exception as error:
            raise HandlerFailureError(record.record_number, error) from error
        self._progress.increment()


def parse_observations(
    source_uri: str | Path,
    handler: RowHandler,
    dispatch_mode: DispatchMode = DispatchMode.SEQUENTIAL,
    pre_sort: PreSort = PreSort.NONE,
    config: SeabirdConfig | None = None,
) -> ParseResult:
    """Parse an eBird export and deliver each observation to ``handler``.

    Args:
        source_uri: Local export path or ``s3://bucket/key`` URI.
        handler: Callable invoked once per observation row.
        dispatch_mode: Sequential or concurrent delivery.
        pre_sort: Optional chronological ordering before delivery.
        config: Runtime configuration, read from the environment if omitted.

    Returns:
        Run summary with the delivered-row count.

    Raises:
        SourceUnavailableError: If the source cannot be read.
        MalformedRecordError: If any record fails to parse.
        HandlerFailureError: If the handler raises.
    """
    options = ParseOptions(
        source_uri=str(source_uri),
        dispatch_mode=dispatch_mode,
        pre_sort=pre_sort,
    )
    runner = ObservationPipelineRunner(options, config or SeabirdConfig.from_env())
    return runner.run(handler)


def _drain(pending: set[Future[None]], return_when: str) -> set[Future[None]]:
    """Wait on pending futures, re-raise the first failure, return the rest."""
    done, not_done = wait(pending, return_when=return_when)
    for future in done:
        future.result()
    return not_done


def _log_parse_started(options: ParseOptions) -> None:
    _LOGGER.info(
        "observation_parse_started",
        source_uri=options.source_uri,
        dispatch_mode=options.dispatch_mode.value,
        pre_sort=options.pre_sort.value,
    )


def _log_parse_completed(result: ParseResult) -> None:
    """Log run completion with contextual metadata."""
    _LOGGER.info(
        "observation_parse_completed",
        source_uri=result.source_uri,
        record_count=result.record_count,
        processed_count=result.processed_count,
        elapsed_seconds=round(result.elapsed_seconds, 3),
        dispatch_mode=result.dispatch_mode.value,
        pre_sort=result.pre_sort.value,
    )
