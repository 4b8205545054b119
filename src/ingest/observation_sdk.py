"""Python SDK for observation export parsing.

This module exposes high-level APIs for parsing eBird exports with a
caller handler or into an in-memory collection.
"""

from __future__ import annotations

from core.config import SeabirdConfig
from core.types import ObservationRow, ParseOptions, ParseResult
from ingest.observation_collector import ObservationCollector
from ingest.pipeline import ObservationPipelineRunner, RowHandler


class SeabirdClient:
    """Primary SDK entry point for export parsing workflows."""

    def __init__(self, config: SeabirdConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or SeabirdConfig.from_env()

    @property
    def config(self) -> SeabirdConfig:
        """Runtime configuration used by this client."""
        return self._config

    def parse(self, options: ParseOptions, handler: RowHandler) -> ParseResult:
        """Parse an export and deliver each row to ``handler``.

        Args:
            options: Parse options.
            handler: Row handler, thread-safe for concurrent dispatch.

        Returns:
            Run summary with the delivered-row count.

        Raises:
            SeabirdIngestError: If the source cannot be read or parsed.
            HandlerFailureError: If the handler raises.
        """
        runner = ObservationPipelineRunner(options, self._config)
        return runner.run(handler)

    def collect(self, options: ParseOptions) -> tuple[ParseResult, list[ObservationRow]]:
        """Parse an export and return every row in delivery order.

        Args:
            options: Parse options.

        Returns:
            Run summary and collected rows.
        """
        collector = ObservationCollector()
        result = self.parse(options, collector)
        return result, collector.rows
