"""Background sampler for Greenplum segment health.

Every ``interval`` seconds the sampler opens one connection, runs each
diagnostic query, and writes the result into its gauge.  A failed query
writes that gauge's sentinel; a failed connection writes every sentinel.
Gauges therefore always hold a value a scraper can alert on.
"""

import asyncio
import time
from typing import Iterable, Optional

from greenplum_exporter.core.exceptions import ConnectError, QueryError
from greenplum_exporter.core.logging import logger
from greenplum_exporter.core.protocols.connection import ConnectionProvider, DiagnosticConnection
from greenplum_exporter.core.protocols.segment_metrics import SegmentMetrics
from greenplum_exporter.core.queries import DIAGNOSTIC_QUERIES, DiagnosticQuery

_DEFAULT_INTERVAL = 300.0


class SegmentSampler:
    """Periodically samples cluster health into ``SegmentMetrics``."""

    def __init__(
        self,
        provider: ConnectionProvider,
        metrics: SegmentMetrics,
        interval: float = _DEFAULT_INTERVAL,
        queries: Iterable[DiagnosticQuery] = DIAGNOSTIC_QUERIES,
    ) -> None:
        self._provider = provider
        self._metrics = metrics
        self._interval = interval
        self._queries = tuple(queries)
        self._task: Optional[asyncio.Task] = None
        self._logger = logger.with_context(context_base="sampler", interval=interval)
        self.passes: int = 0

    async def start(self) -> None:
        """Launch the sampling loop as a background task."""
        if self._task is not None:
            return
        self._task = asyncio.create_task(self.run_forever(), name="segment-sampler")

    async def stop(self) -> None:
        """Cancel the sampling loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def run_forever(self) -> None:
        """Sample, sleep ``interval``, repeat until cancelled."""
        self._logger.info(f"Sampling {len(self._queries)} gauges every {self._interval}s")
        while True:
            try:
                await self.sample_once()
            except Exception as e:
                self._logger.exception(f"Unexpected error during sampling pass: {e}")
            await asyncio.sleep(self._interval)

    async def sample_once(self) -> None:
        """Run one full pass over every diagnostic query."""
        started = time.monotonic()
        try:
            async with self._provider.connect() as connection:
                failures = 0
                for query in self._queries:
                    if not await self._sample_query(connection, query):
                        failures += 1
        except ConnectError as e:
            self._logger.error(f"Trouble connecting to the DB: {e}")
            self._set_all_sentinels()
            failures = len(self._queries)
        finally:
            self.passes += 1

        self._logger.debug(
            f"Sampling pass finished in {time.monotonic() - started:.3f}s "
            f"with {failures} failed gauge(s)"
        )

    async def _sample_query(self, connection: DiagnosticConnection, query: DiagnosticQuery) -> bool:
        """Sample a single query into its gauge; return whether it succeeded."""
        try:
            value = float(await connection.scalar_one(query.sql))
        except (QueryError, TypeError, ValueError) as e:
            self._logger.error(f"Err sampling {query.name}: {e}")
            self._metrics.set(query.name, query.sentinel, healthy=False)
            return False

        self._metrics.set(query.name, value)
        return True

    def _set_all_sentinels(self) -> None:
        for query in self._queries:
            self._metrics.set(query.name, query.sentinel, healthy=False)
