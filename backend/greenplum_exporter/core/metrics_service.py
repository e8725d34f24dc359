"""Prometheus-backed MetricsService implementation.

Composes the segment gauges, the exporter HTTP server, and the segment
sampler behind a single lifecycle API so the runner and tests deal with one
object instead of three collaborators.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from greenplum_exporter.core.protocols.connection import ConnectionProvider
from greenplum_exporter.core.protocols.metrics_renderer import MetricsRenderer
from greenplum_exporter.core.protocols.role_check import RoleChecker
from greenplum_exporter.core.protocols.segment_metrics import SegmentMetrics

if TYPE_CHECKING:
    from greenplum_exporter.api.server import ExporterServer
    from greenplum_exporter.core.segment_sampler import SegmentSampler


class PrometheusMetricsService:
    """Facade that owns the gauges, the HTTP server, and the sampler.

    Satisfies the ``MetricsService`` protocol structurally.  The renderer,
    provider, and role checker are private: they are implementation details
    of the server and sampler.
    """

    segments: SegmentMetrics

    def __init__(
        self,
        segments: SegmentMetrics,
        renderer: MetricsRenderer,
        provider: ConnectionProvider,
        role_checker: RoleChecker,
        interval: float,
    ) -> None:
        self.segments = segments
        self._renderer = renderer
        self._provider = provider
        self._role_checker = role_checker
        self._interval = interval
        self._server: ExporterServer | None = None
        self._sampler: SegmentSampler | None = None

    async def start(self, *, host: str, port: int) -> None:
        """Start the HTTP server, then the sampler.

        A bind failure propagates before the sampler is started.
        """
        from greenplum_exporter.api.server import ExporterServer
        from greenplum_exporter.core.segment_sampler import SegmentSampler

        self._server = ExporterServer(self._renderer, self._role_checker)
        await self._server.start(host=host, port=port)
        self._sampler = SegmentSampler(
            provider=self._provider,
            metrics=self.segments,
            interval=self._interval,
        )
        await self._sampler.start()

    async def stop(self) -> None:
        """Stop sampler then server (reverse start order)."""
        try:
            if self._sampler:
                await self._sampler.stop()
        finally:
            if self._server:
                await self._server.stop()
