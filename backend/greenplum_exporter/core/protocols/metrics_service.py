"""MetricsService protocol for the exporter facade.

Lets the runner depend on a lifecycle API instead of the concrete
Prometheus-backed class.
"""

from typing import Protocol, runtime_checkable

from greenplum_exporter.core.protocols.segment_metrics import SegmentMetrics


@runtime_checkable
class MetricsService(Protocol):
    """Protocol for the metrics facade."""

    segments: SegmentMetrics

    async def start(self, *, host: str, port: int) -> None:
        """Start the HTTP server and the background sampler."""
        ...

    async def stop(self) -> None:
        """Stop all background services."""
        ...
