"""SegmentMetrics protocol for the gauges the sampler writes.

Each gauge is addressed by its short name (``down_segments``).  Production
uses Prometheus gauges on an injected registry; tests use an in-memory fake.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class SegmentMetrics(Protocol):
    """Protocol for named cluster-health gauges."""

    def set(self, name: str, value: float, *, healthy: bool = True) -> None:
        """Overwrite the gauge ``name``.

        Args:
            name: Short gauge name.
            value: New value; a failure sentinel when ``healthy`` is False.
            healthy: Whether ``value`` is a real reading.
        """
        ...

    def read(self, name: str) -> Optional[float]:
        """Return the last value set for ``name``, or None if never set."""
        ...
