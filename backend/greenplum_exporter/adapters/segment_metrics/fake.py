"""Fake SegmentMetrics for testing.

Keeps the latest value per gauge plus a write log, so tests can assert on
sampler behaviour without reaching into prometheus-client internals.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class GaugeWrite:
    """Single recorded ``set()`` call."""

    name: str
    value: float
    healthy: bool


class FakeSegmentMetrics:
    """In-memory spy implementing the SegmentMetrics protocol.

    Usage:
        fake = FakeSegmentMetrics()
        fake.set("down_segments", 2)
        assert fake.read("down_segments") == 2
    """

    def __init__(self) -> None:
        self.values: dict[str, float] = {}
        self.healthy: dict[str, bool] = {}
        self.writes: list[GaugeWrite] = []

    def set(self, name: str, value: float, *, healthy: bool = True) -> None:
        self.values[name] = value
        self.healthy[name] = healthy
        self.writes.append(GaugeWrite(name, value, healthy))

    def read(self, name: str) -> Optional[float]:
        return self.values.get(name)

    # -- test helpers --

    def clear(self) -> None:
        """Reset all recorded state."""
        self.values.clear()
        self.healthy.clear()
        self.writes.clear()
