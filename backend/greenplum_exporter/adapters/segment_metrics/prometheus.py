"""Prometheus implementation of the SegmentMetrics protocol.

One Gauge per diagnostic query on the injected CollectorRegistry, plus a
``sample_healthy`` gauge labelled by short name that says whether the value
gauge currently holds a real reading or a failure sentinel.
"""

from typing import Iterable, Optional

from prometheus_client import CollectorRegistry, Gauge

from greenplum_exporter.core.queries import DIAGNOSTIC_QUERIES, DiagnosticQuery


class PrometheusSegmentMetrics:
    """Prometheus-backed cluster-health gauges."""

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        namespace: str = "staq",
        queries: Iterable[DiagnosticQuery] = DIAGNOSTIC_QUERIES,
    ) -> None:
        self._registry = registry or CollectorRegistry()
        self._namespace = namespace
        self._written: set[str] = set()
        self._gauges: dict[str, Gauge] = {}

        for query in queries:
            # CollectorRegistry rejects a second registration of the same name.
            self._gauges[query.name] = Gauge(
                query.name,
                query.description,
                namespace=namespace,
                registry=self._registry,
            )

        self._healthy = Gauge(
            "sample_healthy",
            "1 if the gauge holds a real reading, 0 if it holds its failure sentinel",
            ["gauge"],
            namespace=namespace,
            registry=self._registry,
        )

    # -- SegmentMetrics protocol methods --

    def set(self, name: str, value: float, *, healthy: bool = True) -> None:
        self._gauges[name].set(value)
        self._healthy.labels(gauge=name).set(1 if healthy else 0)
        self._written.add(name)

    def read(self, name: str) -> Optional[float]:
        if name not in self._written:
            return None
        full_name = f"{self._namespace}_{name}" if self._namespace else name
        return self._registry.get_sample_value(full_name)
