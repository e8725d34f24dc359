"""Metrics renderer adapters."""

from greenplum_exporter.adapters.metrics_renderer.fake import FakeMetricsRenderer
from greenplum_exporter.adapters.metrics_renderer.prometheus import PrometheusMetricsRenderer

__all__ = ["PrometheusMetricsRenderer", "FakeMetricsRenderer"]
