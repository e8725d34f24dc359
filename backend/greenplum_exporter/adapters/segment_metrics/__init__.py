"""Segment health metrics adapters."""

from greenplum_exporter.adapters.segment_metrics.fake import FakeSegmentMetrics
from greenplum_exporter.adapters.segment_metrics.prometheus import PrometheusSegmentMetrics

__all__ = ["PrometheusSegmentMetrics", "FakeSegmentMetrics"]
