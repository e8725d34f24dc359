"""Core protocols for dependency injection."""

from greenplum_exporter.core.protocols.connection import ConnectionProvider, DiagnosticConnection
from greenplum_exporter.core.protocols.metrics_renderer import MetricsRenderer
from greenplum_exporter.core.protocols.metrics_service import MetricsService
from greenplum_exporter.core.protocols.role_check import RoleChecker
from greenplum_exporter.core.protocols.segment_metrics import SegmentMetrics

__all__ = [
    "ConnectionProvider",
    "DiagnosticConnection",
    "MetricsRenderer",
    "MetricsService",
    "RoleChecker",
    "SegmentMetrics",
]
