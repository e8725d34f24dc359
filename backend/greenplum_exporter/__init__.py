"""Prometheus exporter for Greenplum cluster health."""

__version__ = "0.1.0"
