"""In-memory fakes for core protocols."""

from greenplum_exporter.core.fakes.role_check import FakeRoleChecker

__all__ = ["FakeRoleChecker"]
