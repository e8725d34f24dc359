"""Database connection adapters."""

from greenplum_exporter.adapters.connection.fake import FakeConnectionProvider
from greenplum_exporter.adapters.connection.postgres import SqlAlchemyConnectionProvider

__all__ = ["SqlAlchemyConnectionProvider", "FakeConnectionProvider"]
