"""Fake ConnectionProvider for testing.

Scripts one outcome per SQL string and counts opens and releases, so tests
can assert that every pass releases exactly the connections it opened.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Optional

from greenplum_exporter.core.exceptions import ConnectError, QueryError


class FakeDiagnosticConnection:
    """Connection returning scripted results keyed by SQL text."""

    def __init__(self, provider: "FakeConnectionProvider") -> None:
        self._provider = provider

    async def scalar_one(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        self._provider.executed.append((sql, dict(params or {})))
        if sql not in self._provider.results:
            raise QueryError(sql, "Query returned no rows")
        outcome = self._provider.results[sql]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeConnectionProvider:
    """In-memory stand-in implementing the ConnectionProvider protocol.

    Usage:
        fake = FakeConnectionProvider({DOWN_SEGMENTS.sql: 2})
        fake.fail_connect = True          # next opens raise ConnectError
        fake.results[sql] = QueryError(sql)  # that query fails
    """

    def __init__(self, results: Optional[dict[str, Any]] = None) -> None:
        self.results: dict[str, Any] = dict(results or {})
        self.fail_connect: bool = False
        self.opened: int = 0
        self.released: int = 0
        self.connect_attempts: int = 0
        self.executed: list[tuple[str, dict[str, Any]]] = []

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[FakeDiagnosticConnection]:
        self.connect_attempts += 1
        if self.fail_connect:
            raise ConnectError("connection refused")
        self.opened += 1
        try:
            yield FakeDiagnosticConnection(self)
        finally:
            self.released += 1

    # -- test helpers --

    @property
    def open_connections(self) -> int:
        """Connections opened but not yet released."""
        return self.opened - self.released
