"""Connection protocols for reaching the Greenplum master.

The sampler and the role checker only need "open a connection, read one
scalar, close it".  Production wraps SQLAlchemy over asyncpg; tests inject
a fake that scripts results per query.
"""

from typing import Any, AsyncContextManager, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class DiagnosticConnection(Protocol):
    """An open connection able to run single-value diagnostic queries."""

    async def scalar_one(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Run ``sql`` and return the first column of its only row.

        Raises:
            QueryError: On execution failure or if the result is not exactly one row.
        """
        ...


@runtime_checkable
class ConnectionProvider(Protocol):
    """Opens fresh, caller-scoped connections."""

    def connect(self) -> AsyncContextManager[DiagnosticConnection]:
        """Open a connection that is released when the context exits.

        Raises:
            ConnectError: If the connection cannot be opened.
        """
        ...
