"""SQLAlchemy (asyncpg) implementation of the ConnectionProvider protocol.

The engine uses ``NullPool``, so every ``connect()`` opens a brand new
connection and closing it really closes the socket.  No connection outlives
the ``async with`` block that opened it.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.exc import MultipleResultsFound, NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from greenplum_exporter.core.config import ConnectionConfig
from greenplum_exporter.core.exceptions import ConnectError, QueryError
from greenplum_exporter.core.logging import logger


def build_url(config: ConnectionConfig) -> URL:
    """Build the asyncpg connection URL for ``config``."""
    return URL.create(
        "postgresql+asyncpg",
        username=config.username,
        password=config.password or None,
        host=config.host,
        port=config.port,
        database=config.database,
        query={"ssl": config.sslmode},
    )


class SqlAlchemyDiagnosticConnection:
    """Wraps an open ``AsyncConnection`` for single-value queries."""

    def __init__(self, connection: AsyncConnection) -> None:
        self._connection = connection

    async def scalar_one(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        try:
            result = await self._connection.execute(text(sql), dict(params or {}))
            return result.scalar_one()
        except NoResultFound as e:
            raise QueryError(sql, "Query returned no rows") from e
        except MultipleResultsFound as e:
            raise QueryError(sql, "Query returned more than one row") from e
        except (SQLAlchemyError, OSError) as e:
            raise QueryError(sql, f"Query failed: {e}") from e


class SqlAlchemyConnectionProvider:
    """Opens one fresh connection per ``connect()`` call."""

    def __init__(self, config: ConnectionConfig, engine: Optional[AsyncEngine] = None) -> None:
        self._config = config
        # Autocommit keeps one failed statement from aborting the rest of the pass.
        self._engine = engine or create_async_engine(
            build_url(config),
            poolclass=NullPool,
            isolation_level="AUTOCOMMIT",
        )

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[SqlAlchemyDiagnosticConnection]:
        """Open a connection and close it when the block exits."""
        try:
            connection = await self._engine.connect()
        except (SQLAlchemyError, OSError) as e:
            raise ConnectError(
                f"Trouble connecting to {self._config.host}:{self._config.port}: {e}"
            ) from e

        try:
            yield SqlAlchemyDiagnosticConnection(connection)
        finally:
            try:
                await connection.close()
            except Exception as e:
                logger.warning(f"Error closing connection to {self._config.host}: {e}")

    async def dispose(self) -> None:
        """Release the engine's dialect resources."""
        await self._engine.dispose()
