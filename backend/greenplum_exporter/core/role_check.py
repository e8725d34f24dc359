"""Live primary/standby check behind the /ismaster probe.

The answer is never cached: load balancers use it to decide where writes go,
so each call opens its own connection and asks the catalog directly.
"""

import socket
from typing import Callable

from greenplum_exporter.core.exceptions import ConnectError, QueryError
from greenplum_exporter.core.logging import logger
from greenplum_exporter.core.protocols.connection import ConnectionProvider
from greenplum_exporter.core.queries import PRIMARY_ROLE, ROLE_QUERY


class SegmentRoleChecker:
    """Reports whether the local host is the acting Greenplum master."""

    def __init__(
        self,
        provider: ConnectionProvider,
        hostname: Callable[[], str] = socket.gethostname,
    ) -> None:
        """Initialize the checker.

        Args:
            provider: Opens a fresh connection per check.
            hostname: Returns the address looked up in ``gp_segment_configuration``.
        """
        self._provider = provider
        self._hostname = hostname
        self._logger = logger.with_context(context_base="role_check")

    async def is_primary(self) -> bool:
        """Return True only if the catalog lists this host with role ``p``.

        Connection and query failures are logged and reported as not primary,
        since an unknown role must not receive writes either.
        """
        address = self._hostname()
        try:
            async with self._provider.connect() as connection:
                role = await connection.scalar_one(ROLE_QUERY, {"address": address})
        except (ConnectError, QueryError) as e:
            self._logger.error(f"Role lookup for {address} failed: {e}")
            return False

        return role == PRIMARY_ROLE
