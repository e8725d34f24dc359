"""HTTP server exposing /metrics and /ismaster."""

import traceback
from typing import Optional

from aiohttp import web

from greenplum_exporter.core.logging import logger
from greenplum_exporter.core.protocols.metrics_renderer import MetricsRenderer
from greenplum_exporter.core.protocols.role_check import RoleChecker

MASTER_BODY = "I am master"
NOT_MASTER_BODY = "I am not master"


class ExporterServer:
    """aiohttp server for Prometheus scrapes and load-balancer role probes.

    ``/metrics`` only serializes what the sampler last wrote; ``/ismaster``
    queries the database on every request.
    """

    def __init__(self, renderer: MetricsRenderer, role_checker: RoleChecker):
        """Initialize the server.

        Args:
            renderer: Serializes the gauges for ``/metrics``.
            role_checker: Answers ``/ismaster`` with a live query.
        """
        self.renderer = renderer
        self.role_checker = role_checker
        self.app = web.Application()
        self.app.add_routes(
            [
                web.get("/metrics", self.metrics_handler),
                web.get("/ismaster", self.ismaster_handler),
            ]
        )
        self.runner: Optional[web.AppRunner] = None
        self.site: Optional[web.TCPSite] = None
        self.logger = logger.with_context(context_base="exporter_server")

    async def metrics_handler(self, request: web.Request) -> web.Response:
        """Return the current gauges in Prometheus text format.

        Args:
            request: The request to handle.

        Returns:
            A 200 response carrying the rendered registry.
        """
        return web.Response(
            body=self.renderer.generate(),
            headers={"Content-Type": self.renderer.content_type},
        )

    async def ismaster_handler(self, request: web.Request) -> web.Response:
        """Report whether this host is the primary master.

        Args:
            request: The request to handle.

        Returns:
            200 if the role query says primary, 400 otherwise (including errors).
        """
        try:
            is_primary = await self.role_checker.is_primary()
        except Exception as e:
            self.logger.error(f"Error checking role: {e}\n{traceback.format_exc()}")
            is_primary = False

        if is_primary:
            return web.Response(text=MASTER_BODY, status=200)
        return web.Response(text=NOT_MASTER_BODY, status=400)

    async def start(self, host: str = "0.0.0.0", port: int = 8080) -> None:
        """Bind and start serving.

        Args:
            host: The host to listen on.
            port: The port to listen on.

        Raises:
            OSError: If the port cannot be bound.
        """
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        self.site = web.TCPSite(self.runner, host=host, port=port)
        try:
            await self.site.start()
        except OSError:
            await self.runner.cleanup()
            self.runner = None
            self.site = None
            raise
        self.logger.info(f"Serving metrics on http://{host}:{port}/metrics")

    async def stop(self) -> None:
        """Stops the server gracefully."""
        if self.site:
            await self.site.stop()
            self.site = None
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
