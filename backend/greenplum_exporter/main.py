"""Runner for the Greenplum exporter."""

import asyncio
import signal

from prometheus_client import CollectorRegistry

from greenplum_exporter.adapters.connection import SqlAlchemyConnectionProvider
from greenplum_exporter.adapters.metrics_renderer import PrometheusMetricsRenderer
from greenplum_exporter.adapters.segment_metrics import PrometheusSegmentMetrics
from greenplum_exporter.core.config import Settings, settings
from greenplum_exporter.core.logging import LoggerConfigurator
from greenplum_exporter.core.logging import logger as global_logger
from greenplum_exporter.core.metrics_service import PrometheusMetricsService
from greenplum_exporter.core.protocols.connection import ConnectionProvider
from greenplum_exporter.core.role_check import SegmentRoleChecker


def build_service(config: Settings, provider: ConnectionProvider) -> PrometheusMetricsService:
    """Wire the gauges, renderer, and role checker onto one registry.

    Args:
        config (Settings): The settings to build from.
        provider (ConnectionProvider): Shared by sampler and role checker.

    Returns:
        PrometheusMetricsService: The unstarted service.
    """
    registry = CollectorRegistry()
    return PrometheusMetricsService(
        segments=PrometheusSegmentMetrics(registry=registry, namespace=config.METRICS_NAMESPACE),
        renderer=PrometheusMetricsRenderer(registry),
        provider=provider,
        role_checker=SegmentRoleChecker(provider),
        interval=config.SAMPLE_INTERVAL_SECONDS,
    )


async def main(config: Settings = settings) -> None:
    """Run the exporter until SIGINT or SIGTERM.

    Raises:
        OSError: If the metrics port cannot be bound.
    """
    LoggerConfigurator.configure_root(config.LOG_LEVEL, config.LOG_JSON)
    logger = global_logger.with_context(context_base="exporter", operation="runner")

    provider = SqlAlchemyConnectionProvider(config.connection_config)
    service = build_service(config, provider)

    shutdown = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown.set)

    logger.info(
        f"Starting exporter for {config.GREENPLUM_HOST}:{config.GREENPLUM_PORT}"
        f"/{config.GREENPLUM_DATABASE} on port :{config.METRICS_PORT}"
    )
    try:
        try:
            await service.start(host=config.METRICS_HOST, port=config.METRICS_PORT)
        except OSError as e:
            logger.critical(f"Cannot serve metrics on port {config.METRICS_PORT}: {e}")
            raise
        await shutdown.wait()
        logger.info("Shutdown requested, stopping exporter")
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
        await service.stop()
        await provider.dispose()


def run() -> None:
    """Console entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
