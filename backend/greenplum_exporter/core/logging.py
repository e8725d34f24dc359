"""Logging setup with contextual loggers.

``logger.with_context(...)`` returns a child adapter whose extra fields are
attached to every record, so the JSON formatter can emit them as keys.
"""

import logging
import sys
from typing import Any, MutableMapping, Optional

from pythonjsonlogger.json import JsonFormatter

from greenplum_exporter.core.config import settings

_TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that carries a dictionary of context fields."""

    def __init__(self, logger: logging.Logger, extra: Optional[dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def with_context(self, **context: Any) -> "ContextualLogger":
        """Return a new logger with ``context`` merged into the current fields."""
        return ContextualLogger(self.logger, {**self.extra, **context})


class LoggerConfigurator:
    """Configures handlers and builds contextual loggers."""

    @staticmethod
    def configure_root(level: Optional[str] = None, json_format: Optional[bool] = None) -> None:
        """Install a single stdout handler on the root logger.

        Args:
            level (str, optional): Log level name. Defaults to ``settings.LOG_LEVEL``.
            json_format (bool, optional): Emit JSON lines. Defaults to ``settings.LOG_JSON``.
        """
        level = level or settings.LOG_LEVEL
        json_format = settings.LOG_JSON if json_format is None else json_format

        handler = logging.StreamHandler(sys.stdout)
        if json_format:
            handler.setFormatter(JsonFormatter(_JSON_FORMAT))
        else:
            handler.setFormatter(logging.Formatter(_TEXT_FORMAT))

        root = logging.getLogger()
        root.handlers.clear()
        root.addHandler(handler)
        root.setLevel(level)

        # aiohttp logs every request at INFO; scrapes would drown everything else.
        logging.getLogger("aiohttp.access").setLevel(logging.WARNING)

    @staticmethod
    def configure_logger(name: str, **context: Any) -> ContextualLogger:
        """Return a contextual logger for ``name``.

        Args:
            name (str): Logger name, usually ``__name__``.
            **context: Fields attached to every record.

        Returns:
            ContextualLogger: The configured logger.
        """
        return ContextualLogger(logging.getLogger(name), context)


logger = LoggerConfigurator.configure_logger("greenplum_exporter")
