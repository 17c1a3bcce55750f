"""Logging for iiifauth.

Thin layer over the standard library: loggers carry a dict of dimensions
(``data_uri``, ``variant`` ...) that is rendered with every record.

Usage:
    from iiifauth.core.logging import logger

    log = logger.with_context(data_uri=resource.data_uri)
    log.info("Negotiation finished")
"""

import json
import logging
import sys
from typing import Any, Dict, MutableMapping, Optional, Tuple

from iiifauth.core.config import LogFormat, settings

_ROOT_LOGGER_NAME = "iiifauth"


class _TextFormatter(logging.Formatter):
    """Plain text lines with dimensions appended as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        dimensions = getattr(record, "dimensions", None)
        if dimensions:
            rendered = " ".join(f"{k}={v}" for k, v in sorted(dimensions.items()))
            line = f"{line} [{rendered}]"
        return line


class _JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(getattr(record, "dimensions", None) or {})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that carries dimensions through every record."""

    def __init__(self, logger: logging.Logger, dimensions: Optional[Dict[str, Any]] = None):
        """Wrap ``logger`` with a copy of ``dimensions``."""
        super().__init__(logger, {})
        self.dimensions: Dict[str, Any] = dict(dimensions or {})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["dimensions"] = {**self.dimensions, **extra.get("dimensions", {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with ``dimensions`` merged over the current ones."""
        return ContextualLogger(self.logger, {**self.dimensions, **dimensions})


class LoggerConfigurator:
    """Builds configured loggers under the ``iiifauth`` namespace."""

    _configured = False

    @classmethod
    def _configure_root(cls) -> None:
        if cls._configured:
            return
        root = logging.getLogger(_ROOT_LOGGER_NAME)
        root.setLevel(settings.LOG_LEVEL.upper())
        handler = logging.StreamHandler(sys.stdout)
        if settings.LOG_FORMAT == LogFormat.JSON:
            handler.setFormatter(_JSONFormatter())
        else:
            handler.setFormatter(
                _TextFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            )
        root.addHandler(handler)
        root.propagate = False
        cls._configured = True

    @classmethod
    def configure_logger(
        cls, name: str, dimensions: Optional[Dict[str, Any]] = None
    ) -> ContextualLogger:
        """Create a contextual logger.

        Args:
            name: Dotted logger name, usually under ``iiifauth``.
            dimensions: Key/value pairs attached to every record.

        Returns:
            A ``ContextualLogger`` bound to ``dimensions``.
        """
        cls._configure_root()
        return ContextualLogger(logging.getLogger(name), dimensions)


logger = LoggerConfigurator.configure_logger(_ROOT_LOGGER_NAME)
