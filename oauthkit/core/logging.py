"""Contextual logging for oauthkit.

Usage::

    from oauthkit.core.logging import logger

    step_logger = logger.with_prefix("OAuth 1.0a: ").with_context(provider="twitter")
    step_logger.info("Requesting request token")

Dimensions added with :meth:`ContextualLogger.with_context` are attached to
every record and rendered by the configured formatter.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, MutableMapping, Optional, Tuple

from oauthkit.core.config import LogFormat, settings

_DIMENSIONS_ATTR = "dimensions"


class _TextFormatter(logging.Formatter):
    """Human readable formatter that appends dimensions as key=value pairs."""

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s %(levelname)s %(name)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        dimensions = getattr(record, _DIMENSIONS_ATTR, None)
        if dimensions:
            rendered = " ".join(f"{k}={v}" for k, v in dimensions.items())
            line = f"{line} [{rendered}]"
        return line


class _JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        dimensions = getattr(record, _DIMENSIONS_ATTR, None)
        if dimensions:
            log_obj.update(dimensions)
        if record.exc_info:
            log_obj["error.type"] = record.exc_info[0].__name__ if record.exc_info[0] else None
            log_obj["error.stack_trace"] = self.formatException(record.exc_info)
        return json.dumps(log_obj, default=str)


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter carrying a prefix and a set of dimensions."""

    def __init__(
        self,
        logger: logging.Logger,
        prefix: str = "",
        dimensions: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(logger, dict(dimensions or {}))
        self.prefix = prefix
        self.dimensions: Dict[str, Any] = dict(dimensions or {})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        merged = dict(self.dimensions)
        merged.update(extra.pop(_DIMENSIONS_ATTR, {}) or {})
        extra[_DIMENSIONS_ATTR] = merged
        kwargs["extra"] = extra
        return f"{self.prefix}{msg}", kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a child logger with additional dimensions."""
        merged = dict(self.dimensions)
        merged.update(dimensions)
        return ContextualLogger(self.logger, prefix=self.prefix, dimensions=merged)

    def with_prefix(self, prefix: str) -> "ContextualLogger":
        """Return a child logger whose messages start with ``prefix``."""
        return ContextualLogger(
            self.logger, prefix=f"{self.prefix}{prefix}", dimensions=self.dimensions
        )


class LoggerConfigurator:
    """Builds contextual loggers attached to the oauthkit handler."""

    _configured = False

    @classmethod
    def _configure_root(cls) -> None:
        if cls._configured:
            return
        root = logging.getLogger("oauthkit")
        root.setLevel(settings.LOG_LEVEL)
        if not root.handlers:
            handler = logging.StreamHandler(sys.stderr)
            if settings.LOG_FORMAT == LogFormat.JSON:
                handler.setFormatter(_JsonFormatter())
            else:
                handler.setFormatter(_TextFormatter())
            root.addHandler(handler)
        cls._configured = True

    @classmethod
    def configure_logger(
        cls,
        name: str,
        prefix: str = "",
        dimensions: Optional[Dict[str, Any]] = None,
    ) -> ContextualLogger:
        """Create a contextual logger.

        Args:
            name: Logger name, normally a dotted module path under ``oauthkit``.
            prefix: Text prepended to every message.
            dimensions: Key/value pairs attached to every record.

        Returns:
            A configured ContextualLogger.
        """
        cls._configure_root()
        return ContextualLogger(logging.getLogger(name), prefix=prefix, dimensions=dimensions)


logger = LoggerConfigurator.configure_logger("oauthkit")
