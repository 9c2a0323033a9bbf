"""Structured logging helpers built on top of structlog.

Logging is configured explicitly: the web server lifespan and the CLI call
``init_logging()`` on startup and ``shutdown_logging()`` on exit. Components
receive an ``EventLogger`` instead of reaching for a global listener.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

from src.config import LOG_FILE, LOG_LEVEL, LOG_TO_FILE, VERBOSE_LOGGING
from src.utils.errors import Severity

BoundLogger = structlog.stdlib.BoundLogger

_configured = False
_handlers: list[logging.Handler] = []


def _coerce_level(level_name: str) -> int:
    """Translate a string/int environment value into a logging level."""
    if level_name.isdigit():
        return int(level_name)
    return getattr(logging, level_name.upper(), logging.INFO)


def init_logging(log_to_file: bool = LOG_TO_FILE) -> None:
    """Configure structlog with console (+ optional JSONL file) outputs. Idempotent."""
    global _configured
    if _configured:
        return

    effective_level = logging.DEBUG if VERBOSE_LOGGING else _coerce_level(LOG_LEVEL)
    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        timestamper,
    ]

    console_handler = logging.StreamHandler()
    console_handler.setLevel(effective_level)
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=True),
            foreign_pre_chain=pre_chain,
        )
    )
    _handlers.append(console_handler)

    if log_to_file:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
        file_handler.setLevel(effective_level)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=pre_chain,
            )
        )
        _handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(effective_level)
    for handler in _handlers:
        root_logger.addHandler(handler)
    logging.captureWarnings(True)

    # Request/response lines from the HTTP stack flood the console at INFO
    for name in ("azure", "msal", "httpx", "httpcore", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(effective_level),
        cache_logger_on_first_use=True,
    )

    _configured = True


def shutdown_logging() -> None:
    """Flush and detach the handlers installed by init_logging()."""
    global _configured
    if not _configured:
        return
    root_logger = logging.getLogger()
    for handler in _handlers:
        handler.flush()
        root_logger.removeHandler(handler)
        handler.close()
    _handlers.clear()
    structlog.reset_defaults()
    _configured = False


def get_logger(name: str = "list_webhooks", **bindings: Any) -> BoundLogger:
    """Return the structured logger, optionally bound with context."""
    logger = structlog.get_logger(name)
    if bindings:
        logger = logger.bind(**bindings)
    return logger


def bind_context(**context: Any) -> None:
    """Bind context variables to be included with every log entry."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


_SEVERITY_METHODS = {
    Severity.VERBOSE: "debug",
    Severity.INFO: "info",
    Severity.WARNING: "warning",
    Severity.ERROR: "error",
}


class EventLogger:
    """Logging port handed to each component: ``record(severity, message, **context)``."""

    def __init__(self, logger: Any = None, name: str = "list_webhooks"):
        self._logger = logger if logger is not None else get_logger(name)

    def record(self, severity: Severity, message: str, **context: Any) -> str:
        """Emit one log entry and return the message (handy for history text)."""
        method = getattr(self._logger, _SEVERITY_METHODS.get(severity, "info"))
        method(message, **context)
        return message

    def info(self, message: str, **context: Any) -> str:
        return self.record(Severity.INFO, message, **context)

    def bind(self, **context: Any) -> "EventLogger":
        return EventLogger(self._logger.bind(**context))
