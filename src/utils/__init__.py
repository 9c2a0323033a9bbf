"""Utility modules."""

from src.utils.errors import (
    AggregateError,
    ErrorDocument,
    ListWebhookError,
    MalformedPayloadError,
    NotFoundError,
    RemoteApiError,
    RemoteServiceError,
    Severity,
    ValidationError,
    normalize_error,
)
from src.utils.logger import EventLogger, get_logger, init_logging, shutdown_logging
from src.utils.result import Err, Ok, Result, fail, guarded

__all__ = [
    "AggregateError",
    "ErrorDocument",
    "ListWebhookError",
    "MalformedPayloadError",
    "NotFoundError",
    "RemoteApiError",
    "RemoteServiceError",
    "Severity",
    "ValidationError",
    "normalize_error",
    "EventLogger",
    "get_logger",
    "init_logging",
    "shutdown_logging",
    "Err",
    "Ok",
    "Result",
    "fail",
    "guarded",
]
