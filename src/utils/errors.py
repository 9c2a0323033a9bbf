"""Error taxonomy and the single normalization point for failures.

Every failure that leaves a component is one of the ``ListWebhookError``
subclasses below, or is turned into an ``ErrorDocument`` by
``normalize_error()``. The REST client raises ``RemoteApiError`` for any
transport or HTTP failure, so the normalizer only dispatches on types.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Log severity attached to a normalized error."""

    VERBOSE = "Verbose"
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ErrorDocument(BaseModel):
    """Normalized error body: ``{timestamp, severity, message, errorType, correlationId?, httpStatus}``."""

    timestamp: str = Field(default_factory=utc_timestamp)
    severity: Severity = Severity.ERROR
    message: str = ""
    error_type: str = Field("unknown", alias="errorType")
    correlation_id: str | None = Field(None, alias="correlationId")
    http_status: int = Field(500, alias="httpStatus")

    model_config = {"populate_by_name": True}

    def to_body(self) -> dict[str, Any]:
        """JSON-ready dict using the wire (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)


class ListWebhookError(Exception):
    """Base class for the service's error taxonomy."""

    http_status = 500
    severity = Severity.ERROR

    def __init__(self, message: str, http_status: int | None = None):
        super().__init__(message)
        self.message = message
        if http_status is not None:
            self.http_status = http_status


class ValidationError(ListWebhookError):
    """Missing or invalid input; raised before any remote call."""

    http_status = 400


class MalformedPayloadError(ListWebhookError):
    """Notification body is absent, not JSON, or has no events."""

    http_status = 400


class NotFoundError(ListWebhookError):
    """The remote service answered 404 for a list, subscription or item."""

    http_status = 404
    severity = Severity.WARNING


class RemoteServiceError(ListWebhookError):
    """Any other failure reported by, or while reaching, the remote service."""


class RemoteApiError(Exception):
    """Structured failure from the SharePoint REST API (raised by the HTTP client only).

    status is None when the request never got a response (DNS, TLS, timeout).
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.correlation_id = correlation_id


class AggregateError(ListWebhookError):
    """Several concurrent failures folded into one error."""

    def __init__(self, errors: list[Any], message: str | None = None):
        self.errors = list(errors)
        super().__init__(message or f"{len(self.errors)} error(s) occurred")


def _prefixed(context_message: str | None, message: str) -> str:
    if context_message:
        return f"{context_message}: {message}" if message else context_message
    return message


def _from_remote(error: RemoteApiError) -> ErrorDocument:
    if error.status == 404:
        return ErrorDocument(
            severity=Severity.WARNING,
            message=error.message,
            error_type=NotFoundError.__name__,
            correlation_id=error.correlation_id,
            http_status=404,
        )
    return ErrorDocument(
        severity=Severity.ERROR,
        message=error.message,
        error_type=RemoteServiceError.__name__,
        correlation_id=error.correlation_id,
        http_status=error.status or 500,
    )


def _from_aggregate(error: AggregateError) -> ErrorDocument:
    docs = [normalize_error(e) for e in error.errors]
    parts = [f"{i}) {doc.error_type}: {doc.message}" for i, doc in enumerate(docs, start=1)]
    statuses = {doc.http_status for doc in docs}
    return ErrorDocument(
        severity=Severity.ERROR,
        message=f"{len(docs)} error(s): " + "; ".join(parts),
        error_type=AggregateError.__name__,
        http_status=statuses.pop() if len(statuses) == 1 else 500,
    )


def normalize_error(error: Any, context_message: str | None = None) -> ErrorDocument:
    """Convert any failure into an ErrorDocument (always timestamped, status defaults to 500)."""
    if isinstance(error, ErrorDocument):
        doc = error.model_copy()
    elif isinstance(error, RemoteApiError):
        doc = _from_remote(error)
    elif isinstance(error, AggregateError):
        doc = _from_aggregate(error)
    elif isinstance(error, ListWebhookError):
        doc = ErrorDocument(
            severity=error.severity,
            message=error.message,
            error_type=type(error).__name__,
            http_status=error.http_status,
        )
    elif isinstance(error, BaseException):
        doc = ErrorDocument(
            message=f"{type(error).__name__}: {error}",
            error_type=type(error).__name__,
        )
    elif isinstance(error, (str, int, float, bool)):
        doc = ErrorDocument(message=str(error), error_type=type(error).__name__)
    else:
        doc = ErrorDocument(message=repr(error), error_type="unknown")
    doc.message = _prefixed(context_message, doc.message)
    return doc
