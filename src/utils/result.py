"""Explicit success-or-error results for calls to the remote service."""

from dataclasses import dataclass
from typing import Any, Awaitable, Generic, TypeVar, Union

from src.utils.errors import ErrorDocument, normalize_error
from src.utils.logger import EventLogger

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: ErrorDocument


Result = Union[Ok[T], Err]


def fail(error: Any, context_message: str | None = None, logger: EventLogger | None = None) -> Err:
    """Normalize ``error`` into an Err, logging it at its severity when a logger is given."""
    doc = normalize_error(error, context_message)
    if logger is not None:
        logger.record(
            doc.severity,
            doc.message,
            error_type=doc.error_type,
            http_status=doc.http_status,
            correlation_id=doc.correlation_id,
        )
    return Err(doc)


async def guarded(
    call: Awaitable[T],
    context_message: str,
    logger: EventLogger | None = None,
) -> Result[T]:
    """Await a remote call; exceptions never cross this boundary, they become Err."""
    try:
        return Ok(await call)
    except Exception as e:
        return fail(e, context_message, logger)
