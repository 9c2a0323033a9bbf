"""Subscription management API: register, list, show, remove list webhooks."""

from typing import Any, Callable, Optional

from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import JSONResponse

from src.sharepoint.models import SiteContext
from src.utils.errors import ErrorDocument
from src.utils.logger import get_logger
from src.utils.result import Err, Result, fail
from src.webhook.subscription import SubscriptionRegistry

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

logger = get_logger("list_webhooks.webhook.routes")


def error_response(error: ErrorDocument) -> JSONResponse:
    """Status mirrors the normalized httpStatus; the body is the ErrorDocument."""
    return JSONResponse(status_code=error.http_status, content=error.to_body())


def unexpected_error(e: Exception, operation: str) -> JSONResponse:
    logger.exception("webhook.routes.unexpected_error", operation=operation, error=str(e))
    return error_response(fail(e, f"Unexpected error while executing '{operation}'").error)


def _site(tenant_prefix: Optional[str], site_relative_path: Optional[str]) -> Optional[SiteContext]:
    if not tenant_prefix and not site_relative_path:
        return None
    return SiteContext(tenant_prefix=tenant_prefix or None, site_relative_path=site_relative_path or None)


def _registry(request: Request) -> SubscriptionRegistry:
    return request.app.state.registry


def _to_response(result: Result, on_ok: Callable[[Any], Response]) -> Response:
    if isinstance(result, Err):
        return error_response(result.error)
    return on_ok(result.value)


@router.post("/register")
async def register_webhook(
    request: Request,
    list_id: Optional[str] = Query(None, alias="listId"),
    notification_url: Optional[str] = Query(None, alias="notificationUrl"),
    client_state: Optional[str] = Query(None, alias="clientState"),
    tenant_prefix: Optional[str] = Query(None, alias="tenantPrefix"),
    site_relative_path: Optional[str] = Query(None, alias="siteRelativePath"),
) -> Response:
    """Register ``notificationUrl`` on the list for 180 days; returns the raw subscription."""
    try:
        result = await _registry(request).register(
            list_id,
            notification_url,
            site=_site(tenant_prefix, site_relative_path),
            client_state=client_state,
        )
        return _to_response(result, lambda sub: JSONResponse(sub.to_body()))
    except Exception as e:
        return unexpected_error(e, "register")


@router.get("/list")
async def list_webhooks(
    request: Request,
    list_id: Optional[str] = Query(None, alias="listId"),
    tenant_prefix: Optional[str] = Query(None, alias="tenantPrefix"),
    site_relative_path: Optional[str] = Query(None, alias="siteRelativePath"),
) -> Response:
    """Return the subscriptions registered on the list."""
    try:
        result = await _registry(request).list(list_id, site=_site(tenant_prefix, site_relative_path))
        return _to_response(result, lambda subs: JSONResponse([s.to_body() for s in subs]))
    except Exception as e:
        return unexpected_error(e, "list")


@router.get("/show")
async def show_webhook(
    request: Request,
    list_id: Optional[str] = Query(None, alias="listId"),
    notification_url: Optional[str] = Query(None, alias="notificationUrl"),
    tenant_prefix: Optional[str] = Query(None, alias="tenantPrefix"),
    site_relative_path: Optional[str] = Query(None, alias="siteRelativePath"),
) -> Response:
    """Return the subscription whose notificationUrl matches exactly, or ``{}``."""
    try:
        result = await _registry(request).find_by_url(
            list_id,
            notification_url,
            site=_site(tenant_prefix, site_relative_path),
        )
        return _to_response(result, lambda sub: JSONResponse(sub.to_body() if sub else {}))
    except Exception as e:
        return unexpected_error(e, "show")


@router.post("/remove")
async def remove_webhook(
    request: Request,
    list_id: Optional[str] = Query(None, alias="listId"),
    webhook_id: Optional[str] = Query(None, alias="webhookId"),
    tenant_prefix: Optional[str] = Query(None, alias="tenantPrefix"),
    site_relative_path: Optional[str] = Query(None, alias="siteRelativePath"),
) -> Response:
    """Delete a subscription; 204 with an empty body on success."""
    try:
        result = await _registry(request).remove(
            list_id,
            webhook_id,
            site=_site(tenant_prefix, site_relative_path),
        )
        return _to_response(result, lambda _: Response(status_code=204))
    except Exception as e:
        return unexpected_error(e, "remove")
