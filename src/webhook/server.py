"""FastAPI webhook server for SharePoint list change notifications."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from src.auth import get_access_provider
from src.config import WebhookSettings, load_settings
from src.sharepoint.client import SharePointRestClient
from src.sharepoint.models import SiteContext
from src.sharepoint.protocol import RemoteListClient
from src.utils.logger import (
    EventLogger,
    bind_context,
    clear_context,
    get_logger,
    init_logging,
    shutdown_logging,
)
from src.utils.result import Err, guarded
from src.webhook.gateway import GatewayResponse, NotificationGateway
from src.webhook.subscription import SubscriptionRegistry
from src.webhook.subscription_routes import error_response, router as subscription_router, unexpected_error

logger = get_logger("list_webhooks.webhook.server")


def _install_services(app: FastAPI, client: RemoteListClient, settings: WebhookSettings) -> None:
    """Wire the core components on app.state around one RemoteListClient."""
    app.state.client = client
    app.state.settings = settings
    app.state.registry = SubscriptionRegistry(
        client, logger=EventLogger(name="list_webhooks.webhook.subscription")
    )
    app.state.gateway = NotificationGateway(
        client, settings, logger=EventLogger(name="list_webhooks.webhook.gateway")
    )


@asynccontextmanager
async def _lifespan(app: FastAPI, settings: WebhookSettings, create_client: bool = True):
    """Set up logging and (unless injected) the shared httpx client and REST client."""
    init_logging()
    http_client: httpx.AsyncClient | None = None
    if create_client:
        if not settings.azure_tenant_id or not settings.azure_client_id:
            logger.warning("webhook.lifespan.no_credentials")
        http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.http_timeout_seconds),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
        )
        client = SharePointRestClient(settings, get_access_provider(settings), http_client)
        _install_services(app, client, settings)
        logger.info(
            "webhook.lifespan.client_created",
            tenant_prefix=settings.tenant_prefix,
            site_relative_path=settings.site_relative_path,
        )

    yield

    if http_client is not None:
        try:
            await http_client.aclose()
        except Exception as e:
            logger.debug("webhook.lifespan.http_client_close_error", error=str(e))
    shutdown_logging()


def create_app(
    client: RemoteListClient | None = None,
    settings: WebhookSettings | None = None,
) -> FastAPI:
    """
    Create the FastAPI app. If client is passed (tests, custom hosts) it is used as is;
    otherwise the lifespan creates the SharePoint REST client in the server's event loop.
    """
    settings = settings or load_settings()
    create_client_in_lifespan = client is None
    app = FastAPI(
        title="SharePoint List Webhooks",
        version="0.1.0",
        lifespan=lambda app: _lifespan(app, settings, create_client=create_client_in_lifespan),
    )
    if client is not None:
        _install_services(app, client, settings)

    app.include_router(subscription_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/debug/web", response_model=None)
    async def debug_web(
        request: Request,
        tenant_prefix: str | None = Query(None, alias="tenantPrefix"),
        site_relative_path: str | None = Query(None, alias="siteRelativePath"),
    ) -> Response:
        """Connectivity check: title and URL of the target web."""
        try:
            site = None
            if tenant_prefix or site_relative_path:
                site = SiteContext(tenant_prefix=tenant_prefix, site_relative_path=site_relative_path)
            result = await guarded(
                request.app.state.client.get_web(site=site),
                "Could not get the SharePoint web",
                EventLogger(logger),
            )
            if isinstance(result, Err):
                return error_response(result.error)
            return JSONResponse(result.value.model_dump())
        except Exception as e:
            return unexpected_error(e, "debug/web")

    @app.api_route("/webhooks/service", methods=["GET", "POST"], response_model=None)
    async def notifications(request: Request) -> Response:
        # Subscription validation: SharePoint sends validationtoken as a query param
        validation_token = request.query_params.get("validationtoken") or request.query_params.get(
            "validationToken"
        )
        gateway: NotificationGateway = request.app.state.gateway
        bind_context(route="webhooks/service", handshake=bool(validation_token))
        try:
            body = None if validation_token else await request.body()
            return _to_http(await gateway.handle(validation_token, body))
        finally:
            clear_context()

    return app


def _to_http(outcome: GatewayResponse) -> Response:
    if outcome.media_type == "text/plain":
        return PlainTextResponse(content=outcome.body or "", status_code=outcome.status_code)
    if outcome.body is None:
        return Response(status_code=outcome.status_code)
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)
