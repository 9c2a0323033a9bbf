"""Webhook mode: run the FastAPI listener for SharePoint list change notifications."""

import sys

import typer
import uvicorn

from src.config import WEBHOOK_PORT, load_settings
from src.webhook.server import create_app

from .shared import console, logger


def serve(
    port: int = typer.Option(WEBHOOK_PORT, "--port", "-p", help="Port for the webhook server"),
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Bind host"),
    lookback_minutes: int | None = typer.Option(
        None,
        "--lookback-minutes",
        min=1,
        help="Change window reconciled per notification (defaults to CHANGES_LOOKBACK_MINUTES)",
    ),
) -> None:
    """Start the webhook listener (handshake, notifications and subscription management routes)."""
    log = logger.bind(command="serve", port=port)
    log.info("webhook.start")

    overrides = {"changes_lookback_minutes": lookback_minutes} if lookback_minutes is not None else {}
    settings = load_settings(**overrides)
    if not settings.tenant_prefix:
        console.print("[red]TENANT_PREFIX is not set; requests must then pass tenantPrefix explicitly.[/red]")
        log.warning("webhook.missing_tenant_prefix")
    if not settings.azure_tenant_id or not settings.azure_client_id:
        console.print("[red]Missing AZURE_TENANT_ID / AZURE_CLIENT_ID: only validation handshakes will succeed.[/red]")
        log.warning("webhook.missing_env")

    app = create_app(settings=settings)

    console.print(f"[green]Starting webhook server on http://{host}:{port}[/green]")
    console.print(
        "[dim]Endpoints: POST /webhooks/service, POST /webhooks/register, GET /webhooks/list, "
        "GET /webhooks/show, POST /webhooks/remove, GET /debug/web, GET /health[/dim]"
    )
    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level="info",
            timeout_graceful_shutdown=15,
        )
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
