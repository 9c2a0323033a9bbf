"""Shared CLI helpers: console, logger, REST client construction, result printing."""

import json
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
import typer
from rich.console import Console

from src.auth import get_access_provider
from src.config import WebhookSettings, load_settings
from src.sharepoint.client import SharePointRestClient
from src.sharepoint.models import SiteContext
from src.utils.errors import ErrorDocument
from src.utils.logger import EventLogger, get_logger
from src.utils.result import Err, Result
from src.webhook.subscription import SubscriptionRegistry

console = Console()
logger = get_logger("list_webhooks.cli")


def site_option(tenant_prefix: str | None, site_relative_path: str | None) -> SiteContext | None:
    if not tenant_prefix and not site_relative_path:
        return None
    return SiteContext(tenant_prefix=tenant_prefix, site_relative_path=site_relative_path)


@asynccontextmanager
async def open_registry(settings: WebhookSettings | None = None) -> AsyncIterator[SubscriptionRegistry]:
    """SubscriptionRegistry on a fresh httpx client, closed when the block exits."""
    settings = settings or load_settings()
    async with httpx.AsyncClient(timeout=httpx.Timeout(settings.http_timeout_seconds)) as http_client:
        client = SharePointRestClient(settings, get_access_provider(settings), http_client)
        yield SubscriptionRegistry(client, logger=EventLogger(logger))


def print_error(error: ErrorDocument) -> None:
    style = "yellow" if error.http_status == 404 else "red"
    console.print(f"[{style}]{error.error_type} ({error.http_status}): {error.message}[/{style}]")
    if error.correlation_id:
        console.print(f"[dim]Correlation id: {error.correlation_id}[/dim]")


def print_json(data: object) -> None:
    console.print_json(json.dumps(data, default=str))


def exit_on_error(result: Result) -> None:
    """Print the ErrorDocument and exit 1 when result is an Err."""
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
