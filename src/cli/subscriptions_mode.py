"""Subscription commands: register, list, show and remove list webhooks from the terminal."""

import asyncio

import typer
from rich.table import Table

from .shared import console, exit_on_error, logger, open_registry, print_json, site_option

TENANT_HELP = "Tenant prefix (defaults to TENANT_PREFIX)"
SITE_HELP = "Site relative path (defaults to SITE_RELATIVE_PATH)"


def register(
    list_id: str = typer.Argument(..., help="List title or GUID"),
    notification_url: str = typer.Argument(..., help="Public URL of POST /webhooks/service"),
    client_state: str | None = typer.Option(None, "--client-state", help="Opaque value echoed in notifications"),
    tenant_prefix: str | None = typer.Option(None, "--tenant", "-t", help=TENANT_HELP),
    site_relative_path: str | None = typer.Option(None, "--site", "-s", help=SITE_HELP),
) -> None:
    """Register a webhook on a list (expires in 180 days, not renewed automatically)."""
    log = logger.bind(command="register", list_id=list_id)
    log.info("cli.register.start")

    async def _run():
        async with open_registry() as registry:
            return await registry.register(
                list_id,
                notification_url,
                site=site_option(tenant_prefix, site_relative_path),
                client_state=client_state,
            )

    result = asyncio.run(_run())
    exit_on_error(result)
    console.print("[green]Webhook registered.[/green]")
    print_json(result.value.to_body())


def list_webhooks(
    list_id: str = typer.Argument(..., help="List title or GUID"),
    tenant_prefix: str | None = typer.Option(None, "--tenant", "-t", help=TENANT_HELP),
    site_relative_path: str | None = typer.Option(None, "--site", "-s", help=SITE_HELP),
) -> None:
    """List the webhooks registered on a list."""
    logger.bind(command="list", list_id=list_id).info("cli.list.start")

    async def _run():
        async with open_registry() as registry:
            return await registry.list(list_id, site=site_option(tenant_prefix, site_relative_path))

    result = asyncio.run(_run())
    exit_on_error(result)
    table = Table(title=f"Webhooks on {list_id}")
    table.add_column("Id", style="cyan")
    table.add_column("Notification URL", style="green")
    table.add_column("Expires")
    for subscription in result.value:
        table.add_row(subscription.id, subscription.notification_url, subscription.expiration_date_time or "")
    console.print(table)


def show(
    list_id: str = typer.Argument(..., help="List title or GUID"),
    notification_url: str = typer.Argument(..., help="Exact notification URL to look up"),
    tenant_prefix: str | None = typer.Option(None, "--tenant", "-t", help=TENANT_HELP),
    site_relative_path: str | None = typer.Option(None, "--site", "-s", help=SITE_HELP),
) -> None:
    """Show the webhook registered with a given notification URL."""
    logger.bind(command="show", list_id=list_id).info("cli.show.start")

    async def _run():
        async with open_registry() as registry:
            return await registry.find_by_url(
                list_id,
                notification_url,
                site=site_option(tenant_prefix, site_relative_path),
            )

    result = asyncio.run(_run())
    exit_on_error(result)
    if result.value is None:
        console.print("[yellow]No webhook registered with this notification URL.[/yellow]")
        return
    print_json(result.value.to_body())


def remove(
    list_id: str = typer.Argument(..., help="List title or GUID"),
    webhook_id: str = typer.Argument(..., help="Subscription id"),
    tenant_prefix: str | None = typer.Option(None, "--tenant", "-t", help=TENANT_HELP),
    site_relative_path: str | None = typer.Option(None, "--site", "-s", help=SITE_HELP),
) -> None:
    """Delete a webhook from a list."""
    logger.bind(command="remove", list_id=list_id, webhook_id=webhook_id).info("cli.remove.start")

    async def _run():
        async with open_registry() as registry:
            return await registry.remove(list_id, webhook_id, site=site_option(tenant_prefix, site_relative_path))

    result = asyncio.run(_run())
    exit_on_error(result)
    console.print(f"[green]Deleted webhook {webhook_id}.[/green]")
