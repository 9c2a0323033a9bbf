"""CLI commands: the webhook server plus one command per subscription operation."""

from typer import Typer

from src.cli import subscriptions_mode, webhook_mode

app = Typer(help="SharePoint list webhooks")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(webhook_mode.serve)
    app.command()(subscriptions_mode.register)
    app.command(name="list")(subscriptions_mode.list_webhooks)
    app.command()(subscriptions_mode.show)
    app.command()(subscriptions_mode.remove)


register_commands()
