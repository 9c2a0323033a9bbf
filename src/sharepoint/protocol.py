"""SharePoint collaborator protocols (capabilities the webhook core is built on)."""

from datetime import datetime
from typing import Any, Protocol

from src.sharepoint.models import ListEnsureResult, SiteContext, WebInfo


class AccessProvider(Protocol):
    """Returns a bearer token for the SharePoint tenant ``{tenant_prefix}.sharepoint.com``."""

    async def get_token(self, tenant_prefix: str) -> str:
        ...


class RemoteListClient(Protocol):
    """List operations the webhook core needs. Failures raise RemoteApiError."""

    async def get_subscriptions(self, list_ref: str, site: SiteContext | None = None) -> list[dict[str, Any]]:
        ...

    async def add_subscription(
        self,
        list_ref: str,
        notification_url: str,
        expiration: datetime,
        client_state: str | None = None,
        site: SiteContext | None = None,
    ) -> dict[str, Any]:
        ...

    async def delete_subscription(self, list_ref: str, subscription_id: str, site: SiteContext | None = None) -> None:
        ...

    async def get_changes(
        self, list_ref: str, query: dict[str, Any], site: SiteContext | None = None
    ) -> list[dict[str, Any]]:
        ...

    async def ensure_list(self, title: str, site: SiteContext | None = None) -> ListEnsureResult:
        ...

    async def ensure_note_field(self, list_title: str, field_name: str, site: SiteContext | None = None) -> bool:
        """Add a multi-line plain text field when missing; True when it was created."""
        ...

    async def add_item(self, list_title: str, fields: dict[str, Any], site: SiteContext | None = None) -> dict[str, Any]:
        ...

    async def get_web(self, site: SiteContext | None = None) -> WebInfo:
        ...
