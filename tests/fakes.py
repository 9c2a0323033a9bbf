"""In-memory RemoteListClient used by the tests."""

from datetime import datetime
from typing import Any

from src.sharepoint.models import ListEnsureResult, SiteContext, WebInfo
from src.utils.errors import RemoteApiError, Severity


class RecordingLogger:
    """EventLogger stand-in that keeps (severity, message, context) tuples."""

    def __init__(self):
        self.entries: list[tuple[Any, str, dict]] = []

    def record(self, severity, message, **context):
        self.entries.append((severity, message, context))
        return message

    def info(self, message, **context):
        return self.record(Severity.INFO, message, **context)

    def bind(self, **context):
        return self

    def ops(self) -> list[str]:
        return [ctx.get("op") for _, _, ctx in self.entries if ctx.get("op")]


class FakeListClient:
    """Records every call; failures are configured per list via ``fail_changes_for`` etc."""

    def __init__(self):
        self.calls: list[tuple[str, tuple]] = []
        self.subscriptions: dict[str, list[dict[str, Any]]] = {}
        self.changes: dict[str, list[dict[str, Any]]] = {}
        self.fail_changes_for: dict[str, Exception] = {}
        self.existing_lists: set[str] = set()
        self.items: dict[str, list[dict[str, Any]]] = {}
        self.ensure_error: Exception | None = None
        self.field_error: Exception | None = None
        self.note_fields: dict[str, set[str]] = {}
        self.add_item_error: Exception | None = None
        self.subscription_error: Exception | None = None
        self.change_queries: list[dict[str, Any]] = []
        self.change_sites: list[SiteContext | None] = []

    async def get_subscriptions(self, list_ref: str, site: SiteContext | None = None) -> list[dict[str, Any]]:
        self.calls.append(("get_subscriptions", (list_ref,)))
        if self.subscription_error:
            raise self.subscription_error
        if list_ref not in self.subscriptions:
            raise RemoteApiError(f"List '{list_ref}' does not exist at site.", status=404)
        return list(self.subscriptions[list_ref])

    async def add_subscription(
        self,
        list_ref: str,
        notification_url: str,
        expiration: datetime,
        client_state: str | None = None,
        site: SiteContext | None = None,
    ) -> dict[str, Any]:
        self.calls.append(("add_subscription", (list_ref, notification_url, expiration, client_state)))
        if self.subscription_error:
            raise self.subscription_error
        sub = {
            "id": f"sub-{len(self.subscriptions.get(list_ref, [])) + 1}",
            "resource": list_ref,
            "notificationUrl": notification_url,
            "expirationDateTime": expiration.isoformat(),
            "clientState": client_state,
        }
        self.subscriptions.setdefault(list_ref, []).append(sub)
        return sub

    async def delete_subscription(self, list_ref: str, subscription_id: str, site: SiteContext | None = None) -> None:
        self.calls.append(("delete_subscription", (list_ref, subscription_id)))
        subs = self.subscriptions.get(list_ref)
        if subs is None or not any(s["id"] == subscription_id for s in subs):
            raise RemoteApiError("The object specified does not belong to a list.", status=404)
        self.subscriptions[list_ref] = [s for s in subs if s["id"] != subscription_id]

    async def get_changes(
        self, list_ref: str, query: dict[str, Any], site: SiteContext | None = None
    ) -> list[dict[str, Any]]:
        self.calls.append(("get_changes", (list_ref,)))
        self.change_queries.append(query)
        self.change_sites.append(site)
        if list_ref in self.fail_changes_for:
            raise self.fail_changes_for[list_ref]
        return list(self.changes.get(list_ref, []))

    async def ensure_list(self, title: str, site: SiteContext | None = None) -> ListEnsureResult:
        self.calls.append(("ensure_list", (title,)))
        if self.ensure_error:
            raise self.ensure_error
        existed = title in self.existing_lists
        self.existing_lists.add(title)
        return ListEnsureResult(title=title, existed=existed)

    async def ensure_note_field(self, list_title: str, field_name: str, site: SiteContext | None = None) -> bool:
        self.calls.append(("ensure_note_field", (list_title, field_name)))
        if self.field_error:
            raise self.field_error
        fields = self.note_fields.setdefault(list_title, set())
        created = field_name not in fields
        fields.add(field_name)
        return created

    async def add_item(self, list_title: str, fields: dict[str, Any], site: SiteContext | None = None) -> dict[str, Any]:
        self.calls.append(("add_item", (list_title,)))
        if self.add_item_error:
            raise self.add_item_error
        items = self.items.setdefault(list_title, [])
        item = {"Id": len(items) + 1, **fields}
        items.append(item)
        return item

    async def get_web(self, site: SiteContext | None = None) -> WebInfo:
        self.calls.append(("get_web", ()))
        return WebInfo(Title="Dev", Url="https://contoso.sharepoint.com/sites/dev")

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]
