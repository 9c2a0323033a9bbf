"""SharePoint REST client (async, httpx) implementing RemoteListClient."""

import asyncio
import re
from datetime import datetime, timezone
from typing import Any

import httpx

from src.config import WebhookSettings
from src.sharepoint.models import ListEnsureResult, SiteContext, WebInfo
from src.sharepoint.protocol import AccessProvider
from src.sharepoint.site import SiteResolver
from src.utils.errors import RemoteApiError
from src.utils.logger import get_logger

logger = get_logger("list_webhooks.sharepoint.client")

JSON_NOMETADATA = "application/json;odata=nometadata"
GENERIC_LIST_TEMPLATE = 100
# SP.FieldType.Note: multi-line text, not limited to 255 characters
FIELD_TYPE_NOTE = 3
_GUID_PATTERN = re.compile(
    r"^\{?[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}\}?$"
)


def list_path(list_ref: str) -> str:
    """REST path of a list given its GUID (as sent in notifications) or its title."""
    ref = list_ref.strip()
    if _GUID_PATTERN.match(ref):
        return f"web/lists(guid'{ref.strip('{}')}')"
    escaped = ref.replace("'", "''")
    return f"web/lists/getbytitle('{escaped}')"


def _remote_error(response: httpx.Response) -> RemoteApiError:
    """Build a RemoteApiError from an error response (odata.error message + request guid)."""
    message = ""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        odata_error = payload.get("odata.error") or payload.get("error")
        if isinstance(odata_error, dict):
            inner = odata_error.get("message")
            message = inner.get("value", "") if isinstance(inner, dict) else str(inner or "")
    if not message:
        message = response.text.strip() or response.reason_phrase or "Request failed"
    correlation_id = response.headers.get("sprequestguid") or response.headers.get("request-id")
    return RemoteApiError(
        f"{message} (HTTP {response.status_code})",
        status=response.status_code,
        correlation_id=correlation_id,
    )


class SharePointRestClient:
    """RemoteListClient over ``{site}/_api`` using app-only bearer tokens.

    HTTP and transport failures are raised as RemoteApiError; a missing tenant
    prefix surfaces as ValidationError before any request. Idempotent GETs are
    retried on transient network errors.
    """

    max_attempts = 3

    def __init__(
        self,
        settings: WebhookSettings,
        access_provider: AccessProvider,
        http_client: httpx.AsyncClient,
        resolver: SiteResolver | None = None,
    ):
        self._settings = settings
        self._access = access_provider
        self._http = http_client
        self._resolver = resolver or SiteResolver(settings)

    async def _request(
        self,
        method: str,
        path: str,
        site: SiteContext | None = None,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        url = f"{self._resolver.base_url(site)}/_api/{path}"
        token = await self._access.get_token(self._resolver.tenant_prefix(site))
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": JSON_NOMETADATA,
            "User-Agent": self._settings.user_agent,
        }
        if json is not None:
            headers["Content-Type"] = JSON_NOMETADATA
        attempts = self.max_attempts if method == "GET" else 1
        for attempt in range(attempts):
            try:
                response = await self._http.request(method, url, headers=headers, json=json, params=params)
            except httpx.TransportError as e:
                if attempt < attempts - 1:
                    delay = 0.5 * (attempt + 1)
                    logger.debug(
                        "sharepoint.request.retry",
                        method=method,
                        url=url,
                        attempt=attempt + 1,
                        error_type=type(e).__name__,
                    )
                    await asyncio.sleep(delay)
                    continue
                raise RemoteApiError(f"{type(e).__name__}: {e}") from e
            except httpx.HTTPError as e:
                raise RemoteApiError(f"{type(e).__name__}: {e}") from e
            break
        if response.is_error:
            raise _remote_error(response)
        logger.debug("sharepoint.request.ok", method=method, url=url, status=response.status_code)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteApiError(f"Invalid JSON in response from {url}", status=response.status_code) from e

    async def get_subscriptions(self, list_ref: str, site: SiteContext | None = None) -> list[dict[str, Any]]:
        data = await self._request("GET", f"{list_path(list_ref)}/subscriptions", site)
        return list((data or {}).get("value") or [])

    async def add_subscription(
        self,
        list_ref: str,
        notification_url: str,
        expiration: datetime,
        client_state: str | None = None,
        site: SiteContext | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "resource": f"{self._resolver.base_url(site)}/_api/{list_path(list_ref)}",
            "notificationUrl": notification_url,
            "expirationDateTime": expiration.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
        }
        if client_state:
            body["clientState"] = client_state
        return await self._request("POST", f"{list_path(list_ref)}/subscriptions", site, json=body)

    async def delete_subscription(self, list_ref: str, subscription_id: str, site: SiteContext | None = None) -> None:
        escaped = subscription_id.replace("'", "''")
        await self._request("DELETE", f"{list_path(list_ref)}/subscriptions('{escaped}')", site)

    async def get_changes(
        self, list_ref: str, query: dict[str, Any], site: SiteContext | None = None
    ) -> list[dict[str, Any]]:
        data = await self._request("POST", f"{list_path(list_ref)}/GetChanges", site, json={"query": query})
        return list((data or {}).get("value") or [])

    async def ensure_list(self, title: str, site: SiteContext | None = None) -> ListEnsureResult:
        try:
            await self._request("GET", list_path(title), site, params={"$select": "Id,Title"})
            return ListEnsureResult(title=title, existed=True)
        except RemoteApiError as e:
            if e.status != 404:
                raise
        body = {
            "Title": title,
            "BaseTemplate": GENERIC_LIST_TEMPLATE,
            "Description": "",
            "AllowContentTypes": True,
            "ContentTypesEnabled": False,
        }
        await self._request("POST", "web/lists", site, json=body)
        return ListEnsureResult(title=title, existed=False)

    async def ensure_note_field(self, list_title: str, field_name: str, site: SiteContext | None = None) -> bool:
        fields = f"{list_path(list_title)}/fields"
        escaped = field_name.replace("'", "''")
        try:
            await self._request("GET", f"{fields}/getbyinternalnameortitle('{escaped}')", site)
            return False
        except RemoteApiError as e:
            if e.status != 404:
                raise
        await self._request("POST", fields, site, json={"Title": field_name, "FieldTypeKind": FIELD_TYPE_NOTE})
        return True

    async def add_item(self, list_title: str, fields: dict[str, Any], site: SiteContext | None = None) -> dict[str, Any]:
        return await self._request("POST", f"{list_path(list_title)}/items", site, json=fields) or {}

    async def get_web(self, site: SiteContext | None = None) -> WebInfo:
        data = await self._request("GET", "web", site, params={"$select": "Title,Url"})
        return WebInfo.model_validate(data or {})
