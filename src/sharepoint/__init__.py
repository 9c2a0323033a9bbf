"""SharePoint collaborator: REST client, site resolution and protocols."""

from src.sharepoint.client import SharePointRestClient, list_path
from src.sharepoint.models import (
    ChangeSummary,
    ChangeType,
    ListEnsureResult,
    SiteContext,
    WebInfo,
)
from src.sharepoint.protocol import AccessProvider, RemoteListClient
from src.sharepoint.site import SiteResolver

__all__ = [
    "SharePointRestClient",
    "list_path",
    "ChangeSummary",
    "ChangeType",
    "ListEnsureResult",
    "SiteContext",
    "WebInfo",
    "AccessProvider",
    "RemoteListClient",
    "SiteResolver",
]
