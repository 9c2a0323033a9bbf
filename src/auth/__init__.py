"""App-only authentication for SharePoint REST access."""

from src.auth.app_credential import (
    MSALAppCredential,
    TokenCredentialAccessProvider,
    get_access_provider,
    sharepoint_scope,
)

__all__ = [
    "MSALAppCredential",
    "TokenCredentialAccessProvider",
    "get_access_provider",
    "sharepoint_scope",
]
