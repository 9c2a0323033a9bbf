"""MSAL app-only credential for SharePoint REST. Tokens live in MSAL's in-memory cache."""

import asyncio
import time
from pathlib import Path
from typing import Any

import msal
from azure.core.credentials import AccessToken, TokenCredential

from src.config import WebhookSettings
from src.utils.logger import get_logger

logger = get_logger("list_webhooks.auth")


def sharepoint_scope(tenant_prefix: str, domain: str = "sharepoint.com") -> str:
    return f"https://{tenant_prefix}.{domain}/.default"


def _client_credential(settings: WebhookSettings) -> str | dict[str, str]:
    """Certificate when configured (required by SharePoint app-only), else client secret."""
    if settings.azure_client_certificate_path:
        private_key = Path(settings.azure_client_certificate_path).read_text(encoding="utf-8")
        return {
            "private_key": private_key,
            "thumbprint": settings.azure_client_certificate_thumbprint,
        }
    if settings.azure_client_secret:
        return settings.azure_client_secret
    raise RuntimeError(
        "No client credential configured: set AZURE_CLIENT_CERTIFICATE_PATH or AZURE_CLIENT_SECRET"
    )


class MSALAppCredential(TokenCredential):
    """TokenCredential using the client-credentials flow of an Entra ID app registration.

    The MSAL application is built on first use so a server without credentials can
    still start and answer validation handshakes.
    """

    def __init__(self, settings: WebhookSettings):
        self._settings = settings
        self._app: msal.ConfidentialClientApplication | None = None

    def _get_app(self) -> msal.ConfidentialClientApplication:
        if self._app is None:
            settings = self._settings
            if not settings.azure_tenant_id or not settings.azure_client_id:
                raise RuntimeError("AZURE_TENANT_ID and AZURE_CLIENT_ID are required")
            self._app = msal.ConfidentialClientApplication(
                client_id=settings.azure_client_id,
                authority=f"https://login.microsoftonline.com/{settings.azure_tenant_id}",
                client_credential=_client_credential(settings),
            )
        return self._app

    def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
        # acquire_token_for_client consults the in-memory cache before calling Entra ID
        result = self._get_app().acquire_token_for_client(scopes=list(scopes))
        if "access_token" not in result:
            raise RuntimeError(
                result.get("error_description", result.get("error", "Token acquisition failed"))
            )
        expires_on = int(time.time()) + int(result.get("expires_in", 0))
        return AccessToken(token=result["access_token"], expires_on=expires_on)


class TokenCredentialAccessProvider:
    """AccessProvider over any azure-core TokenCredential (sync calls run in a worker thread)."""

    def __init__(self, credential: TokenCredential, domain: str = "sharepoint.com"):
        self._credential = credential
        self._domain = domain

    async def get_token(self, tenant_prefix: str) -> str:
        scope = sharepoint_scope(tenant_prefix, self._domain)
        token = await asyncio.to_thread(self._credential.get_token, scope)
        logger.debug("auth.token.acquired", scope=scope, expires_on=token.expires_on)
        return token.token


def get_access_provider(settings: WebhookSettings) -> TokenCredentialAccessProvider:
    """Return the AccessProvider used by the REST client for this deployment."""
    return TokenCredentialAccessProvider(MSALAppCredential(settings), domain=settings.sharepoint_domain)
