"""Resolve the SharePoint site a request targets into a base URL."""

from src.config import WebhookSettings
from src.sharepoint.models import SiteContext
from src.utils.errors import ValidationError


class SiteResolver:
    """Maps a SiteContext to ``https://{tenant}.{domain}{/site/path}``; blanks use the settings defaults."""

    def __init__(self, settings: WebhookSettings):
        self._settings = settings

    def tenant_prefix(self, site: SiteContext | None = None) -> str:
        tenant = (site.tenant_prefix if site else None) or self._settings.tenant_prefix
        if not tenant:
            raise ValidationError("No tenant prefix given and TENANT_PREFIX is not configured.")
        return tenant.strip()

    def site_relative_path(self, site: SiteContext | None = None) -> str:
        path = (site.site_relative_path if site else None) or self._settings.site_relative_path
        path = (path or "").strip().strip("/")
        return f"/{path}" if path else ""

    def base_url(self, site: SiteContext | None = None) -> str:
        tenant = self.tenant_prefix(site)
        return f"https://{tenant}.{self._settings.sharepoint_domain}{self.site_relative_path(site)}"
