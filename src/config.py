"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
OUTPUT_DIR = PROJECT_ROOT / "output"

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() == "true"

# SharePoint site (defaults when a request carries no site parameters)
TENANT_PREFIX = os.getenv("TENANT_PREFIX", "")
SHAREPOINT_DOMAIN = os.getenv("SHAREPOINT_DOMAIN", "sharepoint.com")
SITE_RELATIVE_PATH = os.getenv("SITE_RELATIVE_PATH", "")
USER_AGENT = os.getenv("USER_AGENT", "spo-list-webhooks")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))

# App-only credentials (Entra ID app registration)
AZURE_TENANT_ID = os.getenv("AZURE_TENANT_ID", "")
AZURE_CLIENT_ID = os.getenv("AZURE_CLIENT_ID", "")
AZURE_CLIENT_SECRET = os.getenv("AZURE_CLIENT_SECRET", "")
# SharePoint REST rejects secret-based app-only tokens; a certificate is preferred.
AZURE_CLIENT_CERTIFICATE_PATH = os.getenv("AZURE_CLIENT_CERTIFICATE_PATH", "")
AZURE_CLIENT_CERTIFICATE_THUMBPRINT = os.getenv("AZURE_CLIENT_CERTIFICATE_THUMBPRINT", "")

# Webhook service
WEBHOOK_PORT = int(os.getenv("WEBHOOK_PORT", "8000"))
WEBHOOK_HISTORY_LIST_TITLE = os.getenv("WEBHOOK_HISTORY_LIST_TITLE", "webhookHistory")
# Lookback window used to build the change token for each notification
CHANGES_LOOKBACK_MINUTES = int(os.getenv("CHANGES_LOOKBACK_MINUTES", "15"))
# Cap on concurrent change queries issued for one notification batch
MAX_CONCURRENT_RECONCILIATIONS = int(os.getenv("MAX_CONCURRENT_RECONCILIATIONS", "10"))


class WebhookSettings(BaseModel):
    """Explicit settings object handed to the gateway, registry and REST client."""

    tenant_prefix: str = ""
    sharepoint_domain: str = "sharepoint.com"
    site_relative_path: str = ""
    user_agent: str = "spo-list-webhooks"
    http_timeout_seconds: float = 30.0
    history_list_title: str = "webhookHistory"
    changes_lookback_minutes: int = Field(15, ge=1)
    max_concurrent_reconciliations: int = Field(10, ge=1)

    azure_tenant_id: str = ""
    azure_client_id: str = ""
    azure_client_secret: str = ""
    azure_client_certificate_path: str = ""
    azure_client_certificate_thumbprint: str = ""

    model_config = {"extra": "ignore"}


def load_settings(**overrides) -> WebhookSettings:
    """Build WebhookSettings from the environment-derived constants above."""
    values = {
        "tenant_prefix": TENANT_PREFIX,
        "sharepoint_domain": SHAREPOINT_DOMAIN,
        "site_relative_path": SITE_RELATIVE_PATH,
        "user_agent": USER_AGENT,
        "http_timeout_seconds": HTTP_TIMEOUT_SECONDS,
        "history_list_title": WEBHOOK_HISTORY_LIST_TITLE,
        "changes_lookback_minutes": CHANGES_LOOKBACK_MINUTES,
        "max_concurrent_reconciliations": MAX_CONCURRENT_RECONCILIATIONS,
        "azure_tenant_id": AZURE_TENANT_ID,
        "azure_client_id": AZURE_CLIENT_ID,
        "azure_client_secret": AZURE_CLIENT_SECRET,
        "azure_client_certificate_path": AZURE_CLIENT_CERTIFICATE_PATH,
        "azure_client_certificate_thumbprint": AZURE_CLIENT_CERTIFICATE_THUMBPRINT,
    }
    values.update(overrides)
    return WebhookSettings(**values)
