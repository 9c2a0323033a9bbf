"""
Verify the Entra ID app registration can reach SharePoint REST app-only.

Acquires a token for https://{TENANT_PREFIX}.sharepoint.com, reads the target
web, and lists the webhooks of one list when --list is given.

Usage:
    uv run python scripts/verify_sharepoint_credentials.py
    uv run python scripts/verify_sharepoint_credentials.py --list Documents

Required environment variables in .env:
    TENANT_PREFIX=contoso
    SITE_RELATIVE_PATH=sites/dev
    AZURE_TENANT_ID=your-tenant-id
    AZURE_CLIENT_ID=your-client-id

    # One of (SharePoint app-only rejects secrets for most tenants):
    AZURE_CLIENT_CERTIFICATE_PATH=path/to/key.pem
    AZURE_CLIENT_CERTIFICATE_THUMBPRINT=ABCDEF...
    AZURE_CLIENT_SECRET=your-client-secret
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import httpx

from src.auth import MSALAppCredential, TokenCredentialAccessProvider, sharepoint_scope
from src.config import load_settings
from src.sharepoint.client import SharePointRestClient
from src.utils.result import Err, guarded


def print_header(text: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {text}")
    print(f"{'='*60}\n")


def print_success(text: str) -> None:
    print(f"[OK] {text}")


def print_error(text: str) -> None:
    print(f"[ERROR] {text}")


def print_info(text: str) -> None:
    print(f"[INFO] {text}")


async def verify(list_id: str | None) -> bool:
    settings = load_settings()

    print_header("Checking environment variables")
    required = {
        "TENANT_PREFIX": settings.tenant_prefix,
        "AZURE_TENANT_ID": settings.azure_tenant_id,
        "AZURE_CLIENT_ID": settings.azure_client_id,
    }
    missing = [k for k, v in required.items() if not v]
    if not settings.azure_client_certificate_path and not settings.azure_client_secret:
        missing.append("AZURE_CLIENT_CERTIFICATE_PATH or AZURE_CLIENT_SECRET")
    if missing:
        print_error(f"Missing environment variables: {', '.join(missing)}")
        return False
    print_success("Required environment variables found")
    print(f"    Tenant ID: {settings.azure_tenant_id[:8]}...")
    print(f"    Client ID: {settings.azure_client_id[:8]}...")

    print_header("Testing Authentication")
    credential = MSALAppCredential(settings)
    scope = sharepoint_scope(settings.tenant_prefix, settings.sharepoint_domain)
    try:
        token = await asyncio.to_thread(credential.get_token, scope)
    except RuntimeError as e:
        print_error(f"Failed to acquire token for {scope}: {e}")
        return False
    print_success(f"Access token acquired (expires: {token.expires_on})")

    print_header("Testing SharePoint REST Access")
    async with httpx.AsyncClient(timeout=httpx.Timeout(settings.http_timeout_seconds)) as http_client:
        access = TokenCredentialAccessProvider(credential, domain=settings.sharepoint_domain)
        client = SharePointRestClient(settings, access, http_client)

        web = await guarded(client.get_web(), "Could not read the web")
        if isinstance(web, Err):
            print_error(web.error.message)
            if web.error.http_status in (401, 403):
                print_info("Grant the app Sites.Selected or Sites.Manage.All (application) with admin consent")
            return False
        print_success(f"Web: {web.value.title} ({web.value.url})")

        if list_id:
            subs = await guarded(client.get_subscriptions(list_id), f"Could not list webhooks of '{list_id}'")
            if isinstance(subs, Err):
                print_error(subs.error.message)
                return False
            print_success(f"{len(subs.value)} webhook(s) on list '{list_id}'")
            for sub in subs.value:
                print(f"    {sub.get('id')}  {sub.get('notificationUrl')}  expires {sub.get('expirationDateTime')}")

    print_header("Verification Complete")
    return True


def main():
    parser = argparse.ArgumentParser(description="Verify SharePoint app-only credentials")
    parser.add_argument("--list", dest="list_id", help="List title or GUID whose webhooks to show")
    args = parser.parse_args()

    success = asyncio.run(verify(args.list_id))
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
