"""Tests for the app-only credential adapters (no network: MSAL app is stubbed)."""

import asyncio
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from azure.core.credentials import AccessToken

from src.auth import MSALAppCredential, TokenCredentialAccessProvider, sharepoint_scope
from src.config import WebhookSettings


class StubConfidentialApp:
    def __init__(self, result):
        self.result = result
        self.scopes = None

    def acquire_token_for_client(self, scopes):
        self.scopes = scopes
        return self.result


class StubCredential:
    def __init__(self):
        self.scopes = []

    def get_token(self, *scopes, **kwargs):
        self.scopes.extend(scopes)
        return AccessToken("tok", 4102444800)


class TestAppCredential(unittest.TestCase):
    def test_scope(self):
        self.assertEqual(sharepoint_scope("contoso"), "https://contoso.sharepoint.com/.default")

    def test_access_provider_requests_tenant_scope(self):
        credential = StubCredential()
        provider = TokenCredentialAccessProvider(credential)
        token = asyncio.run(provider.get_token("contoso"))
        self.assertEqual(token, "tok")
        self.assertEqual(credential.scopes, ["https://contoso.sharepoint.com/.default"])

    def test_msal_result_becomes_access_token(self):
        credential = MSALAppCredential(WebhookSettings())
        app = StubConfidentialApp({"access_token": "abc", "expires_in": 3600})
        credential._app = app
        token = credential.get_token("https://contoso.sharepoint.com/.default")
        self.assertEqual(token.token, "abc")
        self.assertEqual(app.scopes, ["https://contoso.sharepoint.com/.default"])

    def test_msal_error_raises(self):
        credential = MSALAppCredential(WebhookSettings())
        credential._app = StubConfidentialApp({"error": "invalid_client", "error_description": "bad secret"})
        with self.assertRaises(RuntimeError) as ctx:
            credential.get_token("scope")
        self.assertIn("bad secret", str(ctx.exception))

    def test_missing_ids_raise_on_first_use(self):
        credential = MSALAppCredential(WebhookSettings())
        with self.assertRaises(RuntimeError):
            credential.get_token("scope")


if __name__ == "__main__":
    unittest.main()
