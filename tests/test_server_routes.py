"""Tests for the FastAPI routes: handshake, notifications, subscription management."""

import json
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient

from src.config import WebhookSettings
from src.webhook.server import create_app
from tests.fakes import FakeListClient

HOOK_URL = "https://hooks.example.com/webhooks/service"


class TestServerRoutes(unittest.TestCase):
    def setUp(self):
        self.fake = FakeListClient()
        self.fake.subscriptions["Tasks"] = [{"id": "sub-1", "notificationUrl": HOOK_URL, "resource": "r"}]
        settings = WebhookSettings(tenant_prefix="contoso", site_relative_path="sites/dev")
        self.app = create_app(client=self.fake, settings=settings)
        self.client = TestClient(self.app)

    def test_health(self):
        r = self.client.get("/health")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"status": "ok"})

    def test_validation_handshake_echoes_plain_text(self):
        r = self.client.post("/webhooks/service?validationtoken=ABC123", content=b"ignored")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.text, "ABC123")
        self.assertTrue(r.headers["content-type"].startswith("text/plain"))
        self.assertEqual(self.fake.calls, [])

    def test_notification_is_processed(self):
        self.fake.changes["list-1"] = [{"ChangeType": 1}]
        body = {"value": [{"subscriptionId": "sub-1", "resource": "list-1", "siteUrl": "/sites/dev"}]}
        r = self.client.post("/webhooks/service", content=json.dumps(body))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.content, b"")
        self.assertEqual(len(self.fake.items["webhookHistory"]), 1)

    def test_malformed_notification_is_400(self):
        r = self.client.post("/webhooks/service", content=b"{not json")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["errorType"], "MalformedPayloadError")
        self.assertNotIn("add_item", self.fake.call_names())

    def test_register(self):
        r = self.client.post(
            "/webhooks/register",
            params={"listId": "Tasks", "notificationUrl": "https://other.example.com/hook"},
        )
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["notificationUrl"], "https://other.example.com/hook")

    def test_register_missing_params_is_400(self):
        r = self.client.post("/webhooks/register", params={"listId": "Tasks"})
        self.assertEqual(r.status_code, 400)
        data = r.json()
        self.assertEqual(data["errorType"], "ValidationError")
        self.assertEqual(data["httpStatus"], 400)
        self.assertEqual(self.fake.calls, [])

    def test_list(self):
        r = self.client.get("/webhooks/list", params={"listId": "Tasks"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual([s["id"] for s in r.json()], ["sub-1"])

    def test_list_unknown_list_is_404(self):
        r = self.client.get("/webhooks/list", params={"listId": "Nope"})
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["severity"], "Warning")

    def test_show_found_and_not_found(self):
        found = self.client.get("/webhooks/show", params={"listId": "Tasks", "notificationUrl": HOOK_URL})
        self.assertEqual(found.json()["id"], "sub-1")
        missing = self.client.get(
            "/webhooks/show",
            params={"listId": "Tasks", "notificationUrl": "https://unknown.example.com"},
        )
        self.assertEqual(missing.status_code, 200)
        self.assertEqual(missing.json(), {})

    def test_remove(self):
        r = self.client.post("/webhooks/remove", params={"listId": "Tasks", "webhookId": "sub-1"})
        self.assertEqual(r.status_code, 204)
        self.assertEqual(r.content, b"")
        again = self.client.post("/webhooks/remove", params={"listId": "Tasks", "webhookId": "sub-1"})
        self.assertEqual(again.status_code, 404)
        self.assertEqual(again.json()["errorType"], "NotFoundError")

    def test_debug_web(self):
        r = self.client.get("/debug/web")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["title"], "Dev")


if __name__ == "__main__":
    unittest.main()
