"""Tests for HistoryRecorder: ensure-or-create, append, title truncation."""

import asyncio
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.utils.errors import RemoteApiError
from src.utils.result import Err, Ok
from src.webhook.history import DETAILS_FIELD, TITLE_MAX_LENGTH, HistoryRecorder
from tests.fakes import FakeListClient, RecordingLogger


class TestHistoryRecorder(unittest.TestCase):
    def setUp(self):
        self.client = FakeListClient()
        self.logger = RecordingLogger()
        self.history = HistoryRecorder(self.client, logger=self.logger)

    def test_ensure_creates_once(self):
        first = asyncio.run(self.history.ensure_list("webhookHistory"))
        second = asyncio.run(self.history.ensure_list("webhookHistory"))
        self.assertFalse(first.value.existed)
        self.assertTrue(second.value.existed)
        self.assertEqual(self.logger.ops().count("webhook.history.list_created"), 1)

    def test_append_returns_item_id(self):
        asyncio.run(self.history.ensure_list("webhookHistory"))
        first = asyncio.run(self.history.append("webhookHistory", "one"))
        second = asyncio.run(self.history.append("webhookHistory", "two"))
        self.assertEqual((first, second), (Ok(1), Ok(2)))
        self.assertEqual([i["Title"] for i in self.client.items["webhookHistory"]], ["one", "two"])

    def test_long_text_is_kept_whole_in_details(self):
        text = "x" * 400 + "\n" + "y" * 300
        asyncio.run(self.history.append("webhookHistory", text))
        item = self.client.items["webhookHistory"][0]
        self.assertEqual(len(item["Title"]), TITLE_MAX_LENGTH)
        self.assertTrue(item["Title"].startswith("x"))
        self.assertTrue(item["Title"].endswith("..."))
        self.assertEqual(item[DETAILS_FIELD], text)

    def test_ensure_adds_details_column_once(self):
        asyncio.run(self.history.ensure_list("webhookHistory"))
        asyncio.run(self.history.ensure_list("webhookHistory"))
        self.assertEqual(self.client.note_fields["webhookHistory"], {DETAILS_FIELD})
        self.assertEqual(self.logger.ops().count("webhook.history.field_created"), 1)

    def test_details_column_failure_is_err(self):
        self.client.field_error = RemoteApiError("Access denied", status=403)
        result = asyncio.run(self.history.ensure_list("webhookHistory"))
        self.assertIsInstance(result, Err)
        self.assertIn("column 'Details'", result.error.message)

    def test_failures_are_err(self):
        self.client.ensure_error = RemoteApiError("Access denied", status=403)
        self.client.add_item_error = RemoteApiError("List not found", status=404)
        ensured = asyncio.run(self.history.ensure_list("webhookHistory"))
        appended = asyncio.run(self.history.append("webhookHistory", "text"))
        self.assertIsInstance(ensured, Err)
        self.assertEqual(ensured.error.http_status, 403)
        self.assertIsInstance(appended, Err)
        self.assertEqual(appended.error.error_type, "NotFoundError")


if __name__ == "__main__":
    unittest.main()
