"""Tests for the subscription CLI commands against an in-memory client."""

import sys
import unittest
from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from typer.testing import CliRunner

from src.cli import app
from src.webhook.subscription import SubscriptionRegistry
from tests.fakes import FakeListClient, RecordingLogger

HOOK_URL = "https://hooks.example.com/webhooks/service"


class TestSubscriptionCommands(unittest.TestCase):
    def setUp(self):
        self.fake = FakeListClient()
        self.fake.subscriptions["Tasks"] = [{"id": "sub-1", "notificationUrl": HOOK_URL}]
        self.runner = CliRunner()

        @asynccontextmanager
        async def fake_registry(settings=None):
            yield SubscriptionRegistry(self.fake, logger=RecordingLogger())

        patcher = patch("src.cli.subscriptions_mode.open_registry", fake_registry)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_list(self):
        result = self.runner.invoke(app, ["list", "Tasks"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("sub-1", result.output)

    def test_show_missing(self):
        result = self.runner.invoke(app, ["show", "Tasks", "https://unknown.example.com"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("No webhook registered", result.output)

    def test_remove_unknown_exits_1(self):
        result = self.runner.invoke(app, ["remove", "Tasks", "nope"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("NotFoundError", result.output)

    def test_register(self):
        result = self.runner.invoke(app, ["register", "Tasks", "https://other.example.com/hook"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(len(self.fake.subscriptions["Tasks"]), 2)


if __name__ == "__main__":
    unittest.main()
