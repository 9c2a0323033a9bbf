"""Tests for change token encoding: format, tick arithmetic, monotonicity."""

import sys
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.webhook.change_token import UNIX_EPOCH_TICKS, change_token_ticks, encode_change_token

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
LIST_ID = "5c42a9d0-1f52-4d8e-a2a3-000000000001"


class TestChangeToken(unittest.TestCase):
    def test_epoch_is_dotnet_epoch_ticks(self):
        self.assertEqual(change_token_ticks(datetime(1970, 1, 1, tzinfo=timezone.utc)), UNIX_EPOCH_TICKS)

    def test_fifteen_minutes_back(self):
        token = encode_change_token(-15, LIST_ID, now=NOW)
        expected_millis = int((NOW - timedelta(minutes=15)).timestamp() * 1000)
        self.assertEqual(token, f"1;3;{LIST_ID};{expected_millis * 10000 + 621355968000000000};-1")

    def test_ticks_have_millisecond_precision(self):
        ticks = change_token_ticks(NOW + timedelta(microseconds=999))
        self.assertEqual(ticks, change_token_ticks(NOW))
        self.assertEqual(ticks % 10000, 0)

    def test_naive_datetime_is_utc(self):
        self.assertEqual(change_token_ticks(datetime(2024, 1, 1)), change_token_ticks(NOW))

    def test_larger_offset_gives_larger_ticks(self):
        earlier = encode_change_token(-30, LIST_ID, now=NOW).split(";")[3]
        later = encode_change_token(-15, LIST_ID, now=NOW).split(";")[3]
        future = encode_change_token(5, LIST_ID, now=NOW).split(";")[3]
        self.assertLess(int(earlier), int(later))
        self.assertLess(int(later), int(future))

    def test_only_resource_segment_differs(self):
        a = encode_change_token(-15, "list-a", now=NOW).split(";")
        b = encode_change_token(-15, "list-b", now=NOW).split(";")
        self.assertEqual(len(a), 5)
        self.assertEqual([a[0], a[1], a[3], a[4]], [b[0], b[1], b[3], b[4]])
        self.assertNotEqual(a[2], b[2])

    def test_defaults_to_current_time(self):
        before = change_token_ticks(datetime.now(timezone.utc))
        ticks = int(encode_change_token(0, LIST_ID).split(";")[3])
        after = change_token_ticks(datetime.now(timezone.utc))
        self.assertLessEqual(before, ticks)
        self.assertLessEqual(ticks, after)


if __name__ == "__main__":
    unittest.main()
