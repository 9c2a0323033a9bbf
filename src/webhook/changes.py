"""Reconcile a notification into counts of what changed on a list recently."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from src.sharepoint.models import ChangeSummary, ChangeType, SiteContext
from src.sharepoint.protocol import RemoteListClient
from src.utils.logger import EventLogger
from src.utils.result import Err, Ok, Result, guarded
from src.webhook.change_token import encode_change_token


def build_change_query(change_token: str) -> dict[str, Any]:
    """SP.ChangeQuery for item changes from ``change_token`` up to now (no end token)."""
    return {
        "ChangeTokenStart": {"StringValue": change_token},
        "ChangeTokenEnd": None,
        "Add": True,
        "Update": True,
        "DeleteObject": True,
        "Rename": True,
        "Restore": True,
        "Item": True,
    }


def summarize_changes(changes: list[dict[str, Any]]) -> ChangeSummary:
    """Count changes by ChangeType in one pass; unknown tags only count toward the total."""
    summary = ChangeSummary(total_count=len(changes))
    for change in changes:
        try:
            change_type = ChangeType(int(change.get("ChangeType", -1)))
        except (TypeError, ValueError):
            continue
        if change_type is ChangeType.ADD:
            summary.add_count += 1
        elif change_type is ChangeType.UPDATE:
            summary.update_count += 1
        elif change_type is ChangeType.DELETE_OBJECT:
            summary.delete_count += 1
    return summary


def describe(resource_id: str, since_minutes_ago: int, summary: ChangeSummary) -> str:
    return (
        f"{summary.total_count} change(s) happened on the list '{resource_id}' in the last "
        f"{since_minutes_ago} minutes: {summary.add_count} added, {summary.update_count} updated, "
        f"{summary.delete_count} deleted."
    )


class ChangeReconciler:
    """Asks the list's change log what changed in a lookback window.

    Overlapping windows are not deduplicated, so the same change may be counted
    by consecutive notifications.
    """

    def __init__(self, client: RemoteListClient, logger: EventLogger | None = None):
        self._client = client
        self._logger = logger or EventLogger(name="list_webhooks.webhook.changes")

    async def get_changes(
        self,
        resource_id: str,
        since_minutes_ago: int,
        site: SiteContext | None = None,
        now: datetime | None = None,
    ) -> Result[ChangeSummary]:
        token = encode_change_token(-since_minutes_ago, resource_id, now=now)
        result = await guarded(
            self._client.get_changes(resource_id, build_change_query(token), site=site),
            f"Could not get the changes of list '{resource_id}'",
            self._logger,
        )
        if isinstance(result, Err):
            return result
        summary = summarize_changes(result.value)
        self._logger.info(
            describe(resource_id, since_minutes_ago, summary),
            op="webhook.changes.summarized",
            change_token=token,
        )
        return Ok(summary)
