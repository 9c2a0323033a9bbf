"""Append-only notification history kept in a SharePoint list."""

from __future__ import annotations

from src.sharepoint.models import ListEnsureResult, SiteContext
from src.sharepoint.protocol import RemoteListClient
from src.utils.errors import Severity
from src.utils.logger import EventLogger
from src.utils.result import Err, Ok, Result, guarded

# Single line of text column of a generic list
TITLE_MAX_LENGTH = 255
# Multi-line column holding the full, untruncated text of each record
DETAILS_FIELD = "Details"


def heading(text: str) -> str:
    """First line of ``text`` cut to fit the Title column."""
    first = text.split("\n", 1)[0]
    return first if len(first) <= TITLE_MAX_LENGTH else first[: TITLE_MAX_LENGTH - 3] + "..."


class HistoryRecorder:
    def __init__(
        self,
        client: RemoteListClient,
        site: SiteContext | None = None,
        logger: EventLogger | None = None,
    ):
        self._client = client
        self._site = site
        self._logger = logger or EventLogger(name="list_webhooks.webhook.history")

    async def ensure_list(self, name: str) -> Result[ListEnsureResult]:
        """Create the history list and its Details column when missing; safe to call on every notification."""
        result = await guarded(
            self._client.ensure_list(name, site=self._site),
            f"Could not ensure that list '{name}' exists",
            self._logger,
        )
        if isinstance(result, Err):
            return result
        if not result.value.existed:
            self._logger.info(
                f"List '{name}' (to log the webhook notifications) did not exist and was just created.",
                op="webhook.history.list_created",
            )
        field = await guarded(
            self._client.ensure_note_field(name, DETAILS_FIELD, site=self._site),
            f"Could not ensure that column '{DETAILS_FIELD}' exists in list '{name}'",
            self._logger,
        )
        if isinstance(field, Err):
            return field
        if field.value:
            self._logger.info(
                f"Column '{DETAILS_FIELD}' was added to list '{name}'.",
                op="webhook.history.field_created",
            )
        return result

    async def append(self, name: str, text: str) -> Result[int]:
        """Add one item: a short Title heading plus the full ``text`` in Details. Returns the new item id."""
        fields = {"Title": heading(text), DETAILS_FIELD: text}
        result = await guarded(
            self._client.add_item(name, fields, site=self._site),
            f"Could not add an item to the list '{name}'",
            self._logger,
        )
        if isinstance(result, Err):
            return result
        item = result.value or {}
        item_id = int(item.get("Id") or item.get("ID") or 0)
        self._logger.record(
            Severity.VERBOSE,
            "webhook.history.appended",
            list_title=name,
            item_id=item_id,
        )
        return Ok(item_id)
