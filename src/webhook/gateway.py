"""Notification gateway: validation handshake, change reconciliation fan-out, history append.

One call goes Start -> Validation -> Done when SharePoint sends a
``validationtoken`` (the token is echoed as text/plain and nothing else runs),
otherwise Start -> Processing -> Done. Processing reconciles every event of the
payload concurrently (bounded by ``max_concurrent_reconciliations``) and writes
one combined history item per call.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from src.config import WebhookSettings
from src.sharepoint.models import SiteContext
from src.sharepoint.protocol import RemoteListClient
from src.utils.errors import AggregateError, ErrorDocument, MalformedPayloadError, Severity
from src.utils.logger import EventLogger
from src.utils.result import Err, Result, fail
from src.webhook.changes import ChangeReconciler, describe
from src.webhook.history import HistoryRecorder
from src.webhook.models import NotificationEnvelope, NotificationEvent


@dataclass
class GatewayResponse:
    """Transport-neutral response; the FastAPI route turns it into a Response."""

    status_code: int
    body: Any = None
    media_type: str = "application/json"

    @classmethod
    def from_error(cls, error: ErrorDocument) -> "GatewayResponse":
        return cls(status_code=error.http_status, body=error.to_body())


class NotificationGateway:
    def __init__(
        self,
        client: RemoteListClient,
        settings: WebhookSettings,
        logger: EventLogger | None = None,
        lookback_minutes: int | None = None,
    ):
        self._settings = settings
        self._logger = logger or EventLogger(name="list_webhooks.webhook.gateway")
        if lookback_minutes is None:
            lookback_minutes = settings.changes_lookback_minutes
        elif lookback_minutes < 1:
            raise ValueError(f"lookback_minutes must be at least 1, got {lookback_minutes}")
        self._lookback_minutes = lookback_minutes
        self._reconciler = ChangeReconciler(client, logger=self._logger)
        self._history = HistoryRecorder(client, logger=self._logger)

    async def handle(self, validation_token: str | None, raw_body: bytes | str | None) -> GatewayResponse:
        """Entry point for one inbound call."""
        if validation_token:
            self._logger.info(
                f"Validated webhook registration with validation token: {validation_token}",
                op="webhook.notifications.validated",
            )
            return GatewayResponse(status_code=200, body=validation_token, media_type="text/plain")
        try:
            return await self._process(raw_body)
        except Exception as e:
            err = fail(e, "Unexpected error while processing the webhook notification", self._logger)
            return GatewayResponse.from_error(err.error)

    def parse(self, raw_body: bytes | str | None) -> NotificationEnvelope:
        """Decode ``{"value": [...]}``; raises MalformedPayloadError when absent or invalid."""
        if not raw_body:
            raise MalformedPayloadError("Notification body is empty.")
        try:
            return NotificationEnvelope.model_validate_json(raw_body)
        except PydanticValidationError as e:
            raise MalformedPayloadError(
                f"Notification body is not a valid change notification: {e.error_count()} error(s)"
            ) from e

    async def _process(self, raw_body: bytes | str | None) -> GatewayResponse:
        try:
            envelope = self.parse(raw_body)
        except MalformedPayloadError as e:
            return GatewayResponse.from_error(fail(e, logger=self._logger).error)

        events = envelope.value
        first = events[0]
        self._logger.info(
            f"Received webhook notification: {len(events)} event(s) for resource "
            f"'{first.resource}' on site '{first.site_url}'",
            op="webhook.notifications.received",
            subscription_id=first.subscription_id,
        )

        summaries = await self.reconcile(events)
        text = "\n".join(summaries)

        title = self._settings.history_list_title
        ensured = await self._history.ensure_list(title)
        if isinstance(ensured, Err):
            return GatewayResponse.from_error(ensured.error)
        appended = await self._history.append(title, text)
        if isinstance(appended, Err):
            return GatewayResponse.from_error(appended.error)
        return GatewayResponse(status_code=200)

    async def reconcile(self, events: list[NotificationEvent]) -> list[str]:
        """One summary line per event, in payload order; a failing event yields an error line."""
        semaphore = asyncio.Semaphore(self._settings.max_concurrent_reconciliations)

        async def _one(event: NotificationEvent) -> Result:
            site = SiteContext(site_relative_path=event.site_url) if event.site_url else None
            async with semaphore:
                return await self._reconciler.get_changes(event.resource, self._lookback_minutes, site=site)

        outcomes = await asyncio.gather(*(_one(e) for e in events), return_exceptions=True)

        summaries: list[str] = []
        failures: list[ErrorDocument] = []
        for event, outcome in zip(events, outcomes):
            if isinstance(outcome, BaseException):
                outcome = fail(outcome, f"Could not get the changes of list '{event.resource}'", self._logger)
            if isinstance(outcome, Err):
                failures.append(outcome.error)
                summaries.append(outcome.error.message)
            else:
                summaries.append(describe(event.resource, self._lookback_minutes, outcome.value))

        if len(failures) > 1:
            aggregate = fail(AggregateError(failures), "Reconciliation failed for several events")
            self._logger.record(
                Severity.WARNING,
                aggregate.error.message,
                op="webhook.notifications.partial_failure",
                failed=len(failures),
                total=len(events),
            )
        return summaries
