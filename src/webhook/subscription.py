"""SharePoint list subscription manager: register, list, find and delete webhook subscriptions."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pydantic import ValidationError as PydanticValidationError

from src.sharepoint.models import SiteContext
from src.sharepoint.protocol import RemoteListClient
from src.utils.errors import RemoteServiceError, ValidationError
from src.utils.logger import EventLogger
from src.utils.result import Err, Ok, Result, fail, guarded
from src.webhook.models import Subscription

# Maximum lifetime SharePoint accepts for a list webhook; subscriptions are not renewed here.
SUBSCRIPTION_MAX_DAYS = 180


class SubscriptionRegistry:
    """CRUD over the webhook subscriptions of one list. Every method returns a Result."""

    def __init__(self, client: RemoteListClient, logger: EventLogger | None = None):
        self._client = client
        self._logger = logger or EventLogger(name="list_webhooks.webhook.subscription")

    async def register(
        self,
        list_id: str | None,
        notification_url: str | None,
        site: SiteContext | None = None,
        client_state: str | None = None,
    ) -> Result[Subscription]:
        """Create a subscription expiring in 180 days; returns the created subscription as sent back."""
        if not list_id or not notification_url:
            return fail(ValidationError("Required parameters are missing: listId and notificationUrl."), logger=self._logger)
        expiration = datetime.now(timezone.utc) + timedelta(days=SUBSCRIPTION_MAX_DAYS)
        result = await guarded(
            self._client.add_subscription(
                list_id,
                notification_url,
                expiration,
                client_state=client_state,
                site=site,
            ),
            f"Could not register webhook '{notification_url}' in list '{list_id}'",
            self._logger,
        )
        if isinstance(result, Err):
            return result
        try:
            subscription = Subscription.model_validate(result.value)
        except PydanticValidationError as e:
            return fail(
                RemoteServiceError(f"Unexpected subscription in response: {e.error_count()} invalid field(s)"),
                f"Webhook '{notification_url}' was registered in list '{list_id}' but the response could not be read",
                self._logger,
            )
        self._logger.info(
            f"Registered webhook '{notification_url}' to list '{list_id}' "
            f"with expiry date '{expiration.isoformat()}'.",
            op="webhook.subscription.created",
            subscription_id=subscription.id,
        )
        return Ok(subscription)

    async def list(self, list_id: str | None, site: SiteContext | None = None) -> Result[list[Subscription]]:
        """All subscriptions of the list, in the order the service returns them."""
        if not list_id:
            return fail(ValidationError("Required parameters are missing: listId."), logger=self._logger)
        result = await guarded(
            self._client.get_subscriptions(list_id, site=site),
            f"Could not list webhooks for list '{list_id}'",
            self._logger,
        )
        if isinstance(result, Err):
            return result
        try:
            subscriptions = [Subscription.model_validate(item) for item in result.value]
        except PydanticValidationError as e:
            return fail(
                RemoteServiceError(f"Unexpected subscription in response: {e.error_count()} invalid field(s)"),
                f"Could not list webhooks for list '{list_id}'",
                self._logger,
            )
        self._logger.info(
            f"{len(subscriptions)} webhook(s) registered on list '{list_id}'.",
            op="webhook.subscription.listed",
        )
        return Ok(subscriptions)

    async def find_by_url(
        self,
        list_id: str | None,
        notification_url: str | None,
        site: SiteContext | None = None,
    ) -> Result[Subscription | None]:
        """First subscription whose notificationUrl equals ``notification_url`` exactly, else None."""
        if not notification_url:
            return fail(ValidationError("Required parameters are missing: notificationUrl."), logger=self._logger)
        result = await self.list(list_id, site=site)
        if isinstance(result, Err):
            return result
        for subscription in result.value:
            if subscription.notification_url == notification_url:
                return Ok(subscription)
        return Ok(None)

    async def remove(
        self,
        list_id: str | None,
        subscription_id: str | None,
        site: SiteContext | None = None,
    ) -> Result[None]:
        """Delete one subscription; a missing list or id comes back as NotFoundError."""
        if not list_id or not subscription_id:
            return fail(ValidationError("Required parameters are missing: listId and webhookId."), logger=self._logger)
        result = await guarded(
            self._client.delete_subscription(list_id, subscription_id, site=site),
            f"Could not delete webhook '{subscription_id}' for list '{list_id}'",
            self._logger,
        )
        if isinstance(result, Err):
            return result
        self._logger.info(
            f"Deleted webhook '{subscription_id}' registered on list '{list_id}'.",
            op="webhook.subscription.deleted",
        )
        return Ok(None)
