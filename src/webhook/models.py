"""Pydantic models for SharePoint webhook subscriptions and notification payloads."""

from pydantic import BaseModel, Field


class Subscription(BaseModel):
    """Webhook subscription as returned by ``lists/.../subscriptions``.

    Unknown fields are kept so the raw subscription can be returned unchanged.
    """

    id: str
    resource: str | None = None
    notification_url: str = Field(..., alias="notificationUrl")
    client_state: str | None = Field(None, alias="clientState")
    expiration_date_time: str | None = Field(None, alias="expirationDateTime")
    site_url: str | None = Field(None, alias="siteUrl")

    model_config = {"populate_by_name": True, "extra": "allow"}

    def to_body(self) -> dict:
        """The subscription as the service sent it, explicit nulls included."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class NotificationEvent(BaseModel):
    """Single change notification from SharePoint (one entry of ``value``)."""

    subscription_id: str | None = Field(None, alias="subscriptionId")
    resource: str
    site_url: str | None = Field(None, alias="siteUrl")
    tenant_id: str | None = Field(None, alias="tenantId")
    web_id: str | None = Field(None, alias="webId")
    client_state: str | None = Field(None, alias="clientState")
    expiration_date_time: str | None = Field(None, alias="expirationDateTime")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class NotificationEnvelope(BaseModel):
    """Request body of a SharePoint webhook POST: array of notifications in 'value'."""

    value: list[NotificationEvent] = Field(..., min_length=1)
