"""Webhook service for SharePoint list change notifications."""

from src.webhook.models import (
    NotificationEnvelope,
    NotificationEvent,
    Subscription,
)

__all__ = [
    "NotificationEnvelope",
    "NotificationEvent",
    "Subscription",
]
