"""Adapter layer package for outbound integration boundaries."""

from .interfaces import WebhookDeliveryPort, WebhookDeliveryResult
from .webhook_client import HttpxWebhookDeliveryAdapter
from .webhook_errors import (
	WebhookConnectionError,
	WebhookDeliveryError,
	WebhookStatusError,
	WebhookTimeoutError,
)

__all__ = [
	"HttpxWebhookDeliveryAdapter",
	"WebhookConnectionError",
	"WebhookDeliveryError",
	"WebhookDeliveryPort",
	"WebhookDeliveryResult",
	"WebhookStatusError",
	"WebhookTimeoutError",
]
