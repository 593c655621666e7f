"""Typed interfaces for adapter-layer responsibilities."""

from dataclasses import dataclass
from typing import Any
from typing import Protocol


@dataclass(frozen=True)
class WebhookDeliveryResult:
    """Result contract for one successful webhook delivery.

    Attributes:
        event_type: Delivered event type.
        status_code: HTTP status returned by the listener.
        record_count: Number of normalized records in the delivered body.
    """

    event_type: str
    status_code: int
    record_count: int


class WebhookDeliveryPort(Protocol):
    """Port definition for posting normalized records to the webhook listener."""

    def adapter_target_label(self) -> str:
        """Return the delivery target label for diagnostics.

        Returns:
            str: Human-readable delivery target.
        """

    def adapter_deliver(self, event_type: str, records: list[dict[str, Any]], timestamp: str) -> WebhookDeliveryResult:
        """Deliver one webhook event.

        Args:
            event_type: Event type identifier.
            records: Normalized records sent as the JSON array body.
            timestamp: Event timestamp in UTC ISO-8601.

        Returns:
            WebhookDeliveryResult: Delivery outcome.

        Raises:
            WebhookDeliveryError: Raised on transport failure, timeout, or non-success status.
        """
