"""Webhook dispatcher with durable dead-letter fallback."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any, Callable

from app.adapters import WebhookDeliveryError, WebhookDeliveryPort
from app.db import DeadLetterRepositoryPort

from .interfaces import DispatchOutcome

logger = logging.getLogger(__name__)


class WebhookDispatcher:
    """Deliver normalized records once and persist a dead-letter on failure.

    There is no retry, backoff, or acknowledgment tracking. A failed attempt
    produces exactly one dead-letter; neither the delivery failure nor a failed
    dead-letter write ever propagates to the caller.
    """

    def __init__(
        self,
        dead_letter_repository: DeadLetterRepositoryPort,
        delivery_adapter: WebhookDeliveryPort | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize webhook dispatcher.

        Args:
            dead_letter_repository: Durable dead-letter store.
            delivery_adapter: Webhook delivery adapter; delivery is skipped when None.
            clock: Optional UTC clock provider for event timestamps.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when the dead-letter repository is missing.
        """

        if dead_letter_repository is None:
            raise ValueError("dead_letter_repository must not be None")

        self._dead_letter_repository = dead_letter_repository
        self._delivery_adapter = delivery_adapter
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def job_dispatch(self, event_type: str, records: list[dict[str, Any]]) -> DispatchOutcome:
        """Attempt one delivery of a non-empty record list.

        Args:
            event_type: Webhook event type.
            records: Normalized records for the event payload.

        Returns:
            DispatchOutcome: Delivery, skip, or dead-letter outcome.
        """

        if not records:
            return DispatchOutcome(event_type=event_type, record_count=0, status="skipped_empty")

        if self._delivery_adapter is None:
            logger.warning("WEBHOOK_URL is not set, skipping webhook send for %s", event_type)
            return DispatchOutcome(event_type=event_type, record_count=len(records), status="skipped_unconfigured")

        timestamp = self._clock().isoformat()
        try:
            delivery_result = self._delivery_adapter.adapter_deliver(
                event_type=event_type,
                records=records,
                timestamp=timestamp,
            )
        except WebhookDeliveryError as error:
            logger.error("Failed webhook for %s: %s", event_type, error)
            return self._job_record_dead_letter(event_type=event_type, records=records, error_message=str(error))
        except Exception as error:  # pylint: disable=broad-exception-caught
            logger.exception("Unexpected webhook failure for %s", event_type)
            return self._job_record_dead_letter(
                event_type=event_type,
                records=records,
                error_message=f"{type(error).__name__}: {error}",
            )

        logger.info(
            "Webhook sent: %s -> %s (%d records)",
            event_type,
            delivery_result.status_code,
            delivery_result.record_count,
        )
        return DispatchOutcome(event_type=event_type, record_count=len(records), status="delivered")

    def _job_record_dead_letter(
        self,
        event_type: str,
        records: list[dict[str, Any]],
        error_message: str,
    ) -> DispatchOutcome:
        """Persist one dead-letter and swallow any persistence failure."""

        try:
            dead_letter = self._dead_letter_repository.db_dead_letter_insert(
                event_type=event_type,
                payload=records,
                error=error_message,
            )
        except Exception:  # pylint: disable=broad-exception-caught
            # dispatch must never destabilize the protocol session
            logger.exception("Failed to save dead-letter for %s", event_type)
            return DispatchOutcome(
                event_type=event_type,
                record_count=len(records),
                status="dead_letter_failed",
                error=error_message,
            )

        logger.warning("Dead-letter saved: id=%s event=%s", dead_letter.dead_letter_id, event_type)
        return DispatchOutcome(
            event_type=event_type,
            record_count=len(records),
            status="dead_lettered",
            error=error_message,
        )
