"""Typed interfaces for database-layer services.

All SQL access must remain in the db package and its submodules.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from app.domain import HealthStatus


class DurableStoreError(RuntimeError):
    """Raised when queue, archive, or dead-letter storage is unreadable or unwritable."""


class DatabaseHealthPort(Protocol):
    """Port definition for database connectivity verification."""

    def db_connection_label(self) -> str:
        """Return a stable label for the active database connection target.

        Returns:
            str: Database target label for diagnostics.

        Raises:
            RuntimeError: Raised when connection metadata is unavailable.
        """

    def db_check_health(self) -> HealthStatus:
        """Check database connectivity and return deterministic health payload.

        Returns:
            HealthStatus: Database health status payload.

        Raises:
            ConnectionError: Raised when database cannot be reached.
        """


@dataclass(frozen=True)
class ArchivedAnswerRecord:
    """Persistence model for one archived connector answer.

    Attributes:
        archive_id: Monotonically increasing archive row identifier.
        entity_kind: Entity kind the answer was classified as.
        archive_area: Archive area name for the entity kind.
        received_at_utc: Receipt timestamp in UTC ISO-8601.
        payload: Full parsed answer in archive JSON shape.
        classified: False when no entity kind matched and the kind is the registry fallback.
    """

    archive_id: int
    entity_kind: str
    archive_area: str
    received_at_utc: str
    payload: dict[str, Any]
    classified: bool = True


@dataclass(frozen=True)
class DeadLetterRecord:
    """Persistence model for one failed webhook delivery attempt.

    Attributes:
        dead_letter_id: Dead-letter row identifier.
        event_type: Webhook event type of the failed delivery.
        payload: Normalized records that were not delivered.
        error: Delivery error message.
        failed_at_utc: Failure timestamp in UTC ISO-8601.
    """

    dead_letter_id: int
    event_type: str
    payload: list[dict[str, Any]]
    error: str
    failed_at_utc: str


class RequestQueuePort(Protocol):
    """Port definition for the durable FIFO of pending connector requests."""

    def db_queue_enqueue(self, payload: str) -> int:
        """Append one payload to the queue tail.

        Args:
            payload: Opaque request payload.

        Returns:
            int: Queue size after the append.

        Raises:
            DurableStoreError: Raised when the store cannot be written.
        """

    def db_queue_dequeue(self) -> str | None:
        """Remove and return the queue head, or None when empty.

        Raises:
            DurableStoreError: Raised when the store cannot be read or written.
        """

    def db_queue_peek(self) -> str | None:
        """Return the queue head without removing it, or None when empty."""

    def db_queue_clear(self) -> int:
        """Remove every queued payload and return the removed count."""

    def db_queue_size(self) -> int:
        """Return the number of queued payloads."""


class AnswerArchivePort(Protocol):
    """Port definition for the append-only archive of parsed answers."""

    def db_archive_insert(
        self,
        entity_kind: str,
        archive_area: str,
        payload: dict[str, Any],
        classified: bool = True,
    ) -> ArchivedAnswerRecord:
        """Persist one parsed answer.

        Args:
            entity_kind: Classified entity kind.
            archive_area: Archive area name for the entity kind.
            payload: Parsed answer in archive JSON shape.
            classified: Whether the answer matched a registry entry.

        Returns:
            ArchivedAnswerRecord: Persisted archive row.

        Raises:
            DurableStoreError: Raised when the archive cannot be written.
        """

    def db_archive_get_latest(self, entity_kind: str) -> ArchivedAnswerRecord | None:
        """Return the most recently archived answer for one entity kind.

        Unclassified answers archived under the fallback kind are never returned.

        Raises:
            DurableStoreError: Raised when the archive cannot be read.
        """


class DeadLetterRepositoryPort(Protocol):
    """Port definition for durable dead-letter persistence."""

    def db_dead_letter_insert(self, event_type: str, payload: list[dict[str, Any]], error: str) -> DeadLetterRecord:
        """Persist one failed delivery attempt.

        Raises:
            DurableStoreError: Raised when the dead-letter cannot be written.
        """

    def db_dead_letter_list(self, limit: int, offset: int = 0) -> list[DeadLetterRecord]:
        """Return dead-letters ordered newest first.

        Raises:
            DurableStoreError: Raised when the dead-letter store cannot be read.
        """
