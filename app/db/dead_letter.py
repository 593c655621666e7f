"""Database service for durable dead-letter records of failed webhook deliveries."""

from __future__ import annotations

from datetime import datetime, timezone
import json
from typing import Any

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from app.db.interfaces import DeadLetterRecord, DeadLetterRepositoryPort, DurableStoreError


class SQLAlchemyDeadLetterService(DeadLetterRepositoryPort):
    """SQLAlchemy implementation of dead-letter persistence.

    One row is written per failed delivery attempt. Rows are never updated or
    deleted by the service; replay is a manual operation.
    """

    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("engine must not be None")

        self._engine = engine

    def db_dead_letter_insert(self, event_type: str, payload: list[dict[str, Any]], error: str) -> DeadLetterRecord:
        """Persist one failed delivery attempt.

        Args:
            event_type: Webhook event type of the failed delivery.
            payload: Normalized records that were not delivered.
            error: Delivery error message.

        Returns:
            DeadLetterRecord: Persisted dead-letter row.

        Raises:
            ValueError: Raised when event type is blank.
            DurableStoreError: Raised when persistence fails.
        """

        normalized_event_type = (event_type or "").strip()
        if not normalized_event_type:
            raise ValueError("event_type must not be blank")

        failed_at_utc = datetime.now(timezone.utc).isoformat()
        error_message = str(error or "unknown delivery error")
        try:
            with self._engine.begin() as connection:
                dead_letter_id = connection.execute(
                    text(
                        "INSERT INTO dead_letter (event_type, payload, error, failed_at_utc) "
                        "VALUES (:event_type, :payload, :error, :failed_at_utc)"
                    ),
                    {
                        "event_type": normalized_event_type,
                        "payload": json.dumps(payload, indent=2),
                        "error": error_message,
                        "failed_at_utc": failed_at_utc,
                    },
                ).lastrowid
        except SQLAlchemyError as db_error:
            raise DurableStoreError("dead-letter write failed") from db_error

        return DeadLetterRecord(
            dead_letter_id=int(dead_letter_id),
            event_type=normalized_event_type,
            payload=list(payload),
            error=error_message,
            failed_at_utc=failed_at_utc,
        )

    def db_dead_letter_list(self, limit: int, offset: int = 0) -> list[DeadLetterRecord]:
        """Return dead-letters ordered newest first.

        Args:
            limit: Max rows to return.
            offset: Rows to skip.

        Returns:
            list[DeadLetterRecord]: Dead-letter rows.

        Raises:
            ValueError: Raised when paging values are invalid.
            DurableStoreError: Raised when the store cannot be read.
        """

        if limit < 1:
            raise ValueError("limit must be >= 1")
        if offset < 0:
            raise ValueError("offset must be >= 0")

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(
                        "SELECT dead_letter_id, event_type, payload, error, failed_at_utc FROM dead_letter "
                        "ORDER BY dead_letter_id DESC LIMIT :limit OFFSET :offset"
                    ),
                    {"limit": limit, "offset": offset},
                ).mappings().fetchall()
        except SQLAlchemyError as error:
            raise DurableStoreError("dead-letter read failed") from error

        return [
            DeadLetterRecord(
                dead_letter_id=int(row["dead_letter_id"]),
                event_type=row["event_type"],
                payload=json.loads(row["payload"]),
                error=row["error"],
                failed_at_utc=row["failed_at_utc"],
            )
            for row in rows
        ]
