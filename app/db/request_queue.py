"""Database service for the durable FIFO of pending connector requests."""

from __future__ import annotations

from datetime import datetime, timezone
import threading

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from app.db.interfaces import DurableStoreError, RequestQueuePort


class SQLAlchemyRequestQueueService(RequestQueuePort):
    """SQLAlchemy implementation of the request queue.

    Items are rows ordered by an auto-increment id. Each mutation runs inside
    one transaction and under a process-wide single-writer lock, so the
    scheduler pop and concurrent write-boundary enqueues cannot lose updates.
    """

    def __init__(self, engine: Engine):
        """Initialize request queue service.

        Args:
            engine: SQLAlchemy engine used for all queue operations.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when engine is invalid.
        """

        if engine is None:
            raise ValueError("engine must not be None")

        self._engine = engine
        self._writer_lock = threading.Lock()

    def db_queue_enqueue(self, payload: str) -> int:
        """Append one payload to the queue tail.

        Args:
            payload: Opaque request payload.

        Returns:
            int: Queue size after the append.

        Raises:
            ValueError: Raised when payload is blank.
            DurableStoreError: Raised when persistence fails.
        """

        if not isinstance(payload, str) or not payload.strip():
            raise ValueError("payload must be a non-blank string")

        with self._writer_lock:
            try:
                with self._engine.begin() as connection:
                    connection.execute(
                        text("INSERT INTO request_queue (payload, enqueued_at_utc) VALUES (:payload, :enqueued_at_utc)"),
                        {
                            "payload": payload,
                            "enqueued_at_utc": datetime.now(timezone.utc).isoformat(),
                        },
                    )
                    return int(connection.execute(text("SELECT COUNT(*) FROM request_queue")).scalar_one())
            except SQLAlchemyError as error:
                raise DurableStoreError("request queue enqueue failed") from error

    def db_queue_dequeue(self) -> str | None:
        """Remove and return the queue head.

        Returns:
            str | None: Head payload, or None when the queue is empty.

        Raises:
            DurableStoreError: Raised when the queue cannot be read or written.
        """

        with self._writer_lock:
            try:
                with self._engine.begin() as connection:
                    head_row = connection.execute(
                        text("SELECT queue_item_id, payload FROM request_queue ORDER BY queue_item_id ASC LIMIT 1")
                    ).mappings().fetchone()
                    if head_row is None:
                        return None

                    deleted_count = connection.execute(
                        text("DELETE FROM request_queue WHERE queue_item_id = :queue_item_id"),
                        {"queue_item_id": head_row["queue_item_id"]},
                    ).rowcount
                    if deleted_count != 1:
                        raise DurableStoreError("request queue head disappeared during dequeue")
                    return str(head_row["payload"])
            except SQLAlchemyError as error:
                raise DurableStoreError("request queue dequeue failed") from error

    def db_queue_peek(self) -> str | None:
        """Return the queue head without mutation.

        Returns:
            str | None: Head payload, or None when the queue is empty.

        Raises:
            DurableStoreError: Raised when the queue cannot be read.
        """

        try:
            with self._engine.connect() as connection:
                head_payload = connection.execute(
                    text("SELECT payload FROM request_queue ORDER BY queue_item_id ASC LIMIT 1")
                ).scalar_one_or_none()
        except SQLAlchemyError as error:
            raise DurableStoreError("request queue peek failed") from error

        if head_payload is None:
            return None
        return str(head_payload)

    def db_queue_clear(self) -> int:
        """Remove every queued payload.

        Returns:
            int: Number of removed payloads.

        Raises:
            DurableStoreError: Raised when the queue cannot be written.
        """

        with self._writer_lock:
            try:
                with self._engine.begin() as connection:
                    return int(connection.execute(text("DELETE FROM request_queue")).rowcount or 0)
            except SQLAlchemyError as error:
                raise DurableStoreError("request queue clear failed") from error

    def db_queue_size(self) -> int:
        """Return the number of queued payloads.

        Raises:
            DurableStoreError: Raised when the queue cannot be read.
        """

        try:
            with self._engine.connect() as connection:
                return int(connection.execute(text("SELECT COUNT(*) FROM request_queue")).scalar_one())
        except SQLAlchemyError as error:
            raise DurableStoreError("request queue size read failed") from error
