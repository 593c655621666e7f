"""Database service for the append-only archive of parsed connector answers."""

from __future__ import annotations

from datetime import datetime, timezone
import json
from typing import Any

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from app.db.interfaces import AnswerArchivePort, ArchivedAnswerRecord, DurableStoreError


class SQLAlchemyAnswerArchiveService(AnswerArchivePort):
    """SQLAlchemy implementation of write-once answer archiving."""

    def __init__(self, engine: Engine):
        """Initialize answer archive service.

        Args:
            engine: SQLAlchemy engine used for all archive operations.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when engine is invalid.
        """

        if engine is None:
            raise ValueError("engine must not be None")

        self._engine = engine

    def db_archive_insert(
        self,
        entity_kind: str,
        archive_area: str,
        payload: dict[str, Any],
        classified: bool = True,
    ) -> ArchivedAnswerRecord:
        """Persist one parsed answer as a new archive row.

        Args:
            entity_kind: Classified entity kind, or the registry fallback kind.
            archive_area: Archive area name for the entity kind.
            payload: Parsed answer in archive JSON shape.
            classified: Whether the answer matched a registry entry.

        Returns:
            ArchivedAnswerRecord: Persisted archive row.

        Raises:
            ValueError: Raised when identity values are blank or payload is not a mapping.
            DurableStoreError: Raised when persistence fails.
        """

        normalized_entity_kind = self._db_archive_validate_non_empty_text(entity_kind, "entity_kind")
        normalized_archive_area = self._db_archive_validate_non_empty_text(archive_area, "archive_area")
        if not isinstance(payload, dict):
            raise ValueError("payload must be a dict")

        received_at_utc = datetime.now(timezone.utc).isoformat()
        serialized_payload = json.dumps(payload)
        try:
            with self._engine.begin() as connection:
                archive_id = connection.execute(
                    text(
                        "INSERT INTO answer_archive (entity_kind, archive_area, received_at_utc, payload, classified) "
                        "VALUES (:entity_kind, :archive_area, :received_at_utc, :payload, :classified)"
                    ),
                    {
                        "entity_kind": normalized_entity_kind,
                        "archive_area": normalized_archive_area,
                        "received_at_utc": received_at_utc,
                        "payload": serialized_payload,
                        "classified": bool(classified),
                    },
                ).lastrowid
        except SQLAlchemyError as error:
            raise DurableStoreError("answer archive write failed") from error

        return ArchivedAnswerRecord(
            archive_id=int(archive_id),
            entity_kind=normalized_entity_kind,
            archive_area=normalized_archive_area,
            received_at_utc=received_at_utc,
            payload=payload,
            classified=bool(classified),
        )

    def db_archive_get_latest(self, entity_kind: str) -> ArchivedAnswerRecord | None:
        """Return the most recently archived answer for one entity kind.

        Rows stored with `classified` false are skipped, so answers that only
        landed under the fallback kind never shadow real answers for it.

        Args:
            entity_kind: Entity kind to look up.

        Returns:
            ArchivedAnswerRecord | None: Latest archive row or None when none exists.

        Raises:
            DurableStoreError: Raised when the archive cannot be read or decoded.
        """

        normalized_entity_kind = self._db_archive_validate_non_empty_text(entity_kind, "entity_kind")
        try:
            with self._engine.connect() as connection:
                row = connection.execute(
                    text(
                        "SELECT archive_id, entity_kind, archive_area, received_at_utc, payload, classified "
                        "FROM answer_archive WHERE entity_kind = :entity_kind AND classified = :classified "
                        "ORDER BY archive_id DESC LIMIT 1"
                    ),
                    {"entity_kind": normalized_entity_kind, "classified": True},
                ).mappings().fetchone()
        except SQLAlchemyError as error:
            raise DurableStoreError("answer archive read failed") from error

        if row is None:
            return None

        try:
            payload = json.loads(row["payload"])
        except (TypeError, ValueError) as error:
            raise DurableStoreError(f"answer archive row {row['archive_id']} is corrupt") from error

        return ArchivedAnswerRecord(
            archive_id=int(row["archive_id"]),
            entity_kind=row["entity_kind"],
            archive_area=row["archive_area"],
            received_at_utc=row["received_at_utc"],
            payload=payload,
            classified=bool(row["classified"]),
        )

    def _db_archive_validate_non_empty_text(self, value: str, field_name: str) -> str:
        """Validate text value and normalize surrounding whitespace.

        Args:
            value: Input text value.
            field_name: Field label for deterministic error messages.

        Returns:
            str: Normalized non-empty text value.

        Raises:
            ValueError: Raised when value is not valid non-empty text.
        """

        if not isinstance(value, str):
            raise ValueError(f"{field_name} must be a string")

        normalized_value = value.strip()
        if not normalized_value:
            raise ValueError(f"{field_name} must not be blank")

        return normalized_value
