"""Write boundary that turns client intents into queued qbXML requests."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from app.db import AnswerArchivePort, ArchivedAnswerRecord, RequestQueuePort
from app.domain import (
    EntityDefinition,
    domain_entity_resolve,
    domain_qbxml_build_create,
    domain_qbxml_build_default_query,
    domain_qbxml_build_delete,
    domain_qbxml_build_point_query,
)
from app.domain.qbxml_requests import DEFAULT_MAX_RETURNED, DEFAULT_QBXML_VERSION

logger = logging.getLogger(__name__)


class RequestEnqueueService:
    """Build qbXML requests for external callers and append them to the queue.

    Queued requests are picked up by the connector on its next
    `sendRequestXML` call. Latest-archive reads bypass the queue entirely.
    """

    def __init__(
        self,
        queue_repository: RequestQueuePort,
        archive_repository: AnswerArchivePort,
        max_returned: int = DEFAULT_MAX_RETURNED,
        qbxml_version: str = DEFAULT_QBXML_VERSION,
    ):
        """Initialize request enqueue service.

        Args:
            queue_repository: Durable request queue.
            archive_repository: Durable answer archive for latest reads.
            max_returned: Result cap for bulk sync queries.
            qbxml_version: qbXML version declared in built requests.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if queue_repository is None:
            raise ValueError("queue_repository must not be None")
        if archive_repository is None:
            raise ValueError("archive_repository must not be None")
        if max_returned < 1:
            raise ValueError("max_returned must be >= 1")

        self._queue_repository = queue_repository
        self._archive_repository = archive_repository
        self._max_returned = max_returned
        self._qbxml_version = qbxml_version

    def job_enqueue_point_query(self, kind: str, record_id: str) -> int:
        """Queue a query for one record by its identifier.

        Args:
            kind: Entity kind or archive area alias.
            record_id: Transaction id or list id.

        Returns:
            int: Queue size after the append.

        Raises:
            UnsupportedEntityKindError: Raised when kind is not registered.
            QbxmlTemplateError: Raised when record_id is blank.
        """

        definition = domain_entity_resolve(kind)
        payload = domain_qbxml_build_point_query(definition, record_id, qbxml_version=self._qbxml_version)
        return self._job_enqueue(definition, payload, "point query")

    def job_enqueue_default_sync(self, kind: str) -> int:
        """Queue the bounded default query for one entity kind."""

        definition = domain_entity_resolve(kind)
        payload = domain_qbxml_build_default_query(
            definition,
            max_returned=self._max_returned,
            qbxml_version=self._qbxml_version,
        )
        return self._job_enqueue(definition, payload, "sync")

    def job_enqueue_create(self, kind: str, create_fields: Mapping[str, Any]) -> int:
        """Queue an add request built from the kind's creation template.

        Args:
            kind: Entity kind or archive area alias.
            create_fields: Creation input values.

        Returns:
            int: Queue size after the append.

        Raises:
            UnsupportedEntityKindError: Raised when kind is not registered.
            QbxmlTemplateError: Raised when required fields are missing or malformed.
        """

        definition = domain_entity_resolve(kind)
        payload = domain_qbxml_build_create(definition, create_fields, qbxml_version=self._qbxml_version)
        return self._job_enqueue(definition, payload, "create")

    def job_enqueue_delete(self, kind: str, record_id: str) -> int:
        """Queue a transaction or list deletion for one record."""

        definition = domain_entity_resolve(kind)
        payload = domain_qbxml_build_delete(definition, record_id, qbxml_version=self._qbxml_version)
        return self._job_enqueue(definition, payload, "delete")

    def job_read_latest(self, kind: str) -> ArchivedAnswerRecord | None:
        """Return the most recently archived answer for one kind, if any.

        Raises:
            UnsupportedEntityKindError: Raised when kind is not registered.
        """

        definition = domain_entity_resolve(kind)
        return self._archive_repository.db_archive_get_latest(definition.kind)

    def job_queue_size(self) -> int:
        return self._queue_repository.db_queue_size()

    def job_queue_peek(self) -> str | None:
        return self._queue_repository.db_queue_peek()

    def job_queue_clear(self) -> int:
        """Drop every queued request and return how many were removed."""

        removed_count = self._queue_repository.db_queue_clear()
        logger.warning("Request queue cleared: %d requests removed", removed_count)
        return removed_count

    def _job_enqueue(self, definition: EntityDefinition, payload: str, intent: str) -> int:
        queue_size = self._queue_repository.db_queue_enqueue(payload)
        logger.info("Queued %s %s request, queue size %d", definition.kind, intent, queue_size)
        return queue_size
