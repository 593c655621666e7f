"""Request scheduler deciding what the connector runs next."""

from __future__ import annotations

import logging
import threading

from app.db import RequestQueuePort
from app.domain import (
    ENTITY_REGISTRY,
    EntityDefinition,
    domain_qbxml_build_default_query,
)
from app.domain.qbxml_requests import DEFAULT_MAX_RETURNED, DEFAULT_QBXML_VERSION

from .interfaces import ScheduledRequest, SchedulerState

logger = logging.getLogger(__name__)


class RequestScheduler:
    """Queue-first scheduler with round-robin default sync fallback.

    When the queue is empty the scheduler issues a bounded default query for
    the registry entry at `state.index` and advances the index modulo the
    registry size, so every entity kind is synced once per full cycle.
    """

    def __init__(
        self,
        queue_repository: RequestQueuePort,
        state: SchedulerState | None = None,
        registry: tuple[EntityDefinition, ...] = ENTITY_REGISTRY,
        max_returned: int = DEFAULT_MAX_RETURNED,
        qbxml_version: str = DEFAULT_QBXML_VERSION,
    ):
        """Initialize request scheduler.

        Args:
            queue_repository: Durable request queue.
            state: Rotation state; a fresh state starting at index 0 when omitted.
            registry: Entity registry driving the default cycle.
            max_returned: Result cap for default queries.
            qbxml_version: qbXML version for default queries.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if queue_repository is None:
            raise ValueError("queue_repository must not be None")
        if not registry:
            raise ValueError("registry must not be empty")
        if max_returned < 1:
            raise ValueError("max_returned must be >= 1")

        self._queue_repository = queue_repository
        self._state = state if state is not None else SchedulerState()
        self._registry = registry
        self._max_returned = max_returned
        self._qbxml_version = qbxml_version
        self._state_lock = threading.Lock()

    @property
    def state(self) -> SchedulerState:
        return self._state

    def job_next_request(self) -> ScheduledRequest:
        """Return the next request payload for the connector.

        Returns:
            ScheduledRequest: Dequeued payload, or the next default sync query.

        Raises:
            DurableStoreError: Raised when the queue cannot be read.
        """

        queued_payload = self._queue_repository.db_queue_dequeue()
        if queued_payload is not None:
            logger.info("Scheduling queued request")
            return ScheduledRequest(payload=queued_payload, source="queue")

        with self._state_lock:
            position = self._state.index % len(self._registry)
            definition = self._registry[position]
            self._state.index = (position + 1) % len(self._registry)

        logger.info("Queue empty, scheduling default sync for %s", definition.kind)
        payload = domain_qbxml_build_default_query(
            definition,
            max_returned=self._max_returned,
            qbxml_version=self._qbxml_version,
        )
        return ScheduledRequest(payload=payload, source="default", entity_kind=definition.kind)
