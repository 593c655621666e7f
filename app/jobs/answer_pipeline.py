"""Answer processing pipeline and its background worker."""

from __future__ import annotations

import logging
import queue
import threading
import xml.etree.ElementTree as element_tree

from app.db import AnswerArchivePort
from app.domain import ENTITY_REGISTRY, EntityDefinition, domain_qbxml_element_to_dict

from .dispatcher import WebhookDispatcher
from .interfaces import AnswerProcessingResult, DispatchOutcome
from .normalizer import job_filter_flagged_records, job_normalize_records
from .response_router import job_classify_answer

logger = logging.getLogger(__name__)

_STOP_SENTINEL = object()
DEFAULT_MAX_PENDING_ANSWERS = 100


class AnswerProcessingWorker:
    """Archive, normalize, and dispatch connector answers off the callback path.

    Answers handed to `job_submit` are processed in submission order by one
    daemon thread. A failure while processing one answer is logged and never
    stops the worker or reaches the session controller. The pending queue is
    bounded; a full queue makes `job_submit` wait for the worker.
    """

    def __init__(
        self,
        archive_repository: AnswerArchivePort,
        dispatcher: WebhookDispatcher,
        registry: tuple[EntityDefinition, ...] = ENTITY_REGISTRY,
        max_pending: int = DEFAULT_MAX_PENDING_ANSWERS,
    ):
        """Initialize answer processing worker.

        Args:
            archive_repository: Durable answer archive.
            dispatcher: Webhook dispatcher for normalized records.
            registry: Entity registry used for classification.
            max_pending: Upper bound of answers waiting for the worker.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are missing or limits are invalid.
        """

        if archive_repository is None:
            raise ValueError("archive_repository must not be None")
        if dispatcher is None:
            raise ValueError("dispatcher must not be None")
        if not registry:
            raise ValueError("registry must not be empty")
        if max_pending < 1:
            raise ValueError("max_pending must be >= 1")

        self._archive_repository = archive_repository
        self._dispatcher = dispatcher
        self._registry = registry
        self._pending: queue.Queue = queue.Queue(maxsize=max_pending)
        self._thread: threading.Thread | None = None
        self._thread_lock = threading.Lock()

    def job_process_answer(self, answer_root: element_tree.Element) -> AnswerProcessingResult:
        """Run the full pipeline for one parsed answer synchronously.

        The answer is archived before anything else, including answers that
        carry zero records. Unclassified answers are archived under the first
        registry entry and never dispatched. For classified answers every flag
        event is dispatched with its flagged subset first, then the entity's
        event type with all records.

        Args:
            answer_root: Parsed answer root element.

        Returns:
            AnswerProcessingResult: Archive, normalization, and dispatch summary.

        Raises:
            DurableStoreError: Raised when the archive write fails.
        """

        classification = job_classify_answer(answer_root, registry=self._registry)
        definition = classification.definition
        if classification.is_ambiguous:
            logger.warning(
                "Answer matched several entity kinds %s, using %s",
                ", ".join(classification.matched_kinds),
                definition.kind,
            )

        archived = self._archive_repository.db_archive_insert(
            entity_kind=definition.kind,
            archive_area=definition.archive_area,
            payload=domain_qbxml_element_to_dict(answer_root),
            classified=classification.is_classified,
        )

        if not classification.is_classified:
            logger.warning(
                "Answer did not match any entity kind, archived as %s under %s without dispatch",
                archived.archive_id,
                definition.kind,
            )
            return AnswerProcessingResult(
                entity_kind=definition.kind,
                classified=False,
                archive_id=archived.archive_id,
            )

        try:
            records = job_normalize_records(definition, answer_root)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception(
                "Normalization failed for %s answer %s, dispatch skipped",
                definition.kind,
                archived.archive_id,
            )
            return AnswerProcessingResult(
                entity_kind=definition.kind,
                classified=True,
                archive_id=archived.archive_id,
            )

        dispatches: list[DispatchOutcome] = []
        for flag_field, flag_event_type in definition.flag_events:
            flagged_records = job_filter_flagged_records(records, flag_field)
            dispatches.append(self._dispatcher.job_dispatch(flag_event_type, flagged_records))
        dispatches.append(self._dispatcher.job_dispatch(definition.event_type, records))

        logger.info(
            "Processed %s answer %s with %d records: %s",
            definition.kind,
            archived.archive_id,
            len(records),
            ", ".join(f"{outcome.event_type}={outcome.status}" for outcome in dispatches),
        )
        return AnswerProcessingResult(
            entity_kind=definition.kind,
            classified=True,
            archive_id=archived.archive_id,
            records=records,
            dispatches=dispatches,
        )

    def job_start(self) -> None:
        """Start the background worker thread when it is not running."""

        with self._thread_lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._thread = threading.Thread(target=self._job_run, name="answer-processing-worker", daemon=True)
            self._thread.start()

    def job_submit(self, answer_root: element_tree.Element) -> None:
        """Queue one parsed answer for background processing.

        Blocks while the pending queue is full so answers are never dropped.
        """

        self.job_start()
        try:
            self._pending.put_nowait(answer_root)
        except queue.Full:
            logger.warning(
                "Answer processing queue is full (%d pending), waiting for the worker",
                self._pending.maxsize,
            )
            self._pending.put(answer_root)

    def job_join(self) -> None:
        """Block until every submitted answer has been processed."""

        self._pending.join()

    def job_stop(self, timeout_seconds: float = 5.0) -> None:
        """Drain queued answers and stop the worker thread.

        Args:
            timeout_seconds: Maximum time to wait for the thread to exit.

        Returns:
            None: Method does not return a value.
        """

        with self._thread_lock:
            worker_thread = self._thread
            self._thread = None
        if worker_thread is None:
            return
        self._pending.put(_STOP_SENTINEL)
        worker_thread.join(timeout=timeout_seconds)

    def _job_run(self) -> None:
        while True:
            answer_root = self._pending.get()
            try:
                if answer_root is _STOP_SENTINEL:
                    return
                self.job_process_answer(answer_root)
            except Exception:  # pylint: disable=broad-exception-caught
                logger.exception("Answer processing failed")
            finally:
                self._pending.task_done()
