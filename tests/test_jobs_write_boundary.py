"""Regression tests for the request enqueue write boundary."""

from __future__ import annotations

import xml.etree.ElementTree as element_tree

import pytest
from sqlalchemy import Engine

from app.db import SQLAlchemyAnswerArchiveService, SQLAlchemyRequestQueueService
from app.domain import QbxmlTemplateError, UnsupportedEntityKindError
from app.jobs import RequestEnqueueService, RequestScheduler


def _build_service(engine: Engine) -> tuple[RequestEnqueueService, SQLAlchemyRequestQueueService]:
    queue_repository = SQLAlchemyRequestQueueService(engine=engine)
    enqueue_service = RequestEnqueueService(
        queue_repository=queue_repository,
        archive_repository=SQLAlchemyAnswerArchiveService(engine=engine),
        max_returned=5,
    )
    return enqueue_service, queue_repository


def _message_tag(payload: str) -> str:
    messages = element_tree.fromstring(payload).find("QBXMLMsgsRq")
    assert messages is not None
    return list(messages)[0].tag


def test_jobs_write_boundary_enqueues_every_intent_in_order(migrated_engine: Engine) -> None:
    """Queue point query, sync, create, and delete requests in call order.

    Returns:
        None: Assertions validate queued request kinds and queue sizes.

    Raises:
        AssertionError: Raised when a request is lost or reordered.
    """

    enqueue_service, queue_repository = _build_service(migrated_engine)

    sizes = [
        enqueue_service.job_enqueue_point_query("invoice", "11-1700000000"),
        enqueue_service.job_enqueue_default_sync("bills"),
        enqueue_service.job_enqueue_create("customer", {"name": "Initech"}),
        enqueue_service.job_enqueue_delete("vendor", "80000002"),
    ]

    assert sizes == [1, 2, 3, 4]
    queued_tags = [_message_tag(queue_repository.db_queue_dequeue() or "") for _ in range(4)]
    assert queued_tags == ["InvoiceQueryRq", "BillQueryRq", "CustomerAddRq", "ListDelRq"]


def test_jobs_write_boundary_sync_uses_configured_cap(migrated_engine: Engine) -> None:
    enqueue_service, queue_repository = _build_service(migrated_engine)

    enqueue_service.job_enqueue_default_sync("estimate")

    assert "<MaxReturned>5</MaxReturned>" in (queue_repository.db_queue_peek() or "")


def test_jobs_write_boundary_requests_reach_scheduler_before_rotation(migrated_engine: Engine) -> None:
    enqueue_service, queue_repository = _build_service(migrated_engine)
    scheduler = RequestScheduler(queue_repository=queue_repository)

    enqueue_service.job_enqueue_point_query("payment", "P-1")
    scheduled = scheduler.job_next_request()

    assert scheduled.source == "queue"
    assert _message_tag(scheduled.payload) == "PaymentQueryRq"
    assert scheduler.state.index == 0


def test_jobs_write_boundary_rejects_unknown_kind_without_enqueueing(migrated_engine: Engine) -> None:
    enqueue_service, queue_repository = _build_service(migrated_engine)

    with pytest.raises(UnsupportedEntityKindError):
        enqueue_service.job_enqueue_default_sync("timesheet")

    assert queue_repository.db_queue_size() == 0


def test_jobs_write_boundary_rejects_incomplete_create(migrated_engine: Engine) -> None:
    enqueue_service, queue_repository = _build_service(migrated_engine)

    with pytest.raises(QbxmlTemplateError, match="counterpart"):
        enqueue_service.job_enqueue_create("estimate", {"txn_date": "2026-10-18", "lines": [{"item": "Widget"}]})

    assert queue_repository.db_queue_size() == 0


def test_jobs_write_boundary_reads_latest_archive_by_alias(migrated_engine: Engine) -> None:
    enqueue_service, _ = _build_service(migrated_engine)
    SQLAlchemyAnswerArchiveService(engine=migrated_engine).db_archive_insert(
        "credit_memo",
        "creditmemos",
        {"QBXML": {"QBXMLMsgsRs": [{}]}},
    )

    latest = enqueue_service.job_read_latest("creditmemos")

    assert latest is not None
    assert latest.entity_kind == "credit_memo"
    assert enqueue_service.job_read_latest("deposit") is None


def test_jobs_write_boundary_clear_reports_removed_count(migrated_engine: Engine) -> None:
    enqueue_service, _ = _build_service(migrated_engine)
    enqueue_service.job_enqueue_default_sync("invoice")
    enqueue_service.job_enqueue_default_sync("bill")

    assert enqueue_service.job_queue_clear() == 2
    assert enqueue_service.job_queue_size() == 0
    assert enqueue_service.job_queue_peek() is None
