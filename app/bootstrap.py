"""Application bootstrap wiring for startup validation and dependency assembly."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from fastapi import FastAPI

from app.adapters import HttpxWebhookDeliveryAdapter
from app.api import create_api_application
from app.config import AppSettings, config_configure_logging, config_load_settings
from app.connector import SessionController, connector_build_credential_validator
from app.db import (
    SQLAlchemyAnswerArchiveService,
    SQLAlchemyDatabaseHealthService,
    SQLAlchemyDeadLetterService,
    SQLAlchemyRequestQueueService,
    db_create_engine,
    db_migrate_to_head,
)
from app.domain import ENTITY_REGISTRY, domain_entity_validate_registry
from app.jobs import (
    AnswerProcessingWorker,
    RequestEnqueueService,
    RequestScheduler,
    SchedulerState,
    WebhookDispatcher,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdapterRuntime:
    """Fully wired runtime components shared by the API and CLI surfaces.

    Attributes:
        settings: Validated runtime settings.
        db_health_service: Database health service.
        dead_letter_repository: Dead-letter repository.
        enqueue_service: Write boundary service.
        answer_worker: Background answer processing worker.
        session_controller: Web Connector callback controller.
        webhook_target: Redacted webhook target label, None when delivery is disabled.
    """

    settings: AppSettings
    db_health_service: SQLAlchemyDatabaseHealthService
    dead_letter_repository: SQLAlchemyDeadLetterService
    enqueue_service: RequestEnqueueService
    answer_worker: AnswerProcessingWorker
    session_controller: SessionController
    webhook_target: str | None


def bootstrap_create_runtime(settings: AppSettings | None = None) -> AdapterRuntime:
    """Validate startup configuration and assemble runtime components.

    Args:
        settings: Optional pre-validated settings; loaded from the environment when omitted.

    Returns:
        AdapterRuntime: Wired runtime components.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
        EntityRegistryError: Raised when the entity registry is inconsistent.
    """

    resolved_settings = settings or config_load_settings()
    config_configure_logging(resolved_settings.log_level)
    domain_entity_validate_registry(ENTITY_REGISTRY)

    if resolved_settings.database_auto_migrate:
        db_migrate_to_head(resolved_settings.database_url)

    engine = db_create_engine(database_url=resolved_settings.database_url)
    queue_repository = SQLAlchemyRequestQueueService(engine=engine)
    archive_repository = SQLAlchemyAnswerArchiveService(engine=engine)
    dead_letter_repository = SQLAlchemyDeadLetterService(engine=engine)

    delivery_adapter = None
    webhook_target = None
    if resolved_settings.webhook_url is not None:
        delivery_adapter = HttpxWebhookDeliveryAdapter(
            webhook_url=str(resolved_settings.webhook_url),
            timeout_seconds=resolved_settings.webhook_timeout_seconds,
        )
        webhook_target = delivery_adapter.adapter_target_label()
    else:
        logger.warning("WEBHOOK_URL is not set, normalized records will not be delivered")

    dispatcher = WebhookDispatcher(dead_letter_repository=dead_letter_repository, delivery_adapter=delivery_adapter)
    answer_worker = AnswerProcessingWorker(
        archive_repository=archive_repository,
        dispatcher=dispatcher,
        registry=ENTITY_REGISTRY,
        max_pending=resolved_settings.answer_queue_max_size,
    )
    scheduler = RequestScheduler(
        queue_repository=queue_repository,
        state=SchedulerState(),
        registry=ENTITY_REGISTRY,
        max_returned=resolved_settings.default_max_returned,
        qbxml_version=resolved_settings.qbxml_version,
    )
    session_controller = SessionController(
        scheduler=scheduler,
        worker=answer_worker,
        session_ticket=resolved_settings.settings_session_ticket(),
        credential_validator=connector_build_credential_validator(
            username=resolved_settings.connector_username,
            password=resolved_settings.connector_password,
        ),
        server_version=resolved_settings.server_version,
        client_version=resolved_settings.client_version,
    )
    enqueue_service = RequestEnqueueService(
        queue_repository=queue_repository,
        archive_repository=archive_repository,
        max_returned=resolved_settings.default_max_returned,
        qbxml_version=resolved_settings.qbxml_version,
    )
    return AdapterRuntime(
        settings=resolved_settings,
        db_health_service=SQLAlchemyDatabaseHealthService(engine=engine),
        dead_letter_repository=dead_letter_repository,
        enqueue_service=enqueue_service,
        answer_worker=answer_worker,
        session_controller=session_controller,
        webhook_target=webhook_target,
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional pre-validated settings; loaded from the environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    runtime = bootstrap_create_runtime(settings)
    return create_api_application(
        settings=runtime.settings,
        db_health_service=runtime.db_health_service,
        session_controller=runtime.session_controller,
        enqueue_service=runtime.enqueue_service,
        dead_letter_repository=runtime.dead_letter_repository,
        answer_worker=runtime.answer_worker,
        webhook_target=runtime.webhook_target,
    )
