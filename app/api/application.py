"""FastAPI application factory for the Web Connector adapter.

This module composes the SOAP endpoint, write boundary, and operational
routers, and ties the answer worker lifetime to the application lifespan.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config import AppSettings
from app.connector import SessionController
from app.db import DatabaseHealthPort, DeadLetterRepositoryPort
from app.jobs import AnswerProcessingWorker, RequestEnqueueService

from .routers import (
    api_create_connector_router,
    api_create_dead_letter_router,
    api_create_entities_router,
    api_create_health_router,
    api_create_queue_router,
)
from .security import api_build_basic_auth_dependency


def create_api_application(
    settings: AppSettings,
    db_health_service: DatabaseHealthPort,
    session_controller: SessionController,
    enqueue_service: RequestEnqueueService,
    dead_letter_repository: DeadLetterRepositoryPort,
    answer_worker: AnswerProcessingWorker | None = None,
    webhook_target: str | None = None,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        db_health_service: Database health service used by health endpoints.
        session_controller: Controller answering Web Connector callbacks.
        enqueue_service: Write boundary service for queueing requests.
        dead_letter_repository: Dead-letter repository for inspection.
        answer_worker: Optional worker started and stopped with the application.
        webhook_target: Redacted webhook target reported by health checks.

    Returns:
        FastAPI: Framework application instance with every router mounted.

    Raises:
        ValueError: Raised when a router dependency is missing.
    """

    @asynccontextmanager
    async def api_lifespan(_: FastAPI):
        if answer_worker is not None:
            answer_worker.job_start()
        try:
            yield
        finally:
            if answer_worker is not None:
                answer_worker.job_stop()

    application = FastAPI(title="QBWC Webhook Adapter", lifespan=api_lifespan)

    @application.exception_handler(RequestValidationError)
    async def api_validation_error_handler(_: Request, error: RequestValidationError) -> JSONResponse:
        payload = {
            "status": "error",
            "code": "INVALID_REQUEST",
            "message": "request validation failed",
            "errors": [
                {"location": list(detail.get("loc", ())), "message": detail.get("msg", "")}
                for detail in error.errors()
            ],
        }
        return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal service descriptor for bootstrap verification."""

        return {
            "service": "qbwc-webhook-adapter",
            "status": "ready",
            "environment": settings.environment_name,
        }

    auth_dependency = api_build_basic_auth_dependency(settings)
    application.include_router(
        api_create_health_router(db_health_service=db_health_service, webhook_target=webhook_target)
    )
    application.include_router(api_create_connector_router(session_controller=session_controller))
    application.include_router(
        api_create_entities_router(enqueue_service=enqueue_service, auth_dependency=auth_dependency)
    )
    application.include_router(api_create_queue_router(enqueue_service=enqueue_service, auth_dependency=auth_dependency))
    application.include_router(
        api_create_dead_letter_router(
            settings=settings,
            dead_letter_repository=dead_letter_repository,
            auth_dependency=auth_dependency,
        )
    )

    return application
