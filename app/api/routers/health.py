"""Health endpoint router composition for app, database, and webhook status."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.db import DatabaseHealthPort


def api_create_health_router(db_health_service: DatabaseHealthPort, webhook_target: str | None = None) -> APIRouter:
    """Create health-check router with database connectivity and queue depth.

    Args:
        db_health_service: DB-layer health service interface.
        webhook_target: Redacted webhook target label, None when delivery is disabled.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when db_health_service is invalid.
    """

    if db_health_service is None:
        raise ValueError("db_health_service must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return application and database health state.

        Returns:
            JSONResponse: 200 when the database is reachable, 503 otherwise.
        """

        webhook_payload = {
            "configured": webhook_target is not None,
            "target": webhook_target,
        }
        try:
            db_health = db_health_service.db_check_health()
            payload = {
                "status": "ok",
                "app": "up",
                "database": db_health.status,
                "detail": db_health.detail,
                "target": db_health_service.db_connection_label(),
                "queue_size": db_health.queue_size,
                "webhook": webhook_payload,
            }
            return JSONResponse(content=payload, status_code=status.HTTP_200_OK)
        except ConnectionError as error:
            payload = {
                "status": "degraded",
                "app": "up",
                "database": "down",
                "detail": str(error),
                "target": db_health_service.db_connection_label(),
                "queue_size": None,
                "webhook": webhook_payload,
            }
            return JSONResponse(content=payload, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    return router
