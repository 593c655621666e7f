"""Request queue inspection and reset endpoints."""

from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.db import DurableStoreError
from app.jobs import RequestEnqueueService


def api_create_queue_router(
    enqueue_service: RequestEnqueueService,
    auth_dependency: Callable[..., None],
) -> APIRouter:
    """Create router exposing queue size, head peek, and clear.

    Args:
        enqueue_service: Job-layer write boundary service.
        auth_dependency: Dependency guarding every route.

    Returns:
        APIRouter: Router exposing `/queue` endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if enqueue_service is None:
        raise ValueError("enqueue_service must not be None")

    router = APIRouter(prefix="/queue", tags=["queue"], dependencies=[Depends(auth_dependency)])

    @router.get("")
    def api_queue_status() -> JSONResponse:
        """Return queue size and the head payload without removing it."""

        try:
            payload = {
                "size": enqueue_service.job_queue_size(),
                "head": enqueue_service.job_queue_peek(),
            }
        except DurableStoreError as error:
            payload = {
                "status": "error",
                "code": "STORE_UNAVAILABLE",
                "message": str(error),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.delete("")
    def api_queue_clear() -> JSONResponse:
        """Remove every queued request."""

        try:
            removed_count = enqueue_service.job_queue_clear()
        except DurableStoreError as error:
            payload = {
                "status": "error",
                "code": "STORE_UNAVAILABLE",
                "message": str(error),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return JSONResponse(content={"status": "cleared", "removed": removed_count}, status_code=status.HTTP_200_OK)

    return router
