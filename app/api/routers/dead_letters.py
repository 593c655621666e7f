"""Dead-letter inspection endpoint."""
# pylint: disable=duplicate-code

from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from app.config import AppSettings
from app.db import DeadLetterRecord, DeadLetterRepositoryPort, DurableStoreError


def api_create_dead_letter_router(
    settings: AppSettings,
    dead_letter_repository: DeadLetterRepositoryPort,
    auth_dependency: Callable[..., None],
) -> APIRouter:
    """Create router listing failed webhook deliveries.

    Args:
        settings: Runtime settings used for pagination defaults.
        dead_letter_repository: DB-layer dead-letter repository.
        auth_dependency: Dependency guarding every route.

    Returns:
        APIRouter: Router exposing `/dead-letters`.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if dead_letter_repository is None:
        raise ValueError("dead_letter_repository must not be None")

    router = APIRouter(prefix="/dead-letters", tags=["dead-letters"], dependencies=[Depends(auth_dependency)])

    @router.get("")
    def api_dead_letter_list(
        limit: int = Query(default=settings.api_dead_letter_default_limit, ge=1),
        offset: int = Query(default=0, ge=0),
    ) -> JSONResponse:
        """List dead-letters newest first.

        Args:
            limit: Max rows to return, capped by settings.
            offset: Rows to skip.

        Returns:
            JSONResponse: Dead-letter list envelope payload.
        """

        applied_limit = min(limit, settings.api_dead_letter_max_limit)
        try:
            dead_letters = dead_letter_repository.db_dead_letter_list(limit=applied_limit, offset=offset)
        except DurableStoreError as error:
            payload = {
                "status": "error",
                "code": "STORE_UNAVAILABLE",
                "message": str(error),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

        payload = {
            "items": [api_serialize_dead_letter(dead_letter) for dead_letter in dead_letters],
            "page": {
                "limit": limit,
                "applied_limit": applied_limit,
                "offset": offset,
                "returned": len(dead_letters),
            },
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router


def api_serialize_dead_letter(dead_letter: DeadLetterRecord) -> dict[str, object]:
    """Serialize one dead-letter in the `{eventType, payload, error, timestamp}` shape."""

    return {
        "id": dead_letter.dead_letter_id,
        "eventType": dead_letter.event_type,
        "payload": dead_letter.payload,
        "error": dead_letter.error,
        "timestamp": dead_letter.failed_at_utc,
    }
