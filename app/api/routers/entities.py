"""Write boundary router for queueing entity requests and reading archives."""

from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.models import EntityCreateRequest
from app.db import ArchivedAnswerRecord, DurableStoreError
from app.domain import QbxmlTemplateError, UnsupportedEntityKindError
from app.jobs import RequestEnqueueService


def api_create_entities_router(
    enqueue_service: RequestEnqueueService,
    auth_dependency: Callable[..., None],
) -> APIRouter:
    """Create router exposing per-entity write and latest-read endpoints.

    Args:
        enqueue_service: Job-layer write boundary service.
        auth_dependency: Dependency guarding every route.

    Returns:
        APIRouter: Router exposing `/entities` endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if enqueue_service is None:
        raise ValueError("enqueue_service must not be None")

    router = APIRouter(prefix="/entities", tags=["entities"], dependencies=[Depends(auth_dependency)])

    @router.post("/{kind}/query/{record_id}")
    def api_entity_enqueue_point_query(kind: str, record_id: str) -> JSONResponse:
        """Queue a query for one record by transaction or list id."""

        return _api_run_enqueue(kind, "query", lambda: enqueue_service.job_enqueue_point_query(kind, record_id))

    @router.post("/{kind}/sync")
    def api_entity_enqueue_sync(kind: str) -> JSONResponse:
        """Queue the bounded default query for one kind."""

        return _api_run_enqueue(kind, "sync", lambda: enqueue_service.job_enqueue_default_sync(kind))

    @router.post("/{kind}")
    def api_entity_enqueue_create(kind: str, create_request: EntityCreateRequest) -> JSONResponse:
        """Queue an add request built from the request body.

        Args:
            kind: Entity kind or archive area alias.
            create_request: Validated creation body.

        Returns:
            JSONResponse: 202 with queue size, or 400 for unsupported kinds and missing fields.
        """

        create_fields = create_request.api_create_fields()
        return _api_run_enqueue(kind, "create", lambda: enqueue_service.job_enqueue_create(kind, create_fields))

    @router.delete("/{kind}/{record_id}")
    def api_entity_enqueue_delete(kind: str, record_id: str) -> JSONResponse:
        """Queue a deletion for one record."""

        return _api_run_enqueue(kind, "delete", lambda: enqueue_service.job_enqueue_delete(kind, record_id))

    @router.get("/{kind}/latest")
    def api_entity_latest(kind: str) -> JSONResponse:
        """Return the latest archived answer for one kind.

        Returns:
            JSONResponse: Archive payload, 404 when nothing is archived yet.
        """

        try:
            archived = enqueue_service.job_read_latest(kind)
        except UnsupportedEntityKindError as error:
            return _api_error_response("UNSUPPORTED_ENTITY_KIND", str(error), status.HTTP_400_BAD_REQUEST)
        except DurableStoreError as error:
            return _api_error_response("STORE_UNAVAILABLE", str(error), status.HTTP_500_INTERNAL_SERVER_ERROR)

        if archived is None:
            return _api_error_response("NOT_FOUND", f"no archived answer for {kind}", status.HTTP_404_NOT_FOUND)
        return JSONResponse(content=api_serialize_archived_answer(archived), status_code=status.HTTP_200_OK)

    return router


def api_serialize_archived_answer(archived: ArchivedAnswerRecord) -> dict[str, object]:
    """Serialize one archived answer for API responses.

    Args:
        archived: Archive record.

    Returns:
        dict[str, object]: JSON-safe archive payload.
    """

    return {
        "archive_id": archived.archive_id,
        "entity_kind": archived.entity_kind,
        "archive_area": archived.archive_area,
        "received_at_utc": archived.received_at_utc,
        "payload": archived.payload,
    }


def _api_run_enqueue(kind: str, intent: str, enqueue_call: Callable[[], int]) -> JSONResponse:
    try:
        queue_size = enqueue_call()
    except UnsupportedEntityKindError as error:
        return _api_error_response("UNSUPPORTED_ENTITY_KIND", str(error), status.HTTP_400_BAD_REQUEST)
    except QbxmlTemplateError as error:
        return _api_error_response("INVALID_REQUEST", str(error), status.HTTP_400_BAD_REQUEST)
    except DurableStoreError as error:
        return _api_error_response("STORE_UNAVAILABLE", str(error), status.HTTP_500_INTERNAL_SERVER_ERROR)

    payload = {
        "status": "queued",
        "entity_kind": kind,
        "intent": intent,
        "queue_size": queue_size,
    }
    return JSONResponse(content=payload, status_code=status.HTTP_202_ACCEPTED)


def _api_error_response(code: str, message: str, status_code: int) -> JSONResponse:
    payload = {
        "status": "error",
        "code": code,
        "message": message,
    }
    return JSONResponse(content=payload, status_code=status_code)
