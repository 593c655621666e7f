"""SOAP endpoint router for Web Connector callbacks."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.concurrency import run_in_threadpool

from app.connector import (
    SOAP_CONTENT_TYPE,
    SessionController,
    SoapEnvelopeError,
    connector_soap_build_fault,
    connector_soap_build_response,
    connector_soap_parse_request,
)
from app.db import DurableStoreError

logger = logging.getLogger(__name__)

CONNECTOR_PATHS = ("/qbwc", "/soap")


def api_create_connector_router(session_controller: SessionController) -> APIRouter:
    """Create router exposing the SOAP callback endpoint.

    Args:
        session_controller: Controller answering callback operations.

    Returns:
        APIRouter: Router exposing `POST /qbwc` and its `/soap` alias.

    Raises:
        ValueError: Raised when session_controller is missing.
    """

    if session_controller is None:
        raise ValueError("session_controller must not be None")

    router = APIRouter(tags=["connector"])

    async def api_connector_soap(request: Request) -> Response:
        """Decode one SOAP envelope, run its callback, and encode the reply.

        Returns:
            Response: SOAP response envelope, or a SOAP Fault with HTTP 500.
        """

        raw_body = await request.body()
        try:
            soap_request = connector_soap_parse_request(raw_body)
            result = await run_in_threadpool(session_controller.connector_invoke, soap_request)
        except SoapEnvelopeError as error:
            logger.warning("Rejected SOAP request: %s", error)
            return _api_soap_fault("soap:Client", str(error))
        except DurableStoreError as error:
            logger.error("SOAP callback failed on durable store: %s", error)
            return _api_soap_fault("soap:Server", str(error))

        return Response(
            content=connector_soap_build_response(soap_request.operation, result),
            status_code=status.HTTP_200_OK,
            media_type=SOAP_CONTENT_TYPE,
        )

    for connector_path in CONNECTOR_PATHS:
        router.add_api_route(connector_path, api_connector_soap, methods=["POST"], include_in_schema=False)

    return router


def _api_soap_fault(fault_code: str, fault_message: str) -> Response:
    return Response(
        content=connector_soap_build_fault(fault_code, fault_message),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        media_type=SOAP_CONTENT_TYPE,
    )
