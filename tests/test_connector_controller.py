"""Regression tests for Web Connector session callbacks."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as element_tree

import pytest

from app.connector import (
    SessionController,
    SoapRequest,
    UnknownSoapOperationError,
    connector_build_credential_validator,
)
from app.db import DurableStoreError
from app.jobs import ScheduledRequest


class _SchedulerStub:
    """Scheduler double returning a fixed payload or raising a store error."""

    def __init__(self, fail: bool = False):
        self.calls = 0
        self._fail = fail

    def job_next_request(self) -> ScheduledRequest:
        self.calls += 1
        if self._fail:
            raise DurableStoreError("request queue dequeue failed")
        return ScheduledRequest(payload="<QBXML>next</QBXML>", source="default", entity_kind="invoice")


class _WorkerStub:
    """Worker double collecting submitted answer roots."""

    def __init__(self):
        self.submitted: list[element_tree.Element] = []

    def job_submit(self, answer_root: element_tree.Element) -> None:
        self.submitted.append(answer_root)


def _build_controller(
    scheduler: _SchedulerStub | None = None,
    worker: _WorkerStub | None = None,
    password: str = "",
) -> SessionController:
    return SessionController(
        scheduler=scheduler or _SchedulerStub(),
        worker=worker or _WorkerStub(),
        session_ticket="ticket-1",
        credential_validator=connector_build_credential_validator("qbwc", password),
        server_version="2.1",
        client_version="",
    )


def test_connector_controller_version_callbacks_return_configured_strings() -> None:
    controller = _build_controller()

    assert controller.server_version() == "2.1"
    assert controller.client_version("2.3.0.207") == ""


def test_connector_controller_authenticate_accepts_valid_credentials() -> None:
    controller = _build_controller(password="secret")

    assert controller.authenticate("qbwc", "secret") == ["ticket-1", ""]


@pytest.mark.parametrize(("username", "password"), [("qbwc", "wrong"), ("intruder", "secret"), ("", "")])
def test_connector_controller_authenticate_rejects_invalid_credentials(username: str, password: str) -> None:
    controller = _build_controller(password="secret")

    assert controller.authenticate(username, password) == ["", "nvu"]


def test_connector_controller_blank_configured_password_checks_username_only() -> None:
    controller = _build_controller(password="")

    assert controller.authenticate("qbwc", "anything") == ["ticket-1", ""]
    assert controller.authenticate("someone-else", "anything") == ["", "nvu"]


def test_connector_controller_send_request_returns_scheduler_payload() -> None:
    scheduler = _SchedulerStub()

    assert _build_controller(scheduler=scheduler).send_request() == "<QBXML>next</QBXML>"
    assert scheduler.calls == 1


def test_connector_controller_receive_response_submits_parsed_answer(invoice_answer_xml: str) -> None:
    """Hand well-formed answers to the worker and report 100 percent done.

    Args:
        invoice_answer_xml: Invoice answer fixture.

    Returns:
        None: Assertions validate submission and reply value.

    Raises:
        AssertionError: Raised when the answer is not submitted.
    """

    worker = _WorkerStub()

    assert _build_controller(worker=worker).receive_response(invoice_answer_xml) == 100
    assert len(worker.submitted) == 1
    assert worker.submitted[0].tag == "QBXML"


def test_connector_controller_receive_response_logs_parse_failure(caplog: pytest.LogCaptureFixture) -> None:
    worker = _WorkerStub()

    with caplog.at_level(logging.ERROR, logger="app.connector.controller"):
        percent_done = _build_controller(worker=worker).receive_response("<QBXML><broken>")

    assert percent_done == 100
    assert worker.submitted == []
    assert "XML parse error" in caplog.text


def test_connector_controller_close_and_error_callbacks() -> None:
    controller = _build_controller()

    assert controller.close_connection() == "OK"
    assert controller.get_last_error() == ""
    assert controller.connection_error("0x80040408", "Could not start QuickBooks") == "done"


def test_connector_controller_invoke_routes_operations() -> None:
    controller = _build_controller(password="secret")

    assert controller.connector_invoke(SoapRequest(operation="serverVersion")) == "2.1"
    assert controller.connector_invoke(
        SoapRequest(operation="authenticate", parameters={"strUserName": "qbwc", "strPassword": "secret"})
    ) == ["ticket-1", ""]
    assert controller.connector_invoke(SoapRequest(operation="sendRequestXML", parameters={"ticket": "ticket-1"})) == (
        "<QBXML>next</QBXML>"
    )
    assert controller.connector_invoke(SoapRequest(operation="closeConnection")) == "OK"


def test_connector_controller_invoke_rejects_unknown_operation() -> None:
    with pytest.raises(UnknownSoapOperationError, match="interactiveUrl"):
        _build_controller().connector_invoke(SoapRequest(operation="interactiveUrl"))


def test_connector_controller_send_request_propagates_store_errors() -> None:
    with pytest.raises(DurableStoreError):
        _build_controller(scheduler=_SchedulerStub(fail=True)).send_request()


def test_connector_controller_rejects_blank_ticket() -> None:
    with pytest.raises(ValueError, match="session_ticket"):
        SessionController(
            scheduler=_SchedulerStub(),
            worker=_WorkerStub(),
            session_ticket=" ",
            credential_validator=connector_build_credential_validator("qbwc", ""),
        )
