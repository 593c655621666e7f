"""Session controller answering the Web Connector callback protocol."""

from __future__ import annotations

import logging
import secrets
from typing import Callable

from app.domain import QbxmlParseError, domain_qbxml_parse_answer
from app.jobs import AnswerProcessingWorker, RequestScheduler

from .soap import SoapRequest, UnknownSoapOperationError

logger = logging.getLogger(__name__)

RECEIVE_RESPONSE_PERCENT_DONE = 100
CLOSE_CONNECTION_MESSAGE = "OK"
CONNECTION_ERROR_RESULT = "done"
INVALID_USER_MARKER = "nvu"

CredentialValidator = Callable[[str, str], bool]


def connector_build_credential_validator(username: str, password: str) -> CredentialValidator:
    """Build a constant-time credential check for the connector login.

    An empty configured password accepts any password for the configured
    username.

    Args:
        username: Expected connector username.
        password: Expected connector password, or empty to skip the password check.

    Returns:
        CredentialValidator: Callable returning True for accepted credentials.
    """

    def _validate(candidate_username: str, candidate_password: str) -> bool:
        username_matches = secrets.compare_digest(candidate_username.encode("utf-8"), username.encode("utf-8"))
        if not password:
            return username_matches
        password_matches = secrets.compare_digest(candidate_password.encode("utf-8"), password.encode("utf-8"))
        return username_matches and password_matches

    return _validate


class SessionController:
    """Stateless callback handlers for one Web Connector service.

    Every session reuses the same configured ticket and the controller keeps
    no per-session data beyond the scheduler rotation state.
    """

    def __init__(
        self,
        scheduler: RequestScheduler,
        worker: AnswerProcessingWorker,
        session_ticket: str,
        credential_validator: CredentialValidator,
        server_version: str = "1.0",
        client_version: str = "1.0",
    ):
        """Initialize session controller.

        Args:
            scheduler: Scheduler producing the next request payload.
            worker: Background answer processing worker.
            session_ticket: Ticket returned to authenticated connectors.
            credential_validator: Connector credential check.
            server_version: `serverVersion` callback result.
            client_version: `clientVersion` callback result.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are missing or the ticket is blank.
        """

        if scheduler is None:
            raise ValueError("scheduler must not be None")
        if worker is None:
            raise ValueError("worker must not be None")
        if credential_validator is None:
            raise ValueError("credential_validator must not be None")
        if not session_ticket or not session_ticket.strip():
            raise ValueError("session_ticket must not be blank")

        self._scheduler = scheduler
        self._worker = worker
        self._session_ticket = session_ticket
        self._credential_validator = credential_validator
        self._server_version = server_version
        self._client_version = client_version

    def server_version(self) -> str:
        return self._server_version

    def client_version(self, connector_version: str = "") -> str:
        logger.info("Web Connector client version %s", connector_version or "unknown")
        return self._client_version

    def authenticate(self, username: str, password: str) -> list[str]:
        """Check connector credentials.

        Returns:
            list[str]: `[ticket, ""]` when accepted, `["", "nvu"]` otherwise.
        """

        if self._credential_validator(username or "", password or ""):
            logger.info("Authenticating SOAP call for %s", username)
            return [self._session_ticket, ""]
        logger.warning("Rejected Web Connector credentials for %s", username)
        return ["", INVALID_USER_MARKER]

    def send_request(self) -> str:
        """Return the next qbXML request; never empty.

        Raises:
            DurableStoreError: Raised when the request queue cannot be read.
        """

        scheduled_request = self._scheduler.job_next_request()
        logger.info("Sending QB request from %s", scheduled_request.source)
        return scheduled_request.payload

    def receive_response(self, answer: str, hresult: str = "", message: str = "") -> int:
        """Accept one connector answer and hand it to the worker.

        The answer is parsed synchronously; archiving, normalization, and
        dispatch happen on the worker thread. The reply is always 100, so the
        connector never asks for another request in the same session.

        Args:
            answer: Raw qbXML answer text.
            hresult: Connector error code, empty on success.
            message: Connector error message, empty on success.

        Returns:
            int: Percent-done value, always 100.
        """

        if hresult:
            logger.warning("Web Connector reported error %s: %s", hresult, message)
        try:
            answer_root = domain_qbxml_parse_answer(answer)
        except QbxmlParseError as error:
            logger.error("XML parse error: %s", error)
            return RECEIVE_RESPONSE_PERCENT_DONE

        self._worker.job_submit(answer_root)
        return RECEIVE_RESPONSE_PERCENT_DONE

    def close_connection(self) -> str:
        logger.info("Web Connector closed the session")
        return CLOSE_CONNECTION_MESSAGE

    def get_last_error(self) -> str:
        return ""

    def connection_error(self, hresult: str = "", message: str = "") -> str:
        logger.error("Web Connector connection error %s: %s", hresult, message)
        return CONNECTION_ERROR_RESULT

    def connector_invoke(self, soap_request: SoapRequest) -> str | int | list[str]:
        """Route one decoded SOAP request to its callback handler.

        Args:
            soap_request: Decoded SOAP operation and parameters.

        Returns:
            str | int | list[str]: Callback result for the response envelope.

        Raises:
            UnknownSoapOperationError: Raised when the operation is not exposed.
            DurableStoreError: Raised when a store read fails during `sendRequestXML`.
        """

        operation = soap_request.operation
        parameter = soap_request.connector_parameter
        if operation == "serverVersion":
            return self.server_version()
        if operation == "clientVersion":
            return self.client_version(parameter("strVersion"))
        if operation == "authenticate":
            return self.authenticate(parameter("strUserName"), parameter("strPassword"))
        if operation == "sendRequestXML":
            return self.send_request()
        if operation == "receiveResponseXML":
            return self.receive_response(parameter("response"), parameter("hresult"), parameter("message"))
        if operation == "closeConnection":
            return self.close_connection()
        if operation == "getLastError":
            return self.get_last_error()
        if operation == "connectionError":
            return self.connection_error(parameter("hresult"), parameter("message"))
        raise UnknownSoapOperationError(f"unsupported SOAP operation: {operation}")
