"""Web Connector session protocol package."""

from .controller import (
	CLOSE_CONNECTION_MESSAGE,
	CONNECTION_ERROR_RESULT,
	INVALID_USER_MARKER,
	RECEIVE_RESPONSE_PERCENT_DONE,
	CredentialValidator,
	SessionController,
	connector_build_credential_validator,
)
from .soap import (
	QBWC_NAMESPACE,
	SOAP_CONTENT_TYPE,
	SOAP_ENVELOPE_NAMESPACE,
	SoapEnvelopeError,
	SoapRequest,
	UnknownSoapOperationError,
	connector_soap_build_fault,
	connector_soap_build_response,
	connector_soap_parse_request,
)

__all__ = [
	"CLOSE_CONNECTION_MESSAGE",
	"CONNECTION_ERROR_RESULT",
	"INVALID_USER_MARKER",
	"QBWC_NAMESPACE",
	"RECEIVE_RESPONSE_PERCENT_DONE",
	"SOAP_CONTENT_TYPE",
	"SOAP_ENVELOPE_NAMESPACE",
	"CredentialValidator",
	"SessionController",
	"SoapEnvelopeError",
	"SoapRequest",
	"UnknownSoapOperationError",
	"connector_build_credential_validator",
	"connector_soap_build_fault",
	"connector_soap_build_response",
	"connector_soap_parse_request",
]
