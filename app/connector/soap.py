"""SOAP 1.1 envelope codec for Web Connector callbacks.

Requests are decoded into an operation name plus flat string parameters.
Responses wrap the callback result in `<{operation}Response>` /
`<{operation}Result>` elements in the Web Connector service namespace; list
results (the authenticate pair) are rendered as repeated `<string>` children.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import xml.etree.ElementTree as element_tree

SOAP_ENVELOPE_NAMESPACE = "http://schemas.xmlsoap.org/soap/envelope/"
QBWC_NAMESPACE = "http://developer.intuit.com/"
SOAP_CONTENT_TYPE = "text/xml; charset=utf-8"

_ENVELOPE_TAG = f"{{{SOAP_ENVELOPE_NAMESPACE}}}Envelope"
_BODY_TAG = f"{{{SOAP_ENVELOPE_NAMESPACE}}}Body"

element_tree.register_namespace("soap", SOAP_ENVELOPE_NAMESPACE)
element_tree.register_namespace("qbwc", QBWC_NAMESPACE)


class SoapEnvelopeError(ValueError):
    """Raised when an inbound SOAP envelope cannot be decoded."""


class UnknownSoapOperationError(SoapEnvelopeError):
    """Raised when an envelope names an operation the service does not expose."""


@dataclass(frozen=True)
class SoapRequest:
    """Decoded SOAP callback invocation.

    Attributes:
        operation: Local name of the first Body child (`sendRequestXML`).
        parameters: Local parameter names mapped to their text content.
    """

    operation: str
    parameters: dict[str, str] = field(default_factory=dict)

    def connector_parameter(self, name: str) -> str:
        return self.parameters.get(name, "")


def connector_soap_parse_request(raw_body: bytes | str) -> SoapRequest:
    """Decode one SOAP 1.1 request envelope.

    Args:
        raw_body: Raw HTTP request body.

    Returns:
        SoapRequest: Operation name and parameters.

    Raises:
        SoapEnvelopeError: Raised when the body is not a SOAP envelope with an operation.
    """

    if not raw_body or not raw_body.strip():
        raise SoapEnvelopeError("empty SOAP request body")

    try:
        envelope = element_tree.fromstring(raw_body)
    except element_tree.ParseError as error:
        raise SoapEnvelopeError(f"malformed SOAP envelope: {error}") from error

    if envelope.tag != _ENVELOPE_TAG:
        raise SoapEnvelopeError(f"unexpected root element: {_connector_local_name(envelope.tag)}")

    body = envelope.find(_BODY_TAG)
    if body is None:
        raise SoapEnvelopeError("SOAP envelope has no Body")

    operation_element = next(iter(body), None)
    if operation_element is None:
        raise SoapEnvelopeError("SOAP Body has no operation element")

    parameters = {
        _connector_local_name(parameter.tag): parameter.text or ""
        for parameter in operation_element
    }
    return SoapRequest(operation=_connector_local_name(operation_element.tag), parameters=parameters)


def connector_soap_build_response(operation: str, result: str | int | list[str]) -> str:
    """Render one callback result as a SOAP response envelope.

    Args:
        operation: Callback operation name.
        result: Scalar result, or list of strings for array results.

    Returns:
        str: Serialized SOAP envelope.
    """

    envelope, body = _connector_soap_envelope()
    response_element = element_tree.SubElement(body, f"{{{QBWC_NAMESPACE}}}{operation}Response")
    result_element = element_tree.SubElement(response_element, f"{{{QBWC_NAMESPACE}}}{operation}Result")
    if isinstance(result, list):
        for item in result:
            element_tree.SubElement(result_element, f"{{{QBWC_NAMESPACE}}}string").text = item
    else:
        result_element.text = str(result)
    return _connector_soap_render(envelope)


def connector_soap_build_fault(fault_code: str, fault_message: str) -> str:
    """Render a SOAP 1.1 Fault envelope.

    Args:
        fault_code: `soap:Client` for caller errors, `soap:Server` otherwise.
        fault_message: Human-readable fault string.

    Returns:
        str: Serialized SOAP Fault envelope.
    """

    envelope, body = _connector_soap_envelope()
    fault_element = element_tree.SubElement(body, f"{{{SOAP_ENVELOPE_NAMESPACE}}}Fault")
    element_tree.SubElement(fault_element, "faultcode").text = fault_code
    element_tree.SubElement(fault_element, "faultstring").text = fault_message
    return _connector_soap_render(envelope)


def _connector_soap_envelope() -> tuple[element_tree.Element, element_tree.Element]:
    envelope = element_tree.Element(_ENVELOPE_TAG)
    body = element_tree.SubElement(envelope, _BODY_TAG)
    return envelope, body


def _connector_soap_render(envelope: element_tree.Element) -> str:
    serialized = element_tree.tostring(envelope, encoding="unicode")
    return f'<?xml version="1.0" encoding="utf-8"?>\n{serialized}'


def _connector_local_name(tag: str) -> str:
    return tag.rsplit("}", maxsplit=1)[-1]
