"""Regression tests for qbXML answer parsing and archive-shape conversion."""

from __future__ import annotations

import json

import pytest

from app.domain import (
    QbxmlParseError,
    domain_qbxml_element_to_dict,
    domain_qbxml_parse_answer,
    domain_qbxml_response_container,
)


def test_domain_qbxml_parse_answer_returns_root(invoice_answer_xml: str) -> None:
    answer_root = domain_qbxml_parse_answer(invoice_answer_xml)

    assert answer_root.tag == "QBXML"
    container = domain_qbxml_response_container(answer_root)
    assert container is not None
    assert container.find("InvoiceQueryRs") is not None


@pytest.mark.parametrize("raw_answer", ["", "   ", "<QBXML><QBXMLMsgsRs>", "not xml at all"])
def test_domain_qbxml_parse_answer_rejects_unparseable_text(raw_answer: str) -> None:
    with pytest.raises(QbxmlParseError):
        domain_qbxml_parse_answer(raw_answer)


def test_domain_qbxml_response_container_absent_for_foreign_root() -> None:
    assert domain_qbxml_response_container(domain_qbxml_parse_answer("<Other><Thing/></Other>")) is None


def test_domain_qbxml_element_to_dict_groups_children_and_keeps_attributes(invoice_answer_xml: str) -> None:
    """Convert answers into the grouped archive shape.

    Returns:
        None: Assertions validate grouping, attribute, and text handling.

    Raises:
        AssertionError: Raised when the archive shape drifts.
    """

    archived = domain_qbxml_element_to_dict(domain_qbxml_parse_answer(invoice_answer_xml))

    query_response = archived["QBXML"]["QBXMLMsgsRs"][0]["InvoiceQueryRs"][0]
    assert query_response["$"]["statusCode"] == "0"
    assert len(query_response["InvoiceRet"]) == 2
    first_invoice = query_response["InvoiceRet"][0]
    assert first_invoice["RefNumber"] == ["INV-1001"]
    assert first_invoice["CustomerRef"] == [{"FullName": ["Acme Corp"]}]
    json.dumps(archived)


def test_domain_qbxml_element_to_dict_keeps_text_beside_attributes() -> None:
    archived = domain_qbxml_element_to_dict(domain_qbxml_parse_answer('<Root><Amount currency="USD">5.00</Amount></Root>'))

    assert archived == {"Root": {"Amount": [{"$": {"currency": "USD"}, "_": "5.00"}]}}
