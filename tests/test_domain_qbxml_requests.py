"""Regression tests for qbXML request document builders."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
import xml.etree.ElementTree as element_tree

import pytest

from app.domain import (
    QbxmlTemplateError,
    domain_entity_resolve,
    domain_qbxml_build_create,
    domain_qbxml_build_default_query,
    domain_qbxml_build_delete,
    domain_qbxml_build_point_query,
)


def _message(document: str) -> element_tree.Element:
    """Return the single request message inside a qbXML document."""

    root = element_tree.fromstring(document)
    messages = root.find("QBXMLMsgsRq")
    assert messages is not None
    assert messages.get("onError") == "stopOnError"
    children = list(messages)
    assert len(children) == 1
    return children[0]


def test_domain_qbxml_default_query_is_bounded_and_requests_timestamps() -> None:
    """Build the default sync query with cap, timestamps, and version header.

    Returns:
        None: Assertions validate document shape.

    Raises:
        AssertionError: Raised when the document drifts from the connector contract.
    """

    document = domain_qbxml_build_default_query(domain_entity_resolve("invoice"))

    assert document.startswith('<?xml version="1.0"?>\n<?qbxml version="13.0"?>\n<QBXML>')
    message = _message(document)
    assert message.tag == "InvoiceQueryRq"
    assert message.findtext("MaxReturned") == "20"
    assert [element.text for element in message.findall("IncludeRetElement")] == ["TimeCreated", "TimeModified"]


def test_domain_qbxml_default_query_honours_overrides() -> None:
    document = domain_qbxml_build_default_query(
        domain_entity_resolve("journal_entry"),
        max_returned=5,
        qbxml_version="16.0",
    )

    assert '<?qbxml version="16.0"?>' in document
    assert _message(document).findtext("MaxReturned") == "5"


def test_domain_qbxml_default_query_rejects_non_positive_cap() -> None:
    with pytest.raises(ValueError, match="max_returned"):
        domain_qbxml_build_default_query(domain_entity_resolve("bill"), max_returned=0)


def test_domain_qbxml_point_query_uses_identifier_kind() -> None:
    transaction_message = _message(domain_qbxml_build_point_query(domain_entity_resolve("bill"), " 42-1 "))
    list_message = _message(domain_qbxml_build_point_query(domain_entity_resolve("customer"), "80000001"))

    assert transaction_message.tag == "BillQueryRq"
    assert transaction_message.findtext("TxnID") == "42-1"
    assert list_message.tag == "CustomerQueryRq"
    assert list_message.findtext("ListID") == "80000001"


def test_domain_qbxml_point_query_rejects_blank_identifier() -> None:
    with pytest.raises(QbxmlTemplateError, match="record_id"):
        domain_qbxml_build_point_query(domain_entity_resolve("invoice"), "  ")


def test_domain_qbxml_delete_distinguishes_transactions_from_lists() -> None:
    transaction_delete = _message(domain_qbxml_build_delete(domain_entity_resolve("payment"), "P-1"))
    list_delete = _message(domain_qbxml_build_delete(domain_entity_resolve("vendor"), "V-1"))

    assert transaction_delete.tag == "TxnDelRq"
    assert transaction_delete.findtext("TxnDelType") == "ReceivePayment"
    assert transaction_delete.findtext("TxnID") == "P-1"
    assert list_delete.tag == "ListDelRq"
    assert list_delete.findtext("ListDelType") == "Vendor"
    assert list_delete.findtext("ListID") == "V-1"


def test_domain_qbxml_create_invoice_orders_header_before_lines() -> None:
    """Emit invoice header elements in qbXML order followed by item lines.

    Returns:
        None: Assertions validate element order and formatting.

    Raises:
        AssertionError: Raised when element order or value formatting is wrong.
    """

    document = domain_qbxml_build_create(
        domain_entity_resolve("invoice"),
        {
            "counterpart": "Acme Corp",
            "txn_date": date(2026, 10, 18),
            "ref_number": "INV-2001",
            "memo": "October services",
            "lines": [
                {"item": "Consulting", "description": "Design review", "quantity": Decimal("2"), "rate": "150"},
            ],
        },
    )

    message = _message(document)
    assert message.tag == "InvoiceAddRq"
    invoice_add = message.find("InvoiceAdd")
    assert invoice_add is not None
    assert [child.tag for child in invoice_add] == ["CustomerRef", "TxnDate", "RefNumber", "Memo", "InvoiceLineAdd"]
    assert invoice_add.findtext("CustomerRef/FullName") == "Acme Corp"
    assert invoice_add.findtext("TxnDate") == "2026-10-18"
    line = invoice_add.find("InvoiceLineAdd")
    assert line is not None
    assert line.findtext("ItemRef/FullName") == "Consulting"
    assert line.findtext("Desc") == "Design review"
    assert line.findtext("Quantity") == "2"
    assert line.findtext("Rate") == "150.00"


def test_domain_qbxml_create_payment_formats_total_amount() -> None:
    document = domain_qbxml_build_create(
        domain_entity_resolve("payment"),
        {"counterpart": "Acme Corp", "txn_date": "2026-10-18", "amount": "99.5"},
    )

    payment_add = _message(document).find("ReceivePaymentAdd")
    assert payment_add is not None
    assert payment_add.findtext("TotalAmount") == "99.50"


def test_domain_qbxml_create_journal_entry_splits_debit_and_credit_lines() -> None:
    document = domain_qbxml_build_create(
        domain_entity_resolve("journal_entry"),
        {
            "txn_date": "2026-10-18",
            "lines": [
                {"account": "Checking", "amount": "10", "side": "debit"},
                {"account": "Sales", "amount": "10", "side": "credit", "description": "reclass"},
            ],
        },
    )

    journal_add = _message(document).find("JournalEntryAdd")
    assert journal_add is not None
    assert journal_add.findtext("JournalDebitLine/AccountRef/FullName") == "Checking"
    assert journal_add.findtext("JournalCreditLine/AccountRef/FullName") == "Sales"
    assert journal_add.findtext("JournalCreditLine/Amount") == "10.00"
    assert journal_add.findtext("JournalCreditLine/Memo") == "reclass"


def test_domain_qbxml_create_customer_uses_list_fields() -> None:
    document = domain_qbxml_build_create(
        domain_entity_resolve("customer"),
        {"name": "Initech", "company_name": "Initech LLC", "email": "ap@initech.example"},
    )

    customer_add = _message(document).find("CustomerAdd")
    assert customer_add is not None
    assert [child.tag for child in customer_add] == ["Name", "CompanyName", "Email"]


def test_domain_qbxml_create_escapes_caller_text() -> None:
    document = domain_qbxml_build_create(domain_entity_resolve("vendor"), {"name": "Smith & <Sons>"})

    assert "Smith &amp; &lt;Sons&gt;" in document
    assert _message(document).findtext("VendorAdd/Name") == "Smith & <Sons>"


@pytest.mark.parametrize(
    ("kind", "create_fields", "message"),
    [
        ("invoice", {"txn_date": "2026-10-18", "lines": [{"item": "A"}]}, "counterpart"),
        ("customer", {"company_name": "Nameless"}, "name"),
        ("payment", {"counterpart": "Acme", "txn_date": "2026-10-18"}, "amount"),
        ("bill", {"counterpart": "Supplier", "txn_date": "2026-10-18", "lines": []}, "lines"),
    ],
)
def test_domain_qbxml_create_rejects_missing_required_fields(kind: str, create_fields: dict, message: str) -> None:
    with pytest.raises(QbxmlTemplateError, match=message):
        domain_qbxml_build_create(domain_entity_resolve(kind), create_fields)


def test_domain_qbxml_create_rejects_credit_lines_outside_journal_entries() -> None:
    with pytest.raises(QbxmlTemplateError, match="credit side"):
        domain_qbxml_build_create(
            domain_entity_resolve("deposit"),
            {"account": "Checking", "txn_date": "2026-10-18", "lines": [{"account": "Sales", "amount": 5, "side": "credit"}]},
        )


def test_domain_qbxml_create_rejects_malformed_date() -> None:
    with pytest.raises(QbxmlTemplateError, match="txn_date"):
        domain_qbxml_build_create(
            domain_entity_resolve("payment"),
            {"counterpart": "Acme", "txn_date": "18/10/2026", "amount": "1"},
        )
