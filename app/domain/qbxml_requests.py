"""qbXML request builders for queries, deletions, and creation templates.

All builders return complete request documents (processing-instruction header
plus one `QBXMLMsgsRq` message) ready to hand to the Web Connector. Element
values are serialized through ElementTree so caller-provided text is escaped.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Final, Mapping
import xml.etree.ElementTree as element_tree

from .entities import EntityDefinition

DEFAULT_QBXML_VERSION: Final[str] = "13.0"
DEFAULT_MAX_RETURNED: Final[int] = 20


class QbxmlTemplateError(ValueError):
    """Raised when creation or point-request input cannot fill a request template."""


def domain_qbxml_build_default_query(
    definition: EntityDefinition,
    max_returned: int = DEFAULT_MAX_RETURNED,
    qbxml_version: str = DEFAULT_QBXML_VERSION,
) -> str:
    """Build the bounded default sync query for one entity kind.

    Args:
        definition: Target entity definition.
        max_returned: Explicit result cap.
        qbxml_version: qbXML version declared in the document header.

    Returns:
        str: Complete qbXML request document.

    Raises:
        ValueError: Raised when max_returned is not positive.
    """

    if max_returned < 1:
        raise ValueError("max_returned must be >= 1")

    query_element = element_tree.Element(definition.query_request)
    _domain_qbxml_add_text(query_element, "MaxReturned", str(max_returned))
    _domain_qbxml_add_text(query_element, "IncludeRetElement", "TimeCreated")
    _domain_qbxml_add_text(query_element, "IncludeRetElement", "TimeModified")
    return _domain_qbxml_render_document(query_element, qbxml_version=qbxml_version)


def domain_qbxml_build_point_query(
    definition: EntityDefinition,
    record_id: str,
    qbxml_version: str = DEFAULT_QBXML_VERSION,
) -> str:
    """Build a query for one record using the kind's identifier element.

    Args:
        definition: Target entity definition.
        record_id: Transaction id or list id value.
        qbxml_version: qbXML version declared in the document header.

    Returns:
        str: Complete qbXML request document.

    Raises:
        QbxmlTemplateError: Raised when record_id is blank.
    """

    normalized_record_id = _domain_qbxml_require_record_id(record_id)
    query_element = element_tree.Element(definition.query_request)
    _domain_qbxml_add_text(query_element, definition.identifier_kind, normalized_record_id)
    return _domain_qbxml_render_document(query_element, qbxml_version=qbxml_version)


def domain_qbxml_build_delete(
    definition: EntityDefinition,
    record_id: str,
    qbxml_version: str = DEFAULT_QBXML_VERSION,
) -> str:
    """Build a transaction-delete or list-delete request for one record.

    Args:
        definition: Target entity definition.
        record_id: Transaction id or list id value.
        qbxml_version: qbXML version declared in the document header.

    Returns:
        str: Complete qbXML request document.

    Raises:
        QbxmlTemplateError: Raised when record_id is blank.
    """

    normalized_record_id = _domain_qbxml_require_record_id(record_id)
    if definition.is_transaction:
        delete_element = element_tree.Element("TxnDelRq")
        _domain_qbxml_add_text(delete_element, "TxnDelType", definition.delete_type)
    else:
        delete_element = element_tree.Element("ListDelRq")
        _domain_qbxml_add_text(delete_element, "ListDelType", definition.delete_type)
    _domain_qbxml_add_text(delete_element, definition.identifier_kind, normalized_record_id)
    return _domain_qbxml_render_document(delete_element, qbxml_version=qbxml_version)


def domain_qbxml_build_create(
    definition: EntityDefinition,
    create_fields: Mapping[str, Any],
    qbxml_version: str = DEFAULT_QBXML_VERSION,
) -> str:
    """Build an add request from the kind's creation template.

    Recognized fields: `counterpart`, `account`, `txn_date`, `ref_number`,
    `memo`, `amount`, `name`, `company_name`, `email`, and `lines` (each line
    may carry `item`, `account`, `description`, `quantity`, `rate`, `amount`,
    and `side` of `debit` or `credit`). Unrecognized fields are ignored.

    Args:
        definition: Target entity definition.
        create_fields: Creation input values.
        qbxml_version: qbXML version declared in the document header.

    Returns:
        str: Complete qbXML request document.

    Raises:
        QbxmlTemplateError: Raised when required fields are missing or malformed.
    """

    template = definition.create
    missing_fields = [
        field_name
        for field_name in template.required_fields
        if _domain_qbxml_is_blank(create_fields.get(field_name))
    ]
    if missing_fields:
        raise QbxmlTemplateError(
            f"{definition.kind} creation is missing required fields: {', '.join(missing_fields)}"
        )

    add_request = element_tree.Element(definition.add_request)
    add_element = element_tree.SubElement(add_request, definition.add_element)

    if not definition.is_transaction:
        _domain_qbxml_add_text(add_element, "Name", _domain_qbxml_text(create_fields.get("name")))
        _domain_qbxml_add_optional(add_element, "CompanyName", create_fields.get("company_name"))
        _domain_qbxml_add_optional(add_element, "Email", create_fields.get("email"))
        return _domain_qbxml_render_document(add_request, qbxml_version=qbxml_version)

    if template.counterpart_ref is not None:
        _domain_qbxml_add_reference(add_element, template.counterpart_ref, create_fields.get("counterpart"))
    if "txn_date" in template.required_fields or create_fields.get("txn_date") is not None:
        _domain_qbxml_add_text(add_element, "TxnDate", _domain_qbxml_format_date(create_fields.get("txn_date")))
    if template.account_ref is not None:
        _domain_qbxml_add_reference(add_element, template.account_ref, create_fields.get("account"))
    _domain_qbxml_add_optional(add_element, "RefNumber", create_fields.get("ref_number"))
    if template.amount_element is not None:
        _domain_qbxml_add_text(
            add_element,
            template.amount_element,
            _domain_qbxml_format_amount(create_fields.get("amount"), "amount"),
        )
    _domain_qbxml_add_optional(add_element, "Memo", create_fields.get("memo"))

    if template.line_element is not None:
        lines = create_fields.get("lines") or []
        if not isinstance(lines, (list, tuple)):
            raise QbxmlTemplateError("lines must be a list")
        for line_index, line in enumerate(lines, start=1):
            _domain_qbxml_add_line(add_element, definition, line, line_index)

    return _domain_qbxml_render_document(add_request, qbxml_version=qbxml_version)


def _domain_qbxml_add_line(
    parent: element_tree.Element,
    definition: EntityDefinition,
    line: Mapping[str, Any],
    line_index: int,
) -> None:
    """Append one line item element using the kind's line template."""

    template = definition.create
    if not isinstance(line, Mapping):
        raise QbxmlTemplateError(f"line {line_index} must be an object")

    side = str(line.get("side") or "debit").strip().lower()
    if side not in ("debit", "credit"):
        raise QbxmlTemplateError(f"line {line_index} side must be debit or credit")
    line_element_name = template.line_element
    if side == "credit":
        if template.credit_line_element is None:
            raise QbxmlTemplateError(f"{definition.kind} lines do not support credit side")
        line_element_name = template.credit_line_element

    line_element = element_tree.SubElement(parent, str(line_element_name))
    if template.line_item_ref == "ItemRef":
        if _domain_qbxml_is_blank(line.get("item")):
            raise QbxmlTemplateError(f"line {line_index} requires item")
        _domain_qbxml_add_reference(line_element, "ItemRef", line.get("item"))
        _domain_qbxml_add_optional(line_element, "Desc", line.get("description"))
        if line.get("quantity") is not None:
            _domain_qbxml_add_text(line_element, "Quantity", _domain_qbxml_format_quantity(line.get("quantity")))
        if line.get("rate") is not None:
            _domain_qbxml_add_text(line_element, "Rate", _domain_qbxml_format_amount(line.get("rate"), "rate"))
        if line.get("amount") is not None:
            _domain_qbxml_add_text(line_element, "Amount", _domain_qbxml_format_amount(line.get("amount"), "amount"))
        return

    if _domain_qbxml_is_blank(line.get("account")):
        raise QbxmlTemplateError(f"line {line_index} requires account")
    _domain_qbxml_add_reference(line_element, "AccountRef", line.get("account"))
    _domain_qbxml_add_text(line_element, "Amount", _domain_qbxml_format_amount(line.get("amount"), "amount"))
    _domain_qbxml_add_optional(line_element, "Memo", line.get("description"))


def _domain_qbxml_render_document(message: element_tree.Element, qbxml_version: str) -> str:
    """Wrap one request message into a full qbXML document string."""

    root = element_tree.Element("QBXML")
    messages = element_tree.SubElement(root, "QBXMLMsgsRq", {"onError": "stopOnError"})
    messages.append(message)
    body = element_tree.tostring(root, encoding="unicode")
    return f'<?xml version="1.0"?>\n<?qbxml version="{qbxml_version}"?>\n{body}'


def _domain_qbxml_add_text(parent: element_tree.Element, tag: str, value: str) -> element_tree.Element:
    child = element_tree.SubElement(parent, tag)
    child.text = value
    return child


def _domain_qbxml_add_optional(parent: element_tree.Element, tag: str, value: object | None) -> None:
    if _domain_qbxml_is_blank(value):
        return
    _domain_qbxml_add_text(parent, tag, _domain_qbxml_text(value))


def _domain_qbxml_add_reference(parent: element_tree.Element, tag: str, full_name: object | None) -> None:
    reference = element_tree.SubElement(parent, tag)
    _domain_qbxml_add_text(reference, "FullName", _domain_qbxml_text(full_name))


def _domain_qbxml_text(value: object | None) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _domain_qbxml_is_blank(value: object | None) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _domain_qbxml_require_record_id(record_id: str) -> str:
    normalized_record_id = (record_id or "").strip()
    if not normalized_record_id:
        raise QbxmlTemplateError("record_id must not be blank")
    return normalized_record_id


def _domain_qbxml_format_date(value: object | None) -> str:
    """Format a date input as qbXML `YYYY-MM-DD`.

    Raises:
        QbxmlTemplateError: Raised when value is not a date or ISO date string.
    """

    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(_domain_qbxml_text(value)).isoformat()
    except ValueError as error:
        raise QbxmlTemplateError(f"txn_date must be an ISO date, got {value!r}") from error


def _domain_qbxml_format_amount(value: object | None, field_name: str) -> str:
    """Format a monetary input with two decimal places.

    Raises:
        QbxmlTemplateError: Raised when value is missing or not numeric.
    """

    try:
        amount = Decimal(_domain_qbxml_text(value))
    except InvalidOperation as error:
        raise QbxmlTemplateError(f"{field_name} must be numeric, got {value!r}") from error
    if not amount.is_finite():
        raise QbxmlTemplateError(f"{field_name} must be finite, got {value!r}")
    return f"{amount:.2f}"


def _domain_qbxml_format_quantity(value: object | None) -> str:
    try:
        quantity = Decimal(_domain_qbxml_text(value))
    except InvalidOperation as error:
        raise QbxmlTemplateError(f"quantity must be numeric, got {value!r}") from error
    if not quantity.is_finite():
        raise QbxmlTemplateError(f"quantity must be finite, got {value!r}")
    return format(quantity.normalize(), "f")


__all__ = [
    "DEFAULT_MAX_RETURNED",
    "DEFAULT_QBXML_VERSION",
    "QbxmlTemplateError",
    "domain_qbxml_build_create",
    "domain_qbxml_build_default_query",
    "domain_qbxml_build_delete",
    "domain_qbxml_build_point_query",
]
