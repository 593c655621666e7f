"""qbXML answer parsing and archive-shape conversion helpers."""

from __future__ import annotations

from typing import Any
import xml.etree.ElementTree as element_tree

RESPONSE_CONTAINER_TAG = "QBXMLMsgsRs"


class QbxmlParseError(ValueError):
    """Raised when a connector answer cannot be parsed as an XML node tree."""


def domain_qbxml_parse_answer(raw_answer: str) -> element_tree.Element:
    """Parse one raw connector answer into an XML node tree.

    Args:
        raw_answer: Raw qbXML answer text as delivered by the connector.

    Returns:
        xml.etree.ElementTree.Element: Parsed root element.

    Raises:
        QbxmlParseError: Raised when the answer is blank or not well-formed XML.
    """

    if raw_answer is None or not raw_answer.strip():
        raise QbxmlParseError("answer is empty")

    try:
        return element_tree.fromstring(raw_answer.strip())
    except element_tree.ParseError as error:
        raise QbxmlParseError(f"answer is not well-formed XML: {error}") from error


def domain_qbxml_response_container(answer_root: element_tree.Element) -> element_tree.Element | None:
    """Return the `QBXMLMsgsRs` container of a parsed answer when present.

    Args:
        answer_root: Parsed answer root element.

    Returns:
        xml.etree.ElementTree.Element | None: Response container or None.
    """

    if answer_root.tag == RESPONSE_CONTAINER_TAG:
        return answer_root
    return answer_root.find(RESPONSE_CONTAINER_TAG)


def domain_qbxml_element_to_dict(answer_root: element_tree.Element) -> dict[str, Any]:
    """Convert a parsed answer into a JSON-serializable nested mapping.

    Child elements are grouped by tag into lists in document order, attributes
    are stored under `"$"`, and text of elements that also carry children or
    attributes is stored under `"_"`. Childless attribute-free elements collapse
    to their text.

    Args:
        answer_root: Parsed answer root element.

    Returns:
        dict[str, Any]: Single-key mapping of root tag to converted content.
    """

    return {answer_root.tag: _domain_qbxml_convert_node(answer_root, is_root=True)}


def _domain_qbxml_convert_node(element: element_tree.Element, is_root: bool = False) -> Any:
    children = list(element)
    text = (element.text or "").strip()
    if not children and not element.attrib and not is_root:
        return text

    node: dict[str, Any] = {}
    if element.attrib:
        node["$"] = dict(element.attrib)
    if text:
        node["_"] = text
    for child in children:
        node.setdefault(child.tag, []).append(_domain_qbxml_convert_node(child))
    return node


__all__ = [
    "RESPONSE_CONTAINER_TAG",
    "QbxmlParseError",
    "domain_qbxml_element_to_dict",
    "domain_qbxml_parse_answer",
    "domain_qbxml_response_container",
]
