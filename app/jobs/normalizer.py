"""Field normalization of raw answer records into canonical records."""

from __future__ import annotations

from typing import Any
import xml.etree.ElementTree as element_tree

from app.domain import EntityDefinition, domain_qbxml_response_container


def job_normalize_records(
    definition: EntityDefinition,
    answer_root: element_tree.Element,
) -> list[dict[str, Any]]:
    """Extract canonical records for one entity kind from a parsed answer.

    Records are read from `QBXMLMsgsRs/<ResponseKey>/<RecordTag>`; a missing
    path yields an empty list. Each record gets every schema field: the text at
    the source path, or the declared default when absent. Boolean fields are
    true only for the literal source text `"true"`.

    Args:
        definition: Entity definition whose schema applies.
        answer_root: Parsed answer root element.

    Returns:
        list[dict[str, Any]]: Normalized records in source order.
    """

    response_container = domain_qbxml_response_container(answer_root)
    if response_container is None:
        return []

    normalized_records: list[dict[str, Any]] = []
    for response_element in response_container.findall(definition.response_key):
        for record_element in response_element.findall(definition.record_tag):
            normalized_records.append(_job_normalize_record(definition, record_element))
    return normalized_records


def job_filter_flagged_records(records: list[dict[str, Any]], flag_field: str) -> list[dict[str, Any]]:
    """Return records whose boolean flag field is set, preserving order."""

    return [record for record in records if record.get(flag_field) is True]


def _job_normalize_record(definition: EntityDefinition, record_element: element_tree.Element) -> dict[str, Any]:
    normalized_record: dict[str, Any] = {}
    for field_spec in definition.fields:
        source_value = record_element.findtext(field_spec.source_path)
        if source_value is None:
            source_value = field_spec.default

        if field_spec.boolean:
            normalized_record[field_spec.name] = source_value == "true"
        else:
            normalized_record[field_spec.name] = source_value
    return normalized_record
