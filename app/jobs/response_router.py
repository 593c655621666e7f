"""Classification of parsed connector answers to entity kinds."""

from __future__ import annotations

import xml.etree.ElementTree as element_tree

from app.domain import ENTITY_REGISTRY, EntityDefinition, domain_qbxml_response_container

from .interfaces import ClassificationResult


def job_classify_answer(
    answer_root: element_tree.Element,
    registry: tuple[EntityDefinition, ...] = ENTITY_REGISTRY,
) -> ClassificationResult:
    """Classify a parsed answer by the response keys it contains.

    The registry is scanned in declaration order and every matching entry
    overwrites the previous match, so when several response keys co-occur the
    entry declared last wins. When nothing matches, the first registry entry is
    returned with an empty match set; callers must check `is_classified`.

    Args:
        answer_root: Parsed answer root element.
        registry: Entity registry in tie-break order.

    Returns:
        ClassificationResult: Winning definition and full match set.

    Raises:
        ValueError: Raised when registry is empty.
    """

    if not registry:
        raise ValueError("registry must not be empty")

    response_container = domain_qbxml_response_container(answer_root)
    matched_definition = registry[0]
    matched_kinds: list[str] = []
    if response_container is not None:
        for definition in registry:
            if response_container.find(definition.response_key) is not None:
                matched_definition = definition
                matched_kinds.append(definition.kind)

    return ClassificationResult(definition=matched_definition, matched_kinds=tuple(matched_kinds))
