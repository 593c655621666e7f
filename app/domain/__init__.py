"""Domain models, entity registry, and qbXML codecs shared across layers."""

from .entities import (
	ENTITY_REGISTRY,
	LIST_ID,
	TXN_ID,
	CreateTemplate,
	EntityDefinition,
	EntityRegistryError,
	FieldSpec,
	UnsupportedEntityKindError,
	domain_entity_kinds,
	domain_entity_resolve,
	domain_entity_validate_registry,
)
from .models import HealthStatus
from .qbxml_parsing import (
	QbxmlParseError,
	domain_qbxml_element_to_dict,
	domain_qbxml_parse_answer,
	domain_qbxml_response_container,
)
from .qbxml_requests import (
	QbxmlTemplateError,
	domain_qbxml_build_create,
	domain_qbxml_build_default_query,
	domain_qbxml_build_delete,
	domain_qbxml_build_point_query,
)

__all__ = [
	"ENTITY_REGISTRY",
	"LIST_ID",
	"TXN_ID",
	"CreateTemplate",
	"EntityDefinition",
	"EntityRegistryError",
	"FieldSpec",
	"HealthStatus",
	"QbxmlParseError",
	"QbxmlTemplateError",
	"UnsupportedEntityKindError",
	"domain_entity_kinds",
	"domain_entity_resolve",
	"domain_entity_validate_registry",
	"domain_qbxml_build_create",
	"domain_qbxml_build_default_query",
	"domain_qbxml_build_delete",
	"domain_qbxml_build_point_query",
	"domain_qbxml_element_to_dict",
	"domain_qbxml_parse_answer",
	"domain_qbxml_response_container",
]
