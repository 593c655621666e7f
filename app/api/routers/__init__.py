"""API router package for endpoint composition."""

from .connector import api_create_connector_router
from .dead_letters import api_create_dead_letter_router
from .entities import api_create_entities_router
from .health import api_create_health_router
from .queue import api_create_queue_router

__all__ = [
	"api_create_connector_router",
	"api_create_dead_letter_router",
	"api_create_entities_router",
	"api_create_health_router",
	"api_create_queue_router",
]
