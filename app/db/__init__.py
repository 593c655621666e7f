"""Database layer package for all SQL and persistence boundaries."""

from .answer_archive import SQLAlchemyAnswerArchiveService
from .dead_letter import SQLAlchemyDeadLetterService
from .health import SQLAlchemyDatabaseHealthService
from .interfaces import (
	AnswerArchivePort,
	ArchivedAnswerRecord,
	DatabaseHealthPort,
	DeadLetterRecord,
	DeadLetterRepositoryPort,
	DurableStoreError,
	RequestQueuePort,
)
from .migrations import db_migrate_to_head
from .request_queue import SQLAlchemyRequestQueueService
from .session import db_create_engine

__all__ = [
	"AnswerArchivePort",
	"ArchivedAnswerRecord",
	"DatabaseHealthPort",
	"DeadLetterRecord",
	"DeadLetterRepositoryPort",
	"DurableStoreError",
	"RequestQueuePort",
	"SQLAlchemyAnswerArchiveService",
	"SQLAlchemyDatabaseHealthService",
	"SQLAlchemyDeadLetterService",
	"SQLAlchemyRequestQueueService",
	"db_create_engine",
	"db_migrate_to_head",
]
