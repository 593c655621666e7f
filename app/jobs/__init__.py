"""Job layer package for scheduling, answer processing, and write boundaries."""

from .answer_pipeline import AnswerProcessingWorker
from .dispatcher import WebhookDispatcher
from .interfaces import (
	AnswerProcessingResult,
	ClassificationResult,
	DispatchOutcome,
	ScheduledRequest,
	SchedulerState,
)
from .normalizer import job_filter_flagged_records, job_normalize_records
from .response_router import job_classify_answer
from .scheduler import RequestScheduler
from .write_boundary import RequestEnqueueService

__all__ = [
	"AnswerProcessingResult",
	"AnswerProcessingWorker",
	"ClassificationResult",
	"DispatchOutcome",
	"RequestEnqueueService",
	"RequestScheduler",
	"ScheduledRequest",
	"SchedulerState",
	"WebhookDispatcher",
	"job_classify_answer",
	"job_filter_flagged_records",
	"job_normalize_records",
]
