"""Typed result contracts for job-layer responsibilities."""

from dataclasses import dataclass, field
from typing import Any

from app.domain import EntityDefinition


@dataclass
class SchedulerState:
    """Rotating position in the default sync cycle.

    Owned by one session controller for the process lifetime and never
    persisted. Only the scheduler mutates it, and only when the queue is empty.

    Attributes:
        index: Registry position of the next default sync.
    """

    index: int = 0


@dataclass(frozen=True)
class ScheduledRequest:
    """Result contract for one scheduler decision.

    Attributes:
        payload: Request payload handed to the connector.
        source: `queue` when dequeued, `default` when produced by rotation.
        entity_kind: Entity kind of a default sync, None for queued payloads.
    """

    payload: str
    source: str
    entity_kind: str | None = None


@dataclass(frozen=True)
class ClassificationResult:
    """Result contract for answer classification.

    Attributes:
        definition: Winning registry entry, or the first entry when nothing matched.
        matched_kinds: Every entity kind whose response key was present, in table order.
    """

    definition: EntityDefinition
    matched_kinds: tuple[str, ...]

    @property
    def is_classified(self) -> bool:
        return bool(self.matched_kinds)

    @property
    def is_ambiguous(self) -> bool:
        return len(self.matched_kinds) > 1


@dataclass(frozen=True)
class DispatchOutcome:
    """Result contract for one webhook dispatch call.

    Attributes:
        event_type: Dispatched event type.
        record_count: Number of records in the event payload.
        status: `delivered`, `dead_lettered`, `dead_letter_failed`, `skipped_empty`, or `skipped_unconfigured`.
        error: Delivery error message for failed attempts.
    """

    event_type: str
    record_count: int
    status: str
    error: str | None = None


@dataclass(frozen=True)
class AnswerProcessingResult:
    """Result contract for one processed connector answer.

    Attributes:
        entity_kind: Entity kind the answer was archived under.
        classified: Whether any response key matched.
        archive_id: Archive row identifier.
        records: Normalized records extracted from the answer.
        dispatches: Dispatch outcomes in call order.
    """

    entity_kind: str
    classified: bool
    archive_id: int
    records: list[dict[str, Any]] = field(default_factory=list)
    dispatches: list[DispatchOutcome] = field(default_factory=list)
