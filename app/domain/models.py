"""Typed domain models shared across runtime layers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
        queue_size: Pending request count when the queue table was readable.
    """

    status: str
    detail: str
    queue_size: int | None = None
