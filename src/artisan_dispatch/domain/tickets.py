"""Domain models for job tickets."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class TicketStatus(StrEnum):
    """Lifecycle states of a job ticket."""

    SEARCHING = "SEARCHING"
    BROADCASTED = "BROADCASTED"
    FAILED_NO_ARTISANS = "FAILED_NO_ARTISANS"
    PENDING_CLIENT_APPROVAL = "PENDING_CLIENT_APPROVAL"
    MATCHED = "MATCHED"
    PENDING_VERIFICATION = "PENDING_VERIFICATION"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    DISPUTED = "DISPUTED"


TERMINAL_STATUSES = frozenset(
    {
        TicketStatus.FAILED_NO_ARTISANS,
        TicketStatus.COMPLETED,
        TicketStatus.CANCELLED,
        TicketStatus.DISPUTED,
    }
)

# Outcomes an artisan may report when closing a matched job.
REPORTABLE_OUTCOMES = frozenset({TicketStatus.COMPLETED, TicketStatus.CANCELLED})


@dataclass(frozen=True)
class JobTicket:
    """Represents one service request and its dispatch state."""

    job_id: int
    client_identity: str
    category: str
    location: str
    description: str
    status: TicketStatus
    notified_artisans: list[str] = field(default_factory=list)
    awarded_artisan: str | None = None
    reported_status: TicketStatus | None = None
    created_at: datetime | None = None


class ClaimOutcome(StrEnum):
    """Result of an artisan's attempt to claim a broadcast job."""

    CLAIMED = "CLAIMED"
    INVALID_JOB = "INVALID_JOB"
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    BUSY = "BUSY"
