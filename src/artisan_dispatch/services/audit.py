"""Audit trail for job ticket transitions."""

import logging
from dataclasses import dataclass
from typing import Protocol

from artisan_dispatch.domain.tickets import TicketStatus

logger = logging.getLogger(__name__)


class AuditRepository(Protocol):
    """Persistence interface for ticket events."""

    def create_event(  # noqa: PLR0913
        self,
        job_id: int,
        actor_identity: str,
        event_type: str,
        before_status: str | None,
        after_status: str,
    ) -> None:
        """Create a ticket event row."""


@dataclass
class AuditService:
    """Record every successful ticket transition."""

    repository: AuditRepository

    def record_transition(
        self,
        job_id: int,
        actor_identity: str,
        event_type: str,
        before: TicketStatus | None,
        after: TicketStatus,
    ) -> None:
        """Log a transition and persist it.

        The ticket row already holds the new status, so a failed event insert
        is logged and the caller carries on.
        """
        logger.info(
            "Ticket transition",
            extra={
                "job_id": job_id,
                "event_type": event_type,
                "before": before.value if before else None,
                "after": after.value,
            },
        )
        try:
            self.repository.create_event(
                job_id=job_id,
                actor_identity=actor_identity,
                event_type=event_type,
                before_status=before.value if before else None,
                after_status=after.value,
            )
        except Exception:
            logger.exception(
                "Failed to record ticket event",
                extra={"job_id": job_id, "event_type": event_type},
            )
