"""Admin service for operator reporting."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

from artisan_dispatch.domain.sessions import SessionRecord
from artisan_dispatch.domain.tickets import JobTicket, TicketStatus
from artisan_dispatch.services.tickets import TicketRepository

# Tickets that wait on someone else and never expire on their own.
STALE_STATUSES = (TicketStatus.BROADCASTED, TicketStatus.PENDING_CLIENT_APPROVAL)


class AdminRepository(Protocol):
    """Persistence interface for admin data."""

    def list_tickets(
        self,
        statuses: list[TicketStatus] | None,
        limit: int,
        created_before: datetime | None = None,
    ) -> list[JobTicket]:
        """Return recent tickets, optionally filtered by status and age."""

    def list_sessions(self, limit: int) -> list[SessionRecord]:
        """Return recently updated sessions."""

    def list_enquiries(self, limit: int) -> list[dict[str, object]]:
        """Return recent enquiries."""

    def list_ticket_events(self, job_id: int, limit: int) -> list[dict[str, object]]:
        """Return audit events for a ticket."""


@dataclass
class AdminService:
    """Service for admin dashboards."""

    admin_repository: AdminRepository
    ticket_repository: TicketRepository
    stale_after_minutes: int = 60

    def list_tickets(
        self, status: TicketStatus | None = None, limit: int = 50
    ) -> list[dict[str, object]]:
        """Return recent tickets."""
        statuses = [status] if status else None
        tickets = self.admin_repository.list_tickets(statuses, limit)
        return [_serialize_ticket(ticket) for ticket in tickets]

    def list_stale_tickets(
        self, minutes: int | None = None, limit: int = 50
    ) -> list[dict[str, object]]:
        """Return claimable or approvable tickets older than the threshold."""
        threshold = minutes if minutes is not None else self.stale_after_minutes
        cutoff = datetime.now(tz=UTC) - timedelta(minutes=threshold)
        tickets = self.admin_repository.list_tickets(
            list(STALE_STATUSES), limit, created_before=cutoff
        )
        return [_serialize_ticket(ticket) for ticket in tickets]

    def get_ticket_detail(self, job_id: int) -> dict[str, object] | None:
        """Return a ticket with its audit trail."""
        ticket = self.ticket_repository.get_ticket(job_id)
        if ticket is None:
            return None
        return {
            "ticket": _serialize_ticket(ticket),
            "events": self.admin_repository.list_ticket_events(job_id, limit=50),
        }

    def list_sessions(self, limit: int = 20) -> list[dict[str, object]]:
        """Return recent sessions."""
        return [
            _serialize_session(record)
            for record in self.admin_repository.list_sessions(limit)
        ]

    def list_enquiries(self, limit: int = 20) -> list[dict[str, object]]:
        """Return recent enquiries."""
        return self.admin_repository.list_enquiries(limit)


def _serialize_ticket(ticket: JobTicket) -> dict[str, object]:
    return {
        "job_id": ticket.job_id,
        "client_identity": ticket.client_identity,
        "category": ticket.category,
        "location": ticket.location,
        "description": ticket.description,
        "status": ticket.status.value,
        "notified_artisans": list(ticket.notified_artisans),
        "awarded_artisan": ticket.awarded_artisan,
        "reported_status": ticket.reported_status.value
        if ticket.reported_status
        else None,
        "created_at": ticket.created_at.isoformat() if ticket.created_at else None,
    }


def _serialize_session(record: SessionRecord) -> dict[str, object]:
    return {
        "identity": record.identity,
        "status": record.status,
        "context": record.context,
        "last_message": record.last_message,
        "updated_at": record.updated_at.isoformat() if record.updated_at else None,
    }
