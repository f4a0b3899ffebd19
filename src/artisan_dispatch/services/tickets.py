"""Persistence interface for job tickets."""

from typing import Protocol

from artisan_dispatch.domain.tickets import JobTicket, TicketStatus


class TicketRepository(Protocol):
    """Persistence interface for job tickets."""

    def create_ticket(
        self, client_identity: str, category: str, location: str, description: str
    ) -> JobTicket:
        """Create a ticket in SEARCHING and return it."""

    def get_ticket(self, job_id: int) -> JobTicket | None:
        """Return a ticket by id, if present."""

    def transition(
        self, job_id: int, expected: TicketStatus, changes: dict[str, object]
    ) -> JobTicket | None:
        """Apply changes iff the ticket's status equals expected.

        Must be a single conditional write against the store, never a read
        followed by a write. Returns the updated ticket, or None when no row
        matched (unknown id, or the status already moved on).
        """
