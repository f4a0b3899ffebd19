"""Supabase-backed job ticket repository."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from supabase import Client

from artisan_dispatch.domain.errors import StoreError
from artisan_dispatch.domain.tickets import JobTicket, TicketStatus
from artisan_dispatch.services.tickets import TicketRepository

TICKET_COLUMNS = (
    "job_id, client_identity, category, location, description, status, "
    "notified_artisans, awarded_artisan, reported_status, created_at"
)


@dataclass
class SupabaseTicketRepository(TicketRepository):
    """Supabase implementation for job tickets."""

    client: Client

    def create_ticket(
        self, client_identity: str, category: str, location: str, description: str
    ) -> JobTicket:
        """Insert a SEARCHING ticket; the store assigns job_id."""
        response = (
            self.client.table("job_tickets")
            .insert(
                {
                    "client_identity": client_identity,
                    "category": category,
                    "location": location,
                    "description": description,
                    "status": TicketStatus.SEARCHING.value,
                }
            )
            .execute()
        )
        if not response.data:
            raise StoreError("Failed to create job ticket")
        return parse_ticket_row(response.data[0])

    def get_ticket(self, job_id: int) -> JobTicket | None:
        """Return a ticket by id, if present."""
        response = (
            self.client.table("job_tickets")
            .select(TICKET_COLUMNS)
            .eq("job_id", job_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_ticket_row(response.data[0])

    def transition(
        self, job_id: int, expected: TicketStatus, changes: dict[str, object]
    ) -> JobTicket | None:
        """Conditional UPDATE ... WHERE job_id = ? AND status = ?.

        PostgREST runs this as one statement and returns only the rows it
        changed, so an empty result means another writer got there first.
        """
        response = (
            self.client.table("job_tickets")
            .update(_to_columns(changes))
            .eq("job_id", job_id)
            .eq("status", expected.value)
            .execute()
        )
        if not response.data:
            return None
        return parse_ticket_row(response.data[0])


def parse_ticket_row(row: dict[str, object]) -> JobTicket:
    """Build a JobTicket from a job_tickets row."""
    created_raw = row.get("created_at")
    reported_raw = row.get("reported_status")
    notified = row.get("notified_artisans") or []
    return JobTicket(
        job_id=int(row["job_id"]),
        client_identity=str(row["client_identity"]),
        category=str(row["category"]),
        location=str(row.get("location") or ""),
        description=str(row.get("description") or ""),
        status=TicketStatus(row["status"]),
        notified_artisans=[str(identity) for identity in notified],
        awarded_artisan=row.get("awarded_artisan"),
        reported_status=TicketStatus(reported_raw) if reported_raw else None,
        created_at=(
            datetime.fromisoformat(created_raw)
            if isinstance(created_raw, str) and created_raw
            else None
        ),
    )


def _to_columns(changes: dict[str, object]) -> dict[str, object]:
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in changes.items()
    }
