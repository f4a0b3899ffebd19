"""Supabase admin data access."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from artisan_dispatch.adapters.supabase_session_repository import (
    SESSION_COLUMNS,
    parse_session_row,
)
from artisan_dispatch.adapters.supabase_ticket_repository import (
    TICKET_COLUMNS,
    parse_ticket_row,
)
from artisan_dispatch.domain.sessions import SessionRecord
from artisan_dispatch.domain.tickets import JobTicket, TicketStatus
from artisan_dispatch.services.admin import AdminRepository


@dataclass
class SupabaseAdminRepository(AdminRepository):
    """Supabase implementation for admin queries."""

    client: Client

    def list_tickets(
        self,
        statuses: list[TicketStatus] | None,
        limit: int,
        created_before: datetime | None = None,
    ) -> list[JobTicket]:
        """Return tickets newest first."""
        query = self.client.table("job_tickets").select(TICKET_COLUMNS)
        if statuses:
            query = query.in_("status", [status.value for status in statuses])
        if created_before is not None:
            query = query.lt("created_at", created_before.isoformat())
        response = query.order("created_at", desc=True).limit(limit).execute()
        return [parse_ticket_row(row) for row in response.data or []]

    def list_sessions(self, limit: int) -> list[SessionRecord]:
        """Return recently updated sessions."""
        response = (
            self.client.table("actor_sessions")
            .select(SESSION_COLUMNS)
            .order("updated_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [parse_session_row(row) for row in response.data or []]

    def list_enquiries(self, limit: int) -> list[dict[str, object]]:
        """Return recent enquiries."""
        response = (
            self.client.table("enquiries")
            .select("identity, body, created_at")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data or []

    def list_ticket_events(self, job_id: int, limit: int) -> list[dict[str, object]]:
        """Return audit events for a ticket, oldest first."""
        response = (
            self.client.table("ticket_events")
            .select("*")
            .eq("job_id", job_id)
            .order("created_at")
            .limit(limit)
            .execute()
        )
        return response.data or []
