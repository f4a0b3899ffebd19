"""Supabase repository for ticket events."""

from dataclasses import dataclass

from supabase import Client

from artisan_dispatch.services.audit import AuditRepository


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Supabase-backed audit repository."""

    client: Client

    def create_event(  # noqa: PLR0913
        self,
        job_id: int,
        actor_identity: str,
        event_type: str,
        before_status: str | None,
        after_status: str,
    ) -> None:
        """Create a ticket event row."""
        self.client.table("ticket_events").insert(
            {
                "job_id": job_id,
                "actor_identity": actor_identity,
                "event_type": event_type,
                "before_status": before_status,
                "after_status": after_status,
            }
        ).execute()
