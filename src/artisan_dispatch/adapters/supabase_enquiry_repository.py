"""Supabase repository for client enquiries."""

from dataclasses import dataclass

from supabase import Client

from artisan_dispatch.services.enquiries import EnquiryRepository


@dataclass
class SupabaseEnquiryRepository(EnquiryRepository):
    """Supabase-backed enquiry repository."""

    client: Client

    def create_enquiry(self, identity: str, body: str) -> None:
        """Insert an enquiry row."""
        self.client.table("enquiries").insert(
            {"identity": identity, "body": body}
        ).execute()
