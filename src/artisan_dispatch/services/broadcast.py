"""Fan-out of new jobs to eligible artisans."""

import logging
from dataclasses import dataclass

from artisan_dispatch import replies
from artisan_dispatch.adapters.whatsapp_client import WhatsAppClient
from artisan_dispatch.domain.tickets import JobTicket, TicketStatus
from artisan_dispatch.services.artisans import ArtisanRepository
from artisan_dispatch.services.audit import AuditService
from artisan_dispatch.services.tickets import TicketRepository

logger = logging.getLogger(__name__)


@dataclass
class DispatchBroadcaster:
    """Offer a new job to a bounded set of available artisans."""

    ticket_repository: TicketRepository
    artisan_repository: ArtisanRepository
    audit_service: AuditService
    whatsapp_client: WhatsAppClient
    support_phone: str
    limit: int = 3

    async def broadcast(self, ticket: JobTicket) -> JobTicket | None:
        """Move a SEARCHING ticket to BROADCASTED or FAILED_NO_ARTISANS.

        Returns the updated ticket, or None when the ticket had already left
        SEARCHING.
        """
        artisans = self.artisan_repository.list_available(
            ticket.category, limit=self.limit
        )
        # Some stores key profiles per category, so one identity may repeat.
        identities = list(dict.fromkeys(artisan.identity for artisan in artisans))

        if not identities:
            failed = self.ticket_repository.transition(
                ticket.job_id,
                expected=TicketStatus.SEARCHING,
                changes={"status": TicketStatus.FAILED_NO_ARTISANS},
            )
            if failed is None:
                return None
            self.audit_service.record_transition(
                ticket.job_id,
                actor_identity=ticket.client_identity,
                event_type="no_artisans",
                before=TicketStatus.SEARCHING,
                after=TicketStatus.FAILED_NO_ARTISANS,
            )
            logger.warning(
                "No available artisans",
                extra={"job_id": ticket.job_id, "category": ticket.category},
            )
            await self.whatsapp_client.send_message(
                ticket.client_identity,
                replies.no_artisans_available(self.support_phone),
            )
            return failed

        broadcasted = self.ticket_repository.transition(
            ticket.job_id,
            expected=TicketStatus.SEARCHING,
            changes={
                "status": TicketStatus.BROADCASTED,
                "notified_artisans": identities,
            },
        )
        if broadcasted is None:
            return None
        self.audit_service.record_transition(
            ticket.job_id,
            actor_identity=ticket.client_identity,
            event_type="broadcasted",
            before=TicketStatus.SEARCHING,
            after=TicketStatus.BROADCASTED,
        )
        logger.info(
            "Broadcasting job",
            extra={
                "job_id": ticket.job_id,
                "category": ticket.category,
                "recipients": len(identities),
            },
        )
        alert = replies.job_alert(broadcasted)
        for identity in identities:
            await self.whatsapp_client.send_message(identity, alert)
        return broadcasted
