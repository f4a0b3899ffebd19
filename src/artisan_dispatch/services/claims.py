"""First-accept-wins arbitration of broadcast jobs."""

import logging
from dataclasses import dataclass

from artisan_dispatch import replies
from artisan_dispatch.adapters.whatsapp_client import WhatsAppClient
from artisan_dispatch.domain.sessions import ActiveJob, AwaitingApproval
from artisan_dispatch.domain.tickets import ClaimOutcome, JobTicket, TicketStatus
from artisan_dispatch.services.artisans import ArtisanRepository
from artisan_dispatch.services.audit import AuditService
from artisan_dispatch.services.commands import parse_job_id
from artisan_dispatch.services.sessions import SessionService
from artisan_dispatch.services.tickets import TicketRepository

logger = logging.getLogger(__name__)


@dataclass
class ClaimArbitrator:
    """Award a broadcast job to exactly one artisan."""

    ticket_repository: TicketRepository
    artisan_repository: ArtisanRepository
    session_service: SessionService
    audit_service: AuditService
    whatsapp_client: WhatsAppClient

    def try_claim(
        self, job_id: int, artisan_identity: str
    ) -> tuple[ClaimOutcome, JobTicket | None]:
        """Attempt the BROADCASTED -> PENDING_CLIENT_APPROVAL transition."""
        claimed = self.ticket_repository.transition(
            job_id,
            expected=TicketStatus.BROADCASTED,
            changes={
                "status": TicketStatus.PENDING_CLIENT_APPROVAL,
                "awarded_artisan": artisan_identity,
            },
        )
        if claimed is None:
            # Read only to pick the right rejection; nothing is written.
            if self.ticket_repository.get_ticket(job_id) is None:
                return ClaimOutcome.INVALID_JOB, None
            return ClaimOutcome.ALREADY_CLAIMED, None
        self.audit_service.record_transition(
            job_id,
            actor_identity=artisan_identity,
            event_type="claimed",
            before=TicketStatus.BROADCASTED,
            after=TicketStatus.PENDING_CLIENT_APPROVAL,
        )
        return ClaimOutcome.CLAIMED, claimed

    async def claim(self, job_token: str, artisan_identity: str) -> ClaimOutcome:
        """Arbitrate a claim and notify both parties of the result."""
        match self.session_service.get_state(artisan_identity):
            case ActiveJob(job_id=current_job):
                logger.info(
                    "Claim refused while a job is active",
                    extra={"job": job_token, "active_job": current_job},
                )
                await self.whatsapp_client.send_message(
                    artisan_identity, replies.finish_current_job(current_job)
                )
                return ClaimOutcome.BUSY
            case _:
                pass

        job_id = parse_job_id(job_token)
        if job_id is None:
            outcome, ticket = ClaimOutcome.INVALID_JOB, None
        else:
            outcome, ticket = self.try_claim(job_id, artisan_identity)
        if outcome is ClaimOutcome.INVALID_JOB:
            await self.whatsapp_client.send_message(
                artisan_identity, replies.invalid_job()
            )
            return outcome
        if outcome is ClaimOutcome.ALREADY_CLAIMED:
            logger.info(
                "Claim rejected",
                extra={"job": job_token, "artisan": artisan_identity},
            )
            await self.whatsapp_client.send_message(
                artisan_identity, replies.already_claimed()
            )
            return outcome
        if ticket is None:
            raise LookupError(f"Claim on job {job_token} returned no ticket")

        logger.info(
            "Job claimed", extra={"job_id": ticket.job_id, "artisan": artisan_identity}
        )
        await self.whatsapp_client.send_message(artisan_identity, replies.job_claimed())
        profile = self.artisan_repository.get_profile(
            artisan_identity, category=ticket.category
        )
        self.session_service.set_state(
            ticket.client_identity, AwaitingApproval(job_id=ticket.job_id)
        )
        await self.whatsapp_client.send_message(
            ticket.client_identity, replies.approval_request(ticket, profile)
        )
        return outcome
