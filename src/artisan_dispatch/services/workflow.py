"""Double opt-in approval, completion reporting and client verification."""

import logging
from dataclasses import dataclass

from artisan_dispatch import replies
from artisan_dispatch.adapters.whatsapp_client import WhatsAppClient
from artisan_dispatch.domain.errors import UnknownSessionStateError
from artisan_dispatch.domain.events import Turn
from artisan_dispatch.domain.sessions import (
    ActiveJob,
    AwaitingApproval,
    Idle,
    VerifyingJob,
)
from artisan_dispatch.domain.tickets import TicketStatus
from artisan_dispatch.services.artisans import ArtisanRepository
from artisan_dispatch.services.audit import AuditService
from artisan_dispatch.services.commands import is_affirmative
from artisan_dispatch.services.sessions import SessionService
from artisan_dispatch.services.tickets import TicketRepository

logger = logging.getLogger(__name__)

REPORT_CODES: dict[str, TicketStatus] = {
    "1": TicketStatus.COMPLETED,
    "COMPLETED": TicketStatus.COMPLETED,
    "2": TicketStatus.CANCELLED,
    "CANCELLED": TicketStatus.CANCELLED,
}

CONFIRM = "1"
DISPUTE = "2"


@dataclass
class JobWorkflow:
    """Ticket transitions driven by the client and the awarded artisan."""

    ticket_repository: TicketRepository
    artisan_repository: ArtisanRepository
    session_service: SessionService
    audit_service: AuditService
    whatsapp_client: WhatsAppClient
    support_phone: str
    support_identity: str | None = None

    async def decide_approval(self, turn: Turn) -> None:
        """Client in AWAITING_APPROVAL answers YES or anything else."""
        match turn.state:
            case AwaitingApproval(job_id=job_id):
                pass
            case _:
                raise UnknownSessionStateError(turn.state.phase)

        if not is_affirmative(turn.command):
            # The ticket stays in PENDING_CLIENT_APPROVAL; nothing reopens it.
            self.session_service.set_state(turn.identity, Idle())
            logger.info("Client declined artisan", extra={"job_id": job_id})
            await self._send(turn.identity, replies.approval_declined())
            return

        ticket = self.ticket_repository.transition(
            job_id,
            expected=TicketStatus.PENDING_CLIENT_APPROVAL,
            changes={"status": TicketStatus.MATCHED},
        )
        self.session_service.set_state(turn.identity, Idle())
        if ticket is None or ticket.awarded_artisan is None:
            await self._send(turn.identity, replies.approval_unavailable())
            return

        self.audit_service.record_transition(
            job_id,
            actor_identity=turn.identity,
            event_type="approved",
            before=TicketStatus.PENDING_CLIENT_APPROVAL,
            after=TicketStatus.MATCHED,
        )
        artisan = ticket.awarded_artisan
        self.artisan_repository.set_availability(artisan, available=False)
        self.session_service.set_state(artisan, ActiveJob(job_id=job_id))
        await self._send(
            turn.identity, replies.match_confirmed(ticket, self.support_phone)
        )
        await self._send(artisan, replies.job_approved(ticket))

    async def report_outcome(self, turn: Turn) -> None:
        """Artisan in ACTIVE_JOB closes the job as completed or cancelled."""
        match turn.state:
            case ActiveJob(job_id=job_id):
                pass
            case _:
                raise UnknownSessionStateError(turn.state.phase)

        outcome = REPORT_CODES.get(turn.command)
        if outcome is None:
            await self._send(turn.identity, replies.report_prompt(job_id))
            return

        ticket = self.ticket_repository.transition(
            job_id,
            expected=TicketStatus.MATCHED,
            changes={
                "status": TicketStatus.PENDING_VERIFICATION,
                "reported_status": outcome,
            },
        )
        self.artisan_repository.set_availability(turn.identity, available=True)
        self.session_service.set_state(turn.identity, Idle())
        if ticket is None:
            await self._send(turn.identity, replies.report_rejected())
            return

        self.audit_service.record_transition(
            job_id,
            actor_identity=turn.identity,
            event_type="reported",
            before=TicketStatus.MATCHED,
            after=TicketStatus.PENDING_VERIFICATION,
        )
        self.session_service.set_state(
            ticket.client_identity,
            VerifyingJob(job_id=job_id, reported_status=outcome),
        )
        await self._send(turn.identity, replies.report_received(outcome))
        await self._send(
            ticket.client_identity, replies.verification_prompt(job_id, outcome)
        )

    async def verify_outcome(self, turn: Turn) -> None:
        """Client in VERIFYING_JOB confirms or disputes the artisan's report."""
        match turn.state:
            case VerifyingJob(job_id=job_id, reported_status=reported):
                pass
            case _:
                raise UnknownSessionStateError(turn.state.phase)

        if turn.command == CONFIRM:
            final = reported
        elif turn.command == DISPUTE:
            final = TicketStatus.DISPUTED
        else:
            await self._send(
                turn.identity, replies.verification_prompt(job_id, reported)
            )
            return

        ticket = self.ticket_repository.transition(
            job_id,
            expected=TicketStatus.PENDING_VERIFICATION,
            changes={"status": final},
        )
        self.session_service.set_state(turn.identity, Idle())
        if ticket is None:
            await self._send(turn.identity, replies.verification_unavailable())
            return

        self.audit_service.record_transition(
            job_id,
            actor_identity=turn.identity,
            event_type="disputed" if final == TicketStatus.DISPUTED else "verified",
            before=TicketStatus.PENDING_VERIFICATION,
            after=final,
        )
        if final != TicketStatus.DISPUTED:
            await self._send(
                turn.identity, replies.verification_confirmed(job_id, reported)
            )
            return

        logger.warning("Job disputed", extra={"job_id": job_id})
        await self._send(
            turn.identity, replies.dispute_recorded(job_id, self.support_phone)
        )
        if self.support_identity:
            await self._send(self.support_identity, replies.dispute_alert(ticket))

    async def _send(self, identity: str, text: str) -> None:
        await self.whatsapp_client.send_message(identity, text)
