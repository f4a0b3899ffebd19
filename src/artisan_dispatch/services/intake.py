"""Client intake dialogue: menu, category, location, description, enquiry."""

import logging
from dataclasses import dataclass

from artisan_dispatch import replies
from artisan_dispatch.adapters.whatsapp_client import WhatsAppClient
from artisan_dispatch.domain.errors import UnknownSessionStateError
from artisan_dispatch.domain.events import Turn
from artisan_dispatch.domain.sessions import (
    AwaitingCategory,
    AwaitingDescription,
    AwaitingIntakeType,
    AwaitingLocation,
    EnquiryMode,
    Idle,
)
from artisan_dispatch.domain.tickets import TicketStatus
from artisan_dispatch.services.audit import AuditService
from artisan_dispatch.services.broadcast import DispatchBroadcaster
from artisan_dispatch.services.enquiries import EnquiryService
from artisan_dispatch.services.sessions import SessionService
from artisan_dispatch.services.tickets import TicketRepository

logger = logging.getLogger(__name__)

SERVICE_CALL = "1"
ENQUIRY = "2"


@dataclass
class IntakeFunnel:
    """State handlers that walk a client from first contact to a new ticket."""

    session_service: SessionService
    ticket_repository: TicketRepository
    broadcaster: DispatchBroadcaster
    enquiry_service: EnquiryService
    audit_service: AuditService
    whatsapp_client: WhatsAppClient
    categories: dict[str, str]
    support_phone: str

    async def reset_to_menu(self, identity: str) -> None:
        """Handle the global menu/cancel command from any state."""
        self.session_service.set_state(identity, AwaitingIntakeType())
        await self._reply(identity, replies.main_menu())

    async def greet(self, turn: Turn) -> None:
        """NEW or IDLE: any message opens the intake menu."""
        self.session_service.set_state(turn.identity, AwaitingIntakeType())
        await self._reply(turn.identity, replies.welcome())

    async def choose_intake_type(self, turn: Turn) -> None:
        if turn.command == SERVICE_CALL:
            self.session_service.set_state(turn.identity, AwaitingCategory())
            await self._reply(turn.identity, replies.category_menu(self.categories))
            return
        if turn.command == ENQUIRY:
            self.session_service.set_state(turn.identity, EnquiryMode())
            await self._reply(turn.identity, replies.enquiry_prompt(self.support_phone))
            return
        await self._reply(turn.identity, replies.invalid_intake_choice())

    async def choose_category(self, turn: Turn) -> None:
        category = self.categories.get(turn.command)
        if category is None:
            await self._reply(
                turn.identity, replies.invalid_category_choice(self.categories)
            )
            return
        self.session_service.set_state(
            turn.identity, AwaitingLocation(category=category)
        )
        await self._reply(turn.identity, replies.location_prompt(category))

    async def capture_location(self, turn: Turn) -> None:
        match turn.state:
            case AwaitingLocation(category=category):
                pass
            case _:
                raise UnknownSessionStateError(turn.state.phase)
        self.session_service.set_state(
            turn.identity,
            AwaitingDescription(category=category, location=turn.text),
        )
        await self._reply(turn.identity, replies.description_prompt())

    async def capture_description(self, turn: Turn) -> None:
        """Create the ticket and hand it to the broadcaster."""
        match turn.state:
            case AwaitingDescription(category=category, location=location):
                pass
            case _:
                raise UnknownSessionStateError(turn.state.phase)
        ticket = self.ticket_repository.create_ticket(
            client_identity=turn.identity,
            category=category,
            location=location,
            description=turn.text,
        )
        self.audit_service.record_transition(
            ticket.job_id,
            actor_identity=turn.identity,
            event_type="created",
            before=None,
            after=TicketStatus.SEARCHING,
        )
        self.session_service.set_state(turn.identity, Idle())
        await self._reply(turn.identity, replies.request_received())
        logger.info(
            "Ticket created", extra={"job_id": ticket.job_id, "category": category}
        )
        await self.broadcaster.broadcast(ticket)

    async def capture_enquiry(self, turn: Turn) -> None:
        self.session_service.set_state(turn.identity, Idle())
        await self.enquiry_service.submit(turn.identity, turn.text)
        await self._reply(turn.identity, replies.enquiry_received(self.support_phone))

    async def _reply(self, identity: str, text: str) -> None:
        await self.whatsapp_client.send_message(identity, text)
