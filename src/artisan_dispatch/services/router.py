"""Top-level handling of one inbound message."""

import asyncio
import logging
from collections import Counter
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from artisan_dispatch import replies
from artisan_dispatch.adapters.whatsapp_client import WhatsAppClient
from artisan_dispatch.domain.errors import UnknownSessionStateError
from artisan_dispatch.domain.events import InboundEvent, Turn
from artisan_dispatch.domain.sessions import SessionPhase, decode_state
from artisan_dispatch.services.claims import ClaimArbitrator
from artisan_dispatch.services.commands import (
    is_global_command,
    normalize,
    parse_claim,
)
from artisan_dispatch.services.dedupe import RecentMessageCache
from artisan_dispatch.services.identity import Verdict, screen
from artisan_dispatch.services.intake import IntakeFunnel
from artisan_dispatch.services.sessions import SessionService
from artisan_dispatch.services.workflow import JobWorkflow

logger = logging.getLogger(__name__)

PhaseHandler = Callable[[Turn], Awaitable[None]]


@dataclass
class IdentityLocks:
    """One asyncio lock per identity, dropped once nobody holds or waits on it.

    Serialises messages from the same sender inside this process only.
    """

    _locks: dict[str, asyncio.Lock] = field(default_factory=dict)
    _holders: Counter[str] = field(default_factory=Counter)

    @asynccontextmanager
    async def hold(self, identity: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(identity, asyncio.Lock())
        self._holders[identity] += 1
        try:
            async with lock:
                yield
        finally:
            self._holders[identity] -= 1
            if self._holders[identity] <= 0:
                del self._holders[identity]
                self._locks.pop(identity, None)


@dataclass
class MessageRouter:
    """Select exactly one handler for each accepted inbound message."""

    session_service: SessionService
    intake: IntakeFunnel
    claims: ClaimArbitrator
    workflow: JobWorkflow
    whatsapp_client: WhatsAppClient
    recent_messages: RecentMessageCache = field(default_factory=RecentMessageCache)
    identity_locks: IdentityLocks = field(default_factory=IdentityLocks)
    handlers: dict[SessionPhase, PhaseHandler] = field(
        init=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        self.handlers = {
            SessionPhase.NEW: self.intake.greet,
            SessionPhase.IDLE: self.intake.greet,
            SessionPhase.AWAITING_INTAKE_TYPE: self.intake.choose_intake_type,
            SessionPhase.AWAITING_CATEGORY: self.intake.choose_category,
            SessionPhase.AWAITING_LOCATION: self.intake.capture_location,
            SessionPhase.AWAITING_DESC: self.intake.capture_description,
            SessionPhase.ENQUIRY_MODE: self.intake.capture_enquiry,
            SessionPhase.AWAITING_APPROVAL: self.workflow.decide_approval,
            SessionPhase.ACTIVE_JOB: self.workflow.report_outcome,
            SessionPhase.VERIFYING_JOB: self.workflow.verify_outcome,
        }

    async def handle(self, event: InboundEvent) -> None:
        """Process one inbound event as an independent unit of work."""
        verdict = screen(event)
        if verdict is Verdict.DROP:
            logger.debug(
                "Dropped inbound event", extra={"sender": event.sender_identity}
            )
            return
        if verdict is Verdict.GUIDE:
            await self._reply_safely(
                event.sender_identity, replies.EMPTY_BODY_GUIDANCE
            )
            return
        if not self.recent_messages.first_sighting(event.message_id):
            logger.info(
                "Duplicate delivery ignored",
                extra={"message_id": event.message_id},
            )
            return

        async with self.identity_locks.hold(event.sender_identity):
            try:
                await self._dispatch(event)
            except UnknownSessionStateError as exc:
                logger.error(
                    "No handler for session state",
                    extra={"sender": event.sender_identity, "status": exc.status},
                )
                await self._reply_safely(event.sender_identity, replies.SYSTEM_ERROR)
            except Exception:
                logger.exception(
                    "Failed to handle inbound message",
                    extra={"sender": event.sender_identity},
                )
                await self._reply_safely(event.sender_identity, replies.SYSTEM_ERROR)

    async def _dispatch(self, event: InboundEvent) -> None:
        identity = event.sender_identity
        text = event.body.strip()
        command = normalize(text)
        logger.info("Inbound message", extra={"sender": identity})

        record = self.session_service.load_or_create(identity, text)

        if is_global_command(command):
            await self.intake.reset_to_menu(identity)
            return

        job_token = parse_claim(command)
        if job_token is not None:
            await self.claims.claim(job_token, identity)
            return

        state = decode_state(record.status, record.context)
        handler = self.handlers.get(state.phase)
        if handler is None:
            raise UnknownSessionStateError(record.status, record.context)
        turn = Turn(identity=identity, state=state, text=text, command=command)
        await handler(turn)

    async def _reply_safely(self, identity: str, text: str) -> None:
        try:
            await self.whatsapp_client.send_message(identity, text)
        except Exception:
            logger.exception("Failed to deliver reply", extra={"sender": identity})
