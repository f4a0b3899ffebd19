"""Shared test fixtures."""

import asyncio
import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

import pytest

from artisan_dispatch.adapters.whatsapp_client import WhatsAppClient
from artisan_dispatch.config import Settings, parse_categories
from artisan_dispatch.containers import AppContainer
from artisan_dispatch.domain.artisans import ArtisanProfile
from artisan_dispatch.domain.events import InboundEvent
from artisan_dispatch.domain.sessions import SessionRecord
from artisan_dispatch.domain.tickets import JobTicket, TicketStatus
from artisan_dispatch.services.admin import AdminRepository, AdminService
from artisan_dispatch.services.artisans import ArtisanRepository
from artisan_dispatch.services.audit import AuditRepository, AuditService
from artisan_dispatch.services.broadcast import DispatchBroadcaster
from artisan_dispatch.services.claims import ClaimArbitrator
from artisan_dispatch.services.enquiries import EnquiryRepository, EnquiryService
from artisan_dispatch.services.intake import IntakeFunnel
from artisan_dispatch.services.router import MessageRouter
from artisan_dispatch.services.sessions import SessionRepository, SessionService
from artisan_dispatch.services.tickets import TicketRepository
from artisan_dispatch.services.workflow import JobWorkflow

CLIENT = "2348011111111"
ARTISAN = "2348022222222"
OTHER_ARTISAN = "2348033333333"
SUPPORT = "2348000000001"
SUPPORT_PHONE = "09045955670"


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository for tests."""

    sessions: dict[str, SessionRecord] = field(default_factory=dict)
    touched: list[tuple[str, str]] = field(default_factory=list)

    def get_session(self, identity: str) -> SessionRecord | None:
        return self.sessions.get(identity)

    def create_session(
        self, identity: str, status: str, context: dict[str, object]
    ) -> SessionRecord:
        record = SessionRecord(
            identity=identity,
            status=status,
            context=dict(context),
            updated_at=datetime.now(tz=UTC),
        )
        self.sessions[identity] = record
        return record

    def touch(self, identity: str, last_message: str) -> None:
        self.touched.append((identity, last_message))
        record = self.sessions[identity]
        self.sessions[identity] = replace(record, last_message=last_message)

    def save_state(
        self, identity: str, status: str, context: dict[str, object]
    ) -> None:
        existing = self.sessions.get(identity)
        self.sessions[identity] = SessionRecord(
            identity=identity,
            status=status,
            context=dict(context),
            last_message=existing.last_message if existing else None,
            updated_at=datetime.now(tz=UTC),
        )


@dataclass
class InMemoryTicketRepository(TicketRepository):
    """In-memory ticket repository whose transition is a locked compare-and-set."""

    tickets: dict[int, JobTicket] = field(default_factory=dict)
    next_id: int = 1
    lock: threading.Lock = field(default_factory=threading.Lock)

    def create_ticket(
        self, client_identity: str, category: str, location: str, description: str
    ) -> JobTicket:
        with self.lock:
            ticket = JobTicket(
                job_id=self.next_id,
                client_identity=client_identity,
                category=category,
                location=location,
                description=description,
                status=TicketStatus.SEARCHING,
                created_at=datetime.now(tz=UTC),
            )
            self.tickets[ticket.job_id] = ticket
            self.next_id += 1
            return ticket

    def get_ticket(self, job_id: int) -> JobTicket | None:
        return self.tickets.get(job_id)

    def transition(
        self, job_id: int, expected: TicketStatus, changes: dict[str, object]
    ) -> JobTicket | None:
        with self.lock:
            current = self.tickets.get(job_id)
            if current is None or current.status != expected:
                return None
            updated = replace(current, **changes)
            self.tickets[job_id] = updated
            return updated

    def add(self, ticket: JobTicket) -> JobTicket:
        self.tickets[ticket.job_id] = ticket
        self.next_id = max(self.next_id, ticket.job_id + 1)
        return ticket


@dataclass
class InMemoryArtisanRepository(ArtisanRepository):
    """In-memory artisan listings."""

    profiles: list[ArtisanProfile] = field(default_factory=list)

    def list_available(self, category: str, limit: int) -> list[ArtisanProfile]:
        matches = [
            profile
            for profile in self.profiles
            if profile.category == category and profile.is_available
        ]
        return matches[:limit]

    def get_profile(
        self, identity: str, category: str | None = None
    ) -> ArtisanProfile | None:
        for profile in self.profiles:
            if profile.identity != identity:
                continue
            if category is None or profile.category == category:
                return profile
        return None

    def set_availability(self, identity: str, available: bool) -> None:
        self.profiles = [
            replace(profile, is_available=available)
            if profile.identity == identity
            else profile
            for profile in self.profiles
        ]

    def is_available(self, identity: str) -> bool:
        return any(
            profile.is_available
            for profile in self.profiles
            if profile.identity == identity
        )


@dataclass
class InMemoryEnquiryRepository(EnquiryRepository):
    """In-memory enquiry store."""

    enquiries: list[dict[str, object]] = field(default_factory=list)

    def create_enquiry(self, identity: str, body: str) -> None:
        self.enquiries.append(
            {
                "identity": identity,
                "body": body,
                "created_at": datetime.now(tz=UTC).isoformat(),
            }
        )


@dataclass
class InMemoryAuditRepository(AuditRepository):
    """In-memory audit repository for tests."""

    events: list[dict[str, object]] = field(default_factory=list)

    def create_event(  # noqa: PLR0913
        self,
        job_id: int,
        actor_identity: str,
        event_type: str,
        before_status: str | None,
        after_status: str,
    ) -> None:
        self.events.append(
            {
                "job_id": job_id,
                "actor_identity": actor_identity,
                "event_type": event_type,
                "before_status": before_status,
                "after_status": after_status,
            }
        )

    def event_types(self, job_id: int) -> list[str]:
        return [
            str(event["event_type"])
            for event in self.events
            if event["job_id"] == job_id
        ]


@dataclass
class InMemoryAdminRepository(AdminRepository):
    """Admin queries answered from the other in-memory repositories."""

    ticket_repository: InMemoryTicketRepository
    session_repository: InMemorySessionRepository
    enquiry_repository: InMemoryEnquiryRepository
    audit_repository: InMemoryAuditRepository

    def list_tickets(
        self,
        statuses: list[TicketStatus] | None,
        limit: int,
        created_before: datetime | None = None,
    ) -> list[JobTicket]:
        tickets = [
            ticket
            for ticket in self.ticket_repository.tickets.values()
            if (not statuses or ticket.status in statuses)
            and (created_before is None or _created_before(ticket, created_before))
        ]
        tickets.sort(key=lambda ticket: ticket.job_id, reverse=True)
        return tickets[:limit]

    def list_sessions(self, limit: int) -> list[SessionRecord]:
        return list(self.session_repository.sessions.values())[:limit]

    def list_enquiries(self, limit: int) -> list[dict[str, object]]:
        return list(reversed(self.enquiry_repository.enquiries))[:limit]

    def list_ticket_events(self, job_id: int, limit: int) -> list[dict[str, object]]:
        return [
            event
            for event in self.audit_repository.events
            if event["job_id"] == job_id
        ][:limit]


def _created_before(ticket: JobTicket, cutoff: datetime) -> bool:
    return ticket.created_at is not None and ticket.created_at < cutoff


@dataclass
class FakeWhatsAppClient(WhatsAppClient):
    """Fake WhatsApp client that records messages."""

    messages: list[tuple[str, str]] = field(default_factory=list)
    failing_recipients: set[str] = field(default_factory=set)

    async def send_message(self, to: str, text: str) -> None:
        if to in self.failing_recipients:
            raise RuntimeError(f"delivery to {to} failed")
        self.messages.append((to, text))

    def texts_for(self, identity: str) -> list[str]:
        return [text for to, text in self.messages if to == identity]

    def last_text(self, identity: str) -> str:
        texts = self.texts_for(identity)
        assert texts, f"no messages sent to {identity}"
        return texts[-1]


def make_artisan(
    identity: str = ARTISAN,
    name: str = "Tunde Electric",
    category: str = "Electrical",
    rating: float | None = 4.5,
    is_available: bool = True,
) -> ArtisanProfile:
    return ArtisanProfile(
        identity=identity,
        name=name,
        category=category,
        rating=rating,
        is_available=is_available,
    )


def make_ticket(  # noqa: PLR0913
    job_id: int = 1,
    status: TicketStatus = TicketStatus.BROADCASTED,
    client_identity: str = CLIENT,
    category: str = "Electrical",
    awarded_artisan: str | None = None,
    reported_status: TicketStatus | None = None,
    created_at: datetime | None = None,
) -> JobTicket:
    return JobTicket(
        job_id=job_id,
        client_identity=client_identity,
        category=category,
        location="Block A, Campus Hostel",
        description="Sparking wall socket",
        status=status,
        notified_artisans=[ARTISAN, OTHER_ARTISAN],
        awarded_artisan=awarded_artisan,
        reported_status=reported_status,
        created_at=created_at or datetime.now(tz=UTC),
    )


def send(
    router: MessageRouter, identity: str, body: str, message_id: str | None = None
) -> None:
    """Deliver one inbound message through the router."""
    asyncio.run(
        router.handle(
            InboundEvent(sender_identity=identity, body=body, message_id=message_id)
        )
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
        whatsapp_access_token="wa-token",
        whatsapp_phone_number_id="1234567890",
        whatsapp_verify_token="verify-me",
        admin_token="admin-token",
        support_identity=SUPPORT,
        support_phone_display=SUPPORT_PHONE,
        service_categories="Electrical,Plumbing,Carpentry",
    )


@pytest.fixture
def session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def ticket_repository() -> InMemoryTicketRepository:
    return InMemoryTicketRepository()


@pytest.fixture
def artisan_repository() -> InMemoryArtisanRepository:
    return InMemoryArtisanRepository(
        profiles=[
            make_artisan(),
            make_artisan(identity=OTHER_ARTISAN, name="Ada Sparks", rating=None),
            make_artisan(
                identity="2348044444444", name="Pipe Pros", category="Plumbing"
            ),
        ]
    )


@pytest.fixture
def audit_repository() -> InMemoryAuditRepository:
    return InMemoryAuditRepository()


@pytest.fixture
def enquiry_repository() -> InMemoryEnquiryRepository:
    return InMemoryEnquiryRepository()


@pytest.fixture
def whatsapp_client() -> FakeWhatsAppClient:
    return FakeWhatsAppClient()


@pytest.fixture
def session_service(session_repository: InMemorySessionRepository) -> SessionService:
    return SessionService(session_repository)


@pytest.fixture
def audit_service(audit_repository: InMemoryAuditRepository) -> AuditService:
    return AuditService(audit_repository)


@pytest.fixture
def broadcaster(
    ticket_repository: InMemoryTicketRepository,
    artisan_repository: InMemoryArtisanRepository,
    audit_service: AuditService,
    whatsapp_client: FakeWhatsAppClient,
) -> DispatchBroadcaster:
    return DispatchBroadcaster(
        ticket_repository=ticket_repository,
        artisan_repository=artisan_repository,
        audit_service=audit_service,
        whatsapp_client=whatsapp_client,
        support_phone=SUPPORT_PHONE,
        limit=3,
    )


@pytest.fixture
def claims(
    ticket_repository: InMemoryTicketRepository,
    artisan_repository: InMemoryArtisanRepository,
    session_service: SessionService,
    audit_service: AuditService,
    whatsapp_client: FakeWhatsAppClient,
) -> ClaimArbitrator:
    return ClaimArbitrator(
        ticket_repository=ticket_repository,
        artisan_repository=artisan_repository,
        session_service=session_service,
        audit_service=audit_service,
        whatsapp_client=whatsapp_client,
    )


@pytest.fixture
def workflow(
    ticket_repository: InMemoryTicketRepository,
    artisan_repository: InMemoryArtisanRepository,
    session_service: SessionService,
    audit_service: AuditService,
    whatsapp_client: FakeWhatsAppClient,
) -> JobWorkflow:
    return JobWorkflow(
        ticket_repository=ticket_repository,
        artisan_repository=artisan_repository,
        session_service=session_service,
        audit_service=audit_service,
        whatsapp_client=whatsapp_client,
        support_phone=SUPPORT_PHONE,
        support_identity=SUPPORT,
    )


@pytest.fixture
def intake(  # noqa: PLR0913
    settings: Settings,
    session_service: SessionService,
    ticket_repository: InMemoryTicketRepository,
    broadcaster: DispatchBroadcaster,
    enquiry_repository: InMemoryEnquiryRepository,
    audit_service: AuditService,
    whatsapp_client: FakeWhatsAppClient,
) -> IntakeFunnel:
    return IntakeFunnel(
        session_service=session_service,
        ticket_repository=ticket_repository,
        broadcaster=broadcaster,
        enquiry_service=EnquiryService(
            repository=enquiry_repository,
            whatsapp_client=whatsapp_client,
            support_identity=settings.support_identity,
        ),
        audit_service=audit_service,
        whatsapp_client=whatsapp_client,
        categories=parse_categories(settings.service_categories),
        support_phone=SUPPORT_PHONE,
    )


@pytest.fixture
def router(
    session_service: SessionService,
    intake: IntakeFunnel,
    claims: ClaimArbitrator,
    workflow: JobWorkflow,
    whatsapp_client: FakeWhatsAppClient,
) -> MessageRouter:
    return MessageRouter(
        session_service=session_service,
        intake=intake,
        claims=claims,
        workflow=workflow,
        whatsapp_client=whatsapp_client,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    session_service: SessionService,
    router: MessageRouter,
    whatsapp_client: FakeWhatsAppClient,
    ticket_repository: InMemoryTicketRepository,
    session_repository: InMemorySessionRepository,
    enquiry_repository: InMemoryEnquiryRepository,
    audit_repository: InMemoryAuditRepository,
) -> AppContainer:
    admin_service = AdminService(
        admin_repository=InMemoryAdminRepository(
            ticket_repository=ticket_repository,
            session_repository=session_repository,
            enquiry_repository=enquiry_repository,
            audit_repository=audit_repository,
        ),
        ticket_repository=ticket_repository,
        stale_after_minutes=settings.stale_ticket_minutes,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        whatsapp_client=whatsapp_client,
        session_service=session_service,
        router=router,
        admin_service=admin_service,
        close_resources=close_resources,
    )
